"""Console output panel."""

from PyQt6.QtWidgets import QGroupBox, QPushButton, QTextEdit, QVBoxLayout

from ui.styles import FONTS, SIZES


class ConsolePanel(QGroupBox):
    """Panel showing processing and drawing progress messages."""

    def __init__(self, parent=None):
        super().__init__("Log", parent)
        self._setup_ui()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()

        self.console = QTextEdit()
        self.console.setReadOnly(True)
        self.console.setMinimumHeight(SIZES.CONSOLE_MIN_HEIGHT)
        self.console.setFont(FONTS.CONSOLE)
        layout.addWidget(self.console)

        clear_btn = QPushButton("Clear Log")
        clear_btn.clicked.connect(self.clear)
        layout.addWidget(clear_btn)

        self.setLayout(layout)

    def append(self, message: str):
        """Add a message and keep the newest line visible."""
        self.console.append(message)
        scrollbar = self.console.verticalScrollBar()
        if scrollbar:
            scrollbar.setValue(scrollbar.maximum())

    def append_error(self, message: str):
        self.append(f"❌ Error: {message}")

    def clear(self):
        """Clear all console output."""
        self.console.clear()
