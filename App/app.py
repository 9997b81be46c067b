"""Drawing Bot - Main entry point."""

import sys

from PyQt6.QtWidgets import QApplication

from ui.main_window import DrawingBotWindow


def main():
    """Launch the Drawing Bot application."""
    app = QApplication(sys.argv)

    app.setApplicationDisplayName("Drawing Bot")
    app.setApplicationName("DrawingBot")

    window = DrawingBotWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
