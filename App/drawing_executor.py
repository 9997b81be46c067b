"""Replay stroke plans as synthesized mouse input.

AIDEV-NOTE: This is the only place that emits OS pointer events. The target
canvas keeps its own "selected color" state, so colors are drawn strictly in
palette order and a segment that has been pressed is always released before
cancellation is honoured. A partial job is never rolled back.
"""

import time
from typing import Callable, Optional

from PyQt6.QtCore import QMutex, QMutexLocker

from image_processing.utils import drawable_colors
from models import (
    DrawingConfig,
    DrawingConfigError,
    DrawingEnvironmentError,
    DrawingResult,
    StrokePlan,
)


class CancellationToken:
    """Per-job stop flag shared between the executor and the key listener."""

    def __init__(self):
        self._cancelled = False
        self._lock = QMutex()

    def cancel(self):
        with QMutexLocker(self._lock):
            self._cancelled = True

    def is_cancelled(self) -> bool:
        with QMutexLocker(self._lock):
            return self._cancelled


class PynputPointer:
    """Mouse backend synthesizing real OS input through pynput."""

    def __init__(self):
        # Import pynput here to avoid global import issues on machines
        # without a display server
        from pynput.mouse import Button, Controller

        self._button = Button.left
        self._controller = Controller()

    def move_to(self, x: float, y: float):
        self._controller.position = (int(round(x)), int(round(y)))

    def press(self):
        self._controller.press(self._button)

    def release(self):
        self._controller.release(self._button)


class CancelListener:
    """Global keyboard listener that cancels a token on the cancel key.

    ``key_name`` is either a pynput ``Key`` member name (``"esc"``,
    ``"f12"``) or a single character.
    """

    def __init__(self, token: CancellationToken, key_name: str = "esc"):
        self.token = token
        self.key_name = key_name
        self._listener = None

    def _resolve_key(self, keyboard):
        if self.key_name in keyboard.Key.__members__:
            return keyboard.Key[self.key_name]
        if len(self.key_name) == 1:
            return keyboard.KeyCode.from_char(self.key_name)
        raise DrawingConfigError(
            f"Unknown cancel key '{self.key_name}': use a key name like "
            f"'esc' or a single character"
        )

    def start(self):
        """Attach the listener and block until it is running.

        Raises:
            DrawingConfigError: If the cancel key name cannot be resolved
            DrawingEnvironmentError: If the OS refuses the keyboard hook
        """
        try:
            from pynput import keyboard
        except Exception as e:
            raise DrawingEnvironmentError(f"Could not load pynput keyboard: {e}") from e

        cancel_key = self._resolve_key(keyboard)

        def on_press(key):
            if key == cancel_key:
                print(f"⏹ Cancel key '{self.key_name}' pressed, stopping...")
                self.token.cancel()

        try:
            self._listener = keyboard.Listener(on_press=on_press)
            self._listener.start()
            self._listener.wait()
        except Exception as e:
            self._listener = None
            raise DrawingEnvironmentError(f"Could not attach key listener: {e}") from e

    def stop(self):
        if self._listener is not None:
            self._listener.stop()
            self._listener.join()
            self._listener = None


class DrawingExecutor:
    """Draws a stroke plan by clicking swatches and dragging segments."""

    def __init__(
        self,
        color_coordinates: "dict[tuple[int, int, int], tuple[float, float]]",
        pointer=None,
        listener_factory: Optional[Callable[[CancellationToken], object]] = None,
        segment_delay: float = 0.01,
        color_delay: float = 0.0,
        cancel_key: str = "esc",
    ):
        """Initialize executor.

        Args:
            color_coordinates: Palette color -> swatch screen position
            pointer: Mouse backend with move_to/press/release
                (defaults to pynput)
            listener_factory: Builds the cancel listener for a job's token
            segment_delay: Pause after each segment in seconds
            color_delay: Pause after each color pass in seconds
            cancel_key: pynput key name that cancels the job
        """
        self.color_coordinates = {
            tuple(color): pos for color, pos in color_coordinates.items()
        }
        self.pointer = pointer
        self.listener_factory = listener_factory or (
            lambda token: CancelListener(token, cancel_key)
        )
        self.segment_delay = segment_delay
        self.color_delay = color_delay

    @classmethod
    def from_config(
        cls,
        config: DrawingConfig,
        color_coordinates: "dict[tuple[int, int, int], tuple[float, float]]",
        **kwargs,
    ) -> "DrawingExecutor":
        return cls(
            color_coordinates,
            segment_delay=config.segment_delay,
            color_delay=config.color_delay,
            cancel_key=config.cancel_key,
            **kwargs,
        )

    # -------------------------------------------------------------

    def validate(self, plan: StrokePlan, palette: "list[tuple[int, int, int]]"):
        """Check every color to be drawn has a recorded swatch.

        Raises:
            DrawingConfigError: Listing the palette slots without coordinates
        """
        missing = [
            color
            for color in drawable_colors(plan, palette)
            if color not in self.color_coordinates
        ]
        if missing:
            slots = ", ".join(
                f"{palette.index(color) + 1} {color}" for color in missing
            )
            raise DrawingConfigError(f"No swatch coordinate recorded for: {slots}")

    def draw(
        self,
        plan: StrokePlan,
        palette: "list[tuple[int, int, int]]",
        token: Optional[CancellationToken] = None,
    ) -> DrawingResult:
        """Draw the plan color by color in palette order.

        Args:
            plan: Stroke plan to replay
            palette: Palette order, which fixes the color order
            token: Cancellation token for this job (created if None)

        Returns:
            DrawingResult with progress counters and cancellation state
        """
        palette = [tuple(color) for color in palette]
        self.validate(plan, palette)

        token = token or CancellationToken()
        colors = drawable_colors(plan, palette)
        result = DrawingResult()

        if self.pointer is None:
            self.pointer = self._pointer_call(PynputPointer)

        listener = self.listener_factory(token)
        listener.start()
        print(f"Drawing {plan.stroke_count} strokes in {len(colors)} colors...")

        try:
            for color in colors:
                if token.is_cancelled():
                    result.cancelled = True
                    break

                self._change_color(color)
                for segment in plan.segments_for(color):
                    if token.is_cancelled():
                        result.cancelled = True
                        break
                    self._draw_segment(segment)
                    result.segments_drawn += 1
                    self._pause(self.segment_delay)

                if result.cancelled:
                    break
                result.colors_drawn += 1
                self._pause(self.color_delay)
        finally:
            listener.stop()

        if result.cancelled:
            print(
                f"Drawing cancelled after {result.segments_drawn} segments "
                f"({result.colors_drawn}/{len(colors)} colors complete)."
            )
        else:
            print(f"✓ Drawing complete: {result.segments_drawn} segments.")
        return result

    # -------------------------------------------------------------
    # Pointer actions
    # -------------------------------------------------------------

    def _change_color(self, color: "tuple[int, int, int]"):
        """Select a color by clicking its swatch on the canvas."""
        x, y = self.color_coordinates[color]
        self._pointer_call(self.pointer.move_to, x, y)
        self._pointer_call(self.pointer.press)
        self._pointer_call(self.pointer.release)

    def _draw_segment(self, segment):
        (x0, y0), (x1, y1) = segment
        self._pointer_call(self.pointer.move_to, x0, y0)
        self._pointer_call(self.pointer.press)
        self._pointer_call(self.pointer.move_to, x1, y1)
        self._pointer_call(self.pointer.release)

    def _pointer_call(self, action, *args):
        try:
            return action(*args)
        except DrawingEnvironmentError:
            raise
        except Exception as e:
            raise DrawingEnvironmentError(f"Pointer event failed: {e}") from e

    def _pause(self, seconds: float):
        if seconds > 0:
            time.sleep(seconds)
