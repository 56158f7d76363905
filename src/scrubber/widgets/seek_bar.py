"""Mouse-draggable seek bar widget."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget

if TYPE_CHECKING:
    from textual import events


class SeekBar(Widget):
    """Horizontal bar showing playback progress.

    Pressing and dragging the mouse posts Seek messages; letting go posts
    Released.
    """

    DEFAULT_CSS = """
    SeekBar {
        width: 1fr;
        height: 1;
        color: $accent;
    }
    """

    STEP = 0.1

    class Seek(Message):
        """Sent while the user drags the bar."""

        def __init__(self, seconds: float) -> None:
            """Initialize the message.

            Args:
                seconds: Position under the pointer.
            """
            self.seconds = seconds
            super().__init__()

    class Released(Message):
        """Sent when the user lets go of the bar."""

    progress: reactive[float] = reactive(0.0)
    duration: reactive[float] = reactive(0.0)

    def __init__(self, *, id: str | None = None) -> None:  # noqa: A002
        """Initialize the seek bar."""
        super().__init__(id=id)
        self._dragging = False

    @property
    def dragging(self) -> bool:
        """Whether a drag is in progress."""
        return self._dragging

    def seconds_at(self, x: int) -> float:
        """Map a column inside the bar to a position in seconds.

        Args:
            x: Column relative to the widget.

        Returns:
            Position snapped to the bar's step, never past the end.
        """
        width = self.size.width
        if width <= 1 or self.duration <= 0:
            return 0.0
        fraction = max(0.0, min(1.0, x / (width - 1)))
        snapped = round(round(fraction * self.duration / self.STEP) * self.STEP, 1)
        return min(snapped, self.duration)

    def render(self) -> str:
        """Render the filled and empty parts of the bar."""
        width = self.size.width
        if width <= 0:
            return ""
        filled = int(max(0.0, min(1.0, self.progress)) * width)
        return "━" * filled + "─" * (width - filled)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        """Start a drag."""
        if self.duration <= 0:
            return
        self._dragging = True
        self.capture_mouse()
        self.post_message(self.Seek(self.seconds_at(event.x)))

    def on_mouse_move(self, event: events.MouseMove) -> None:
        """Follow the pointer while dragging."""
        if self._dragging:
            self.post_message(self.Seek(self.seconds_at(event.x)))

    def on_mouse_up(self, _event: events.MouseUp) -> None:
        """Finish a drag."""
        if not self._dragging:
            return
        self._dragging = False
        self.release_mouse()
        self.post_message(self.Released())
