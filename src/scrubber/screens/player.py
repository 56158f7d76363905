"""Player screen with the media title and playback controls."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.markup import escape
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Static

from scrubber.bindings import KeyChord
from scrubber.widgets.player_bar import PlayerBar
from scrubber.widgets.seek_bar import SeekBar

if TYPE_CHECKING:
    from textual import events
    from textual.app import ComposeResult

    from scrubber.app import ScrubberApp


class MediaPanel(Static):
    """Panel naming the loaded source."""

    DEFAULT_CSS = """
    MediaPanel {
        width: 1fr;
        height: 1fr;
        content-align: center middle;
        border: solid $primary;
    }
    """

    def __init__(self, title: str, source: str = "") -> None:
        """Initialize the panel.

        Args:
            title: Display name of the media.
            source: Full path or URL, shown below the title.
        """
        text = f"[bold]{escape(title)}[/bold]"
        if source and source != title:
            text += f"\n[dim]{escape(source)}[/dim]"
        super().__init__(text)


class PlayerScreen(Screen[None]):
    """Single screen: media panel above the player bar.

    Key presses are resolved through the configured chord bindings before
    the screen's own bindings are consulted.
    """

    BINDINGS: ClassVar[list[Binding | tuple[str, str] | tuple[str, str, str]]] = [
        Binding("?", "toggle_help", "Help"),
        Binding("ctrl+r", "reload_config", "Reload Config"),
    ]

    def __init__(self, title: str, source: str = "") -> None:
        """Initialize the player screen.

        Args:
            title: Display name of the media.
            source: Path or URL of the loaded media.
        """
        super().__init__()
        self._title = title
        self._source = source

    @property
    def scrubber_app(self) -> ScrubberApp:
        """Get the typed application instance."""
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Header()
        yield MediaPanel(self._title, self._source)
        yield PlayerBar()
        yield Footer()

    def on_mount(self) -> None:
        """Show the initial playback state."""
        self.scrubber_app.refresh_player_bar()

    def on_key(self, event: events.Key) -> None:
        """Route key presses through the chord bindings."""
        try:
            chord = KeyChord.parse(event.key)
        except ValueError:
            return
        if self.scrubber_app.handle_chord(chord):
            event.stop()
            event.prevent_default()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle the pause and loop buttons."""
        if event.button.id == "toggle-pause":
            self.scrubber_app.toggle_pause()
        elif event.button.id == "toggle-loop":
            self.scrubber_app.toggle_loop()

    def on_seek_bar_seek(self, message: SeekBar.Seek) -> None:
        """Move the position while the seek bar is dragged."""
        self.scrubber_app.seek_absolute(message.seconds)

    def on_seek_bar_released(self, _message: SeekBar.Released) -> None:
        """Finalize a seek bar drag."""
        self.scrubber_app.seek_release()

    def action_toggle_help(self) -> None:
        """Show the key binding reference."""
        self.scrubber_app.show_help()

    def action_reload_config(self) -> None:
        """Reload the configuration file."""
        self.scrubber_app.reload_settings()
