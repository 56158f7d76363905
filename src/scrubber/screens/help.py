"""Help screen with keybinding reference."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.markup import escape
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

from scrubber import __version__
from scrubber.bindings import Action

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from scrubber.bindings import BindingResolver


def build_help_text(resolver: BindingResolver) -> str:
    """Render the help text for the active key bindings.

    Args:
        resolver: The bindings to describe.

    Returns:
        Rich markup text.
    """
    lines = [
        f"[bold]Scrubber v{__version__}[/bold]",
        "Keyboard and mouse media playback control",
        "",
        "[bold underline]Playback Controls[/bold underline]",
    ]
    for action in Action:
        chords = resolver.keys_for(action)
        keys = " / ".join(escape(str(chord)) for chord in chords) or "[dim]unbound[/dim]"
        lines.append(f"  [bold]{keys:<16}[/bold]{action.label}")
    lines += [
        "",
        "[bold underline]Seek Bar[/bold underline]",
        "  Click and drag to scrub, release to resume playback",
        "",
        "[bold underline]Application[/bold underline]",
        "  [bold]ctrl+r[/bold]          Reload configuration",
        "  [bold]?[/bold]               Show this help",
        "  [bold]q[/bold]               Quit",
        "",
        "[dim]Press Escape or ? to close this help[/dim]",
    ]
    return "\n".join(lines)


class HelpScreen(ModalScreen[None]):
    """Modal screen displaying the active keybindings."""

    BINDINGS: ClassVar[list[Binding | tuple[str, str] | tuple[str, str, str]]] = [
        Binding("escape", "close", "Close"),
        Binding("?", "close", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > Vertical {
        width: 70;
        max-width: 90%;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    HelpScreen > Vertical > VerticalScroll {
        height: auto;
        max-height: 100%;
    }

    HelpScreen Static {
        width: 100%;
    }
    """

    def __init__(self, resolver: BindingResolver) -> None:
        """Initialize the help screen.

        Args:
            resolver: The bindings to describe.
        """
        super().__init__()
        self._resolver = resolver

    def compose(self) -> ComposeResult:
        """Compose the help screen."""
        with Vertical(), VerticalScroll():
            yield Static(build_help_text(self._resolver))

    def action_close(self) -> None:
        """Close the help screen."""
        self.dismiss()
