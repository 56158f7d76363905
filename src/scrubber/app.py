"""Main Textual application for scrubber."""

from __future__ import annotations

import contextlib
import os
from typing import TYPE_CHECKING, ClassVar

from textual.app import App
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.message import Message

from scrubber.bindings import BindingResolver, KeyChord
from scrubber.config import ConfigWatcher, get_config, reload_config
from scrubber.engine.sources import display_name
from scrubber.errors import SeekFailure
from scrubber.logging import get_logger
from scrubber.screens.help import HelpScreen
from scrubber.screens.player import PlayerScreen
from scrubber.widgets.player_bar import PlayerBar

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from scrubber.config import Config
    from scrubber.controller import PlaybackController

# Module logger
_log = get_logger("app")

_THEMES = {
    "dark": "textual-dark",
    "light": "textual-light",
}


def system_theme() -> str:
    """Guess whether the terminal is light or dark.

    Reads the background colour index from ``COLORFGBG`` ("fg;bg", set by
    rxvt, Konsole, iTerm2 and others). Indexes 7 and 9-15 are light; dark is
    assumed when the variable is missing or unreadable.
    """
    background = os.environ.get("COLORFGBG", "").rsplit(";", 1)[-1]
    if background.isdigit():
        index = int(background)
        if index == 7 or 9 <= index <= 15:
            return "light"
    return "dark"


class EngineTick(Message):
    """Posted when the engine reports a new frame."""


class EndOfStream(Message):
    """Posted when the engine reaches the end of the media."""


class ScrubberApp(App[None]):
    """Terminal front end driving a playback controller."""

    TITLE = "Scrubber"

    BINDINGS: ClassVar[list[Binding | tuple[str, str] | tuple[str, str, str]]] = [
        Binding("q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        controller: PlaybackController,
        config: Config | None = None,
        *,
        title: str = "",
        config_path: Path | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            controller: Controller around an already loaded engine.
            config: Configuration snapshot; the global one if None.
            title: Name shown for the media; derived from the source if empty.
            config_path: Config file to watch and reload.
        """
        super().__init__()
        self._controller = controller
        self._config = config if config is not None else get_config()
        self._config_path = config_path
        self._watcher = ConfigWatcher(config_path)
        self._media_source = controller.engine.source or ""
        self._media_title = title or display_name(self._media_source) or "Untitled"
        self._player_screen: PlayerScreen | None = None

    @classmethod
    def reserved_chords(cls) -> frozenset[KeyChord]:
        """Chords claimed by priority bindings, which key chords cannot override."""
        chords: set[KeyChord] = set()
        for binding in cls.BINDINGS:
            if not isinstance(binding, Binding) or not binding.priority:
                continue
            for key in binding.key.split(","):
                with contextlib.suppress(ValueError):
                    chords.add(KeyChord.parse(key.strip()))
        return frozenset(chords)

    @property
    def controller(self) -> PlaybackController:
        """Get the playback controller."""
        return self._controller

    @property
    def config(self) -> Config:
        """Get the active configuration snapshot."""
        return self._config

    def on_mount(self) -> None:
        """Wire engine notifications and show the player."""
        _log.info("Scrubber starting up")
        self.sub_title = self._media_title
        self._apply_theme()

        # Engine callbacks run on backend threads; post_message is thread safe
        engine = self._controller.engine
        engine.on_new_frame = self._post_engine_tick
        engine.on_end_of_stream = self._post_end_of_stream

        self._player_screen = PlayerScreen(self._media_title, self._media_source)
        self.push_screen(self._player_screen)
        self.set_interval(self._config.ui.tick_interval, self._check_config)

    def on_unmount(self) -> None:
        """Release the engine."""
        _log.info("Scrubber shutting down")
        engine = self._controller.engine
        engine.on_new_frame = None
        engine.on_end_of_stream = None
        engine.close()
        _log.info("Shutdown complete")

    def _post_engine_tick(self) -> None:
        self.post_message(EngineTick())

    def _post_end_of_stream(self) -> None:
        self.post_message(EndOfStream())

    def on_engine_tick(self, _message: EngineTick) -> None:
        """Fold an engine position report into the state."""
        self._controller.on_engine_tick()
        self.refresh_player_bar()

    def on_end_of_stream(self, _message: EndOfStream) -> None:
        """Report the end of the media."""
        self._controller.on_end_of_stream()
        self.notify("End of stream", severity="information")
        self.refresh_player_bar()

    def refresh_player_bar(self) -> None:
        """Mirror the controller state on the player bar."""
        if self._player_screen is None:
            return
        with contextlib.suppress(NoMatches):
            bar = self._player_screen.query_one(PlayerBar)
            bar.show_state(self._controller.state)

    def _run(self, command: Callable[..., None], *args: object) -> bool:
        """Run a controller command, reporting seek failures.

        Returns:
            True if the command succeeded.
        """
        try:
            command(*args)
        except SeekFailure as e:
            _log.warning("Seek rejected: %s", e)
            self.notify(str(e), severity="error")
            return False
        finally:
            self.refresh_player_bar()
        return True

    def handle_chord(self, chord: KeyChord) -> bool:
        """Dispatch a key chord through the bindings.

        Returns:
            True if the chord is bound to an action.
        """
        if self._controller.resolver.resolve(chord) is None:
            return False
        self._run(self._controller.resolve_and_dispatch, chord)
        return True

    def toggle_pause(self) -> None:
        """Toggle play/pause."""
        self._run(self._controller.toggle_pause)

    def toggle_loop(self) -> None:
        """Toggle looping."""
        self._run(self._controller.toggle_loop)

    def seek_absolute(self, seconds: float) -> None:
        """Move to a dragged position."""
        self._run(self._controller.seek_absolute, seconds)

    def seek_release(self) -> None:
        """Finish a drag."""
        self._run(self._controller.seek_release)

    def show_help(self) -> None:
        """Show the key binding reference."""
        self.push_screen(HelpScreen(self._controller.resolver))

    def _apply_theme(self) -> None:
        mode = self._config.ui.theme.lower()
        if mode == "system":
            mode = system_theme()
        theme = _THEMES.get(mode)
        if theme is None:
            _log.warning("Unknown theme %r, keeping %s", self._config.ui.theme, self.theme)
            return
        self.theme = theme

    def apply_config(self, config: Config) -> None:
        """Switch to a new configuration snapshot.

        Key bindings are replaced wholesale. Backend and video settings only
        take effect on the next start.

        Args:
            config: The new snapshot.
        """
        if config.player.backend != self._config.player.backend:
            _log.info("Backend change to %s applies after restart", config.player.backend)
        self._config = config
        self._controller.rebind(
            BindingResolver.from_config(config.keys, reserved=self.reserved_chords()),
            seek_step=config.player.seek_step,
        )
        self._apply_theme()

    def reload_settings(self) -> None:
        """Reload the configuration file and apply it."""
        _log.info("Reloading configuration")
        self.apply_config(reload_config(self._config_path))
        self.notify("Configuration reloaded", severity="information")

    def _check_config(self) -> None:
        """Reload when the config file changed on disk."""
        if self._watcher.changed():
            _log.info("Configuration file changed: %s", self._watcher.path)
            self.reload_settings()
