"""Player bar widget showing playback status and controls."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Button, Label, Static

from scrubber.widgets.seek_bar import SeekBar

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from scrubber.controller import PlaybackState


class PlayerBar(Static):
    """Playback controls: pause and loop buttons, time and seek bar."""

    DEFAULT_CSS = """
    PlayerBar {
        height: 3;
        dock: bottom;
        background: $surface;
        padding: 0 1;
    }

    PlayerBar Horizontal {
        height: 1;
        width: 100%;
    }

    PlayerBar Button {
        min-width: 5;
        width: auto;
        height: 1;
        border: none;
        margin: 0 1 0 0;
    }

    PlayerBar #player-status {
        width: auto;
        min-width: 10;
    }

    PlayerBar #player-time {
        width: auto;
        min-width: 14;
        text-align: right;
        margin: 0 1;
    }
    """

    status: reactive[str] = reactive("Playing")
    paused: reactive[bool] = reactive(False)
    looping: reactive[bool] = reactive(False)
    position: reactive[float] = reactive(0.0)
    duration: reactive[float] = reactive(0.0)

    def compose(self) -> ComposeResult:
        """Compose the player bar layout."""
        with Horizontal():
            pause = Button(self._pause_label(), id="toggle-pause")
            pause.can_focus = False
            yield pause
            loop = Button("⟲", id="toggle-loop")
            loop.can_focus = False
            yield loop
            yield Label(self.status, id="player-status")
            yield Label(self._format_time(), id="player-time")
            yield SeekBar(id="seek-bar")

    def _pause_label(self) -> str:
        return "▶" if self.paused else "⏸"

    def watch_status(self, status: str) -> None:
        """Update the status label when status changes."""
        with contextlib.suppress(Exception):
            self.query_one("#player-status", Label).update(status)

    def watch_paused(self, _paused: bool) -> None:
        """Swap the play/pause icon."""
        with contextlib.suppress(Exception):
            self.query_one("#toggle-pause", Button).label = self._pause_label()

    def watch_looping(self, looping: bool) -> None:
        """Highlight the loop button while looping."""
        with contextlib.suppress(Exception):
            button = self.query_one("#toggle-loop", Button)
            button.variant = "success" if looping else "default"

    def watch_position(self, _position: float) -> None:
        """Update the time label when position changes."""
        self._update_time()

    def watch_duration(self, duration: float) -> None:
        """Update time and seek bar when duration changes."""
        self._update_time()
        with contextlib.suppress(Exception):
            self.query_one(SeekBar).duration = duration

    def _update_time(self) -> None:
        """Update the time label."""
        with contextlib.suppress(Exception):
            self.query_one("#player-time", Label).update(self._format_time())

    def _format_time(self) -> str:
        """Format position/duration in whole seconds."""
        return f"{int(self.position)}s / {int(self.duration)}s"

    def show_state(self, state: PlaybackState) -> None:
        """Mirror a playback state snapshot.

        Args:
            state: The controller's current state.
        """
        self.paused = state.paused
        self.looping = state.looping
        self.position = state.position
        self.duration = state.duration
        with contextlib.suppress(Exception):
            self.query_one(SeekBar).progress = state.progress_fraction
        if state.dragging:
            self.status = "Seeking"
        elif state.paused:
            self.status = "Paused"
        elif state.looping:
            self.status = "Looping"
        else:
            self.status = "Playing"
