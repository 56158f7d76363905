"""Playback controller: the single owner of playback state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scrubber.bindings import Action, BindingResolver
from scrubber.engine import load_engine
from scrubber.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from scrubber.bindings import KeyChord
    from scrubber.engine import Engine

_log = get_logger("controller")


@dataclass
class PlaybackState:
    """Local mirror of the engine's playback state."""

    paused: bool = False
    looping: bool = False
    position: float = 0.0
    duration: float = 0.0
    dragging: bool = False

    def clamp(self, seconds: float) -> float:
        """Clamp a position into the media's range."""
        return max(0.0, min(seconds, self.duration))

    @property
    def progress_fraction(self) -> float:
        """Playback progress as a fraction (0.0-1.0)."""
        if self.duration <= 0:
            return 0.0
        return min(1.0, self.position / self.duration)


class PlaybackController:
    """Translates commands into engine calls and engine ticks into state.

    All methods must be called from the same thread (the UI event loop).
    Engine failures propagate to the caller unchanged.
    """

    def __init__(
        self,
        engine: Engine,
        resolver: BindingResolver | None = None,
        *,
        seek_step: float = 10.0,
        end_of_stream_listener: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the controller around a loaded engine.

        Args:
            engine: An engine that has already loaded its source.
            resolver: Key bindings; the built-in defaults if None.
            seek_step: Seconds jumped by the seek forward/backward actions.
            end_of_stream_listener: Called after end of stream is logged.
        """
        self._engine = engine
        self._resolver = resolver if resolver is not None else BindingResolver.default()
        self._seek_step = seek_step
        self._end_of_stream_listener = end_of_stream_listener
        self._state = PlaybackState(
            paused=engine.paused,
            looping=engine.looping,
            duration=engine.duration,
        )
        self._state.position = self._state.clamp(engine.position)

    @classmethod
    def open(
        cls,
        source: str,
        backend: str = "mpv",
        *,
        resolver: BindingResolver | None = None,
        seek_step: float = 10.0,
        video: bool = True,
        load_timeout: float = 10.0,
    ) -> PlaybackController:
        """Load a source and build a controller for it.

        Raises:
            LoadFailure: If the source cannot be opened; no controller is built.
        """
        engine = load_engine(source, backend, video=video, load_timeout=load_timeout)
        _log.info("Opened %s with %s backend", source, backend)
        return cls(engine, resolver, seek_step=seek_step)

    @property
    def state(self) -> PlaybackState:
        """Current playback state."""
        return self._state

    @property
    def engine(self) -> Engine:
        """The engine being controlled."""
        return self._engine

    @property
    def resolver(self) -> BindingResolver:
        """The active key bindings."""
        return self._resolver

    @property
    def seek_step(self) -> float:
        """Seconds jumped by a relative seek action."""
        return self._seek_step

    def rebind(self, resolver: BindingResolver, *, seek_step: float | None = None) -> None:
        """Replace the key bindings wholesale."""
        self._resolver = resolver
        if seek_step is not None:
            self._seek_step = seek_step
        _log.debug("Rebound %d key bindings", len(resolver))

    def toggle_pause(self) -> None:
        """Flip the paused flag."""
        paused = not self._engine.paused
        self._engine.paused = paused
        self._state.paused = paused

    def toggle_loop(self) -> None:
        """Flip the looping flag."""
        looping = not self._engine.looping
        self._engine.looping = looping
        self._state.looping = looping

    def seek_absolute(self, seconds: float) -> None:
        """Move the position while the seek control is being dragged.

        Issues a fast, inexact seek and resumes playback; the next tick
        pauses the engine again for as long as the drag lasts.

        Args:
            seconds: Target position in seconds.

        Raises:
            ValueError: If seconds is negative.
            SeekFailure: If the engine rejects the target. The drag stays
                active and the position keeps its previous value.
        """
        if seconds < 0:
            raise ValueError(f"Seek target must not be negative: {seconds}")
        self._state.dragging = True
        self._engine.seek(seconds, accurate=False)
        self._state.position = seconds
        self._engine.paused = False
        self._state.paused = False

    def seek_relative(self, delta: float) -> None:
        """Jump by a number of seconds from the current position.

        The local position is left alone; the next tick reports where the
        engine actually landed. Paused playback stays paused.

        Args:
            delta: Seconds to move, negative to go back.

        Raises:
            SeekFailure: If the engine rejects the target.
        """
        target = self._state.clamp(self._state.position + delta)
        _log.debug("Relative seek %+.1fs to %.1fs", delta, target)
        self._engine.seek(target, accurate=True)

    def seek_release(self) -> None:
        """Finish a drag with one exact seek and resume playback.

        Does nothing if no drag is in progress.

        Raises:
            SeekFailure: If the engine rejects the final position.
        """
        if not self._state.dragging:
            _log.debug("Seek release without a drag in progress")
            return
        self._state.dragging = False
        self._engine.seek(self._state.position, accurate=True)
        self._engine.paused = False
        self._state.paused = False

    def on_end_of_stream(self) -> None:
        """Handle the engine reaching the end of the media."""
        _log.info("End of stream at %.1fs", self._state.position)
        if self._end_of_stream_listener is not None:
            self._end_of_stream_listener()

    def on_engine_tick(self) -> None:
        """Handle a new frame reported by the engine.

        While dragging, the engine is held paused and its position is
        ignored so it cannot overwrite the dragged position.
        """
        if self._state.dragging:
            self._engine.paused = True
            self._state.paused = True
            return
        self._state.position = self._state.clamp(self._engine.position)
        self._state.paused = self._engine.paused
        self._state.looping = self._engine.looping

    def dispatch(self, action: Action) -> None:
        """Run the command bound to an action.

        Raises:
            SeekFailure: If a seek action is rejected by the engine.
        """
        if action is Action.SEEK_BACKWARD:
            self.seek_relative(-self._seek_step)
        elif action is Action.SEEK_FORWARD:
            self.seek_relative(self._seek_step)
        elif action is Action.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action is Action.TOGGLE_LOOP:
            self.toggle_loop()
        else:
            raise ValueError(f"Unhandled action: {action}")

    def resolve_and_dispatch(self, chord: KeyChord) -> Action | None:
        """Resolve a key chord and run its command.

        Args:
            chord: The chord captured from an input event.

        Returns:
            The action that ran, or None if the chord is unbound.
        """
        action = self._resolver.resolve(chord)
        if action is None:
            return None
        _log.debug("Chord %s -> %s", chord, action.value)
        self.dispatch(action)
        return action
