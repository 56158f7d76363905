"""Base engine interface for scrubber."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from scrubber.errors import SeekFailure

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Engine(Protocol):
    """Protocol defining the playback engine interface.

    All engine implementations must satisfy this protocol. Notification
    callbacks may be invoked from the engine's own threads.
    """

    on_new_frame: Callable[[], None] | None
    on_end_of_stream: Callable[[], None] | None

    @property
    def source(self) -> str | None:
        """The loaded media source, or None before a load."""
        ...

    @property
    def paused(self) -> bool:
        """Whether playback is paused."""
        ...

    @paused.setter
    def paused(self, value: bool) -> None: ...

    @property
    def looping(self) -> bool:
        """Whether playback restarts at end of stream."""
        ...

    @looping.setter
    def looping(self, value: bool) -> None: ...

    @property
    def position(self) -> float:
        """Current playback position in seconds."""
        ...

    @property
    def duration(self) -> float:
        """Total duration in seconds."""
        ...

    def load(self, source: str) -> None:
        """Open a media source.

        Args:
            source: URL or file path to play.
        """
        ...

    def seek(self, target: float, *, accurate: bool) -> None:
        """Seek to an absolute position.

        Args:
            target: Target position in seconds.
            accurate: Request frame-exact positioning instead of a fast seek.
        """
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...


class BaseEngine(ABC):
    """Abstract base class for engine implementations.

    Provides notification plumbing and seek target validation.
    """

    def __init__(self) -> None:
        """Initialize the base engine."""
        self.on_new_frame: Callable[[], None] | None = None
        self.on_end_of_stream: Callable[[], None] | None = None
        self._source: str | None = None

    @property
    def source(self) -> str | None:
        """The loaded media source."""
        return self._source

    def _emit_new_frame(self) -> None:
        if self.on_new_frame is not None:
            self.on_new_frame()

    def _emit_end_of_stream(self) -> None:
        if self.on_end_of_stream is not None:
            self.on_end_of_stream()

    def _check_target(self, target: float) -> None:
        """Reject seek targets outside the loaded media.

        Raises:
            SeekFailure: If nothing is loaded or target is out of range.
        """
        if self._source is None:
            raise SeekFailure(target, "no media loaded")
        if target < 0 or target > self.duration:
            raise SeekFailure(target, f"outside 0-{self.duration:g}s")

    @property
    @abstractmethod
    def paused(self) -> bool:
        """Whether playback is paused."""
        ...

    @paused.setter
    @abstractmethod
    def paused(self, value: bool) -> None: ...

    @property
    @abstractmethod
    def looping(self) -> bool:
        """Whether playback restarts at end of stream."""
        ...

    @looping.setter
    @abstractmethod
    def looping(self, value: bool) -> None: ...

    @property
    @abstractmethod
    def position(self) -> float:
        """Current playback position in seconds."""
        ...

    @property
    @abstractmethod
    def duration(self) -> float:
        """Total duration in seconds."""
        ...

    @abstractmethod
    def load(self, source: str) -> None:
        """Open a media source."""
        ...

    @abstractmethod
    def seek(self, target: float, *, accurate: bool) -> None:
        """Seek to an absolute position."""
        ...

    def close(self) -> None:
        """Release backend resources."""


class NullEngine(BaseEngine):
    """A deterministic in-memory engine for testing.

    Playback only moves when advance() is called.
    """

    def __init__(self, duration: float = 60.0, *, seekable: bool = True) -> None:
        """Initialize the null engine.

        Args:
            duration: Duration reported once a source is loaded.
            seekable: If False, every seek is rejected.
        """
        super().__init__()
        self._paused = False
        self._looping = False
        self._position = 0.0
        self._duration = 0.0
        self._media_duration = duration
        self.seekable = seekable
        self.seeks: list[tuple[float, bool]] = []

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        self._paused = value

    @property
    def looping(self) -> bool:
        return self._looping

    @looping.setter
    def looping(self, value: bool) -> None:
        self._looping = value

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float:
        return self._duration

    def load(self, source: str) -> None:
        """Simulate opening a source."""
        self._source = source
        self._position = 0.0
        self._duration = self._media_duration

    def seek(self, target: float, *, accurate: bool) -> None:
        """Simulate seeking, recording each accepted request."""
        if not self.seekable:
            raise SeekFailure(target, "stream is not seekable")
        self._check_target(target)
        self.seeks.append((target, accurate))
        self._position = target

    def advance(self, seconds: float) -> None:
        """Simulate playback for a number of seconds.

        Emits a new-frame notification, and an end-of-stream notification
        when the end is reached.
        """
        if self._source is None or self._paused:
            return
        self._position += seconds
        if self._position >= self._duration:
            if self._looping:
                self._position = 0.0
            else:
                self._position = self._duration
                self._paused = True
            self._emit_new_frame()
            self._emit_end_of_stream()
            return
        self._emit_new_frame()
