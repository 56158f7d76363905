"""MPV engine backend for scrubber."""

from __future__ import annotations

import mpv

from scrubber.engine.base import BaseEngine
from scrubber.engine.sources import check_source
from scrubber.errors import LoadFailure, SeekFailure
from scrubber.logging import get_logger

_log = get_logger("engine.mpv")


class MPVEngine(BaseEngine):
    """Engine implementation using python-mpv.

    mpv opens its own video window; scrubber only drives it.
    Requires libmpv to be installed on the system.
    """

    def __init__(self, *, video: bool = True, load_timeout: float = 10.0) -> None:
        """Initialize the MPV engine.

        Args:
            video: Whether to open a video output window.
            load_timeout: Seconds to wait for a source to report its duration.
        """
        super().__init__()
        options = {
            "terminal": False,
            "input_default_bindings": False,
            "input_vo_keyboard": False,
            "keep_open": "yes",
        }
        if not video:
            options["video"] = False
        self._player = mpv.MPV(**options)
        self._load_timeout = load_timeout

        # Register property observers (invoked on mpv's event thread)
        @self._player.property_observer("time-pos")
        def on_time_pos(_name: str, value: float | None) -> None:
            if value is not None:
                self._emit_new_frame()

        @self._player.property_observer("eof-reached")
        def on_eof_reached(_name: str, value: bool | None) -> None:
            if value:
                self._emit_end_of_stream()

    @property
    def paused(self) -> bool:
        return bool(self._player.pause)

    @paused.setter
    def paused(self, value: bool) -> None:
        self._player.pause = value

    @property
    def looping(self) -> bool:
        return self._player.loop_file not in (False, "no", None)

    @looping.setter
    def looping(self, value: bool) -> None:
        self._player.loop_file = "inf" if value else "no"

    @property
    def position(self) -> float:
        pos = self._player.time_pos
        return float(pos) if pos is not None else 0.0

    @property
    def duration(self) -> float:
        dur = self._player.duration
        return float(dur) if dur is not None else 0.0

    def load(self, source: str) -> None:
        """Open a source and wait until its duration is known.

        Args:
            source: URL or file path to play.

        Raises:
            LoadFailure: If the source is missing or mpv cannot open it in time.
        """
        check_source(source)
        _log.info("Loading %s", source)
        self._player.play(source)
        try:
            self._player.wait_for_property(
                "duration", lambda value: value is not None, timeout=self._load_timeout
            )
        except TimeoutError as e:
            self._player.stop()
            raise LoadFailure(source, "timed out waiting for media") from e
        except mpv.ShutdownError as e:
            raise LoadFailure(source, "mpv shut down") from e
        self._source = source
        _log.debug("Loaded %s (%.1fs)", source, self.duration)

    def seek(self, target: float, *, accurate: bool) -> None:
        """Seek to an absolute position.

        Args:
            target: Target position in seconds.
            accurate: Use an exact seek instead of a keyframe seek.

        Raises:
            SeekFailure: If the target is out of range or mpv rejects it.
        """
        self._check_target(target)
        precision = "exact" if accurate else "keyframes"
        try:
            self._player.seek(target, reference="absolute", precision=precision)
        except (SystemError, ValueError, mpv.ShutdownError) as e:
            raise SeekFailure(target, str(e)) from e

    def close(self) -> None:
        """Terminate the mpv core."""
        self._player.terminate()
