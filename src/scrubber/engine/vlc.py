"""VLC engine backend for scrubber."""

from __future__ import annotations

import threading
import time

import vlc

from scrubber.engine.base import BaseEngine
from scrubber.engine.sources import check_source
from scrubber.errors import LoadFailure, SeekFailure
from scrubber.logging import get_logger

_log = get_logger("engine.vlc")


class VLCEngine(BaseEngine):
    """Engine implementation using python-vlc (libVLC).

    libVLC chooses seek precision itself, so the accuracy flag is advisory.
    Requires VLC to be installed on the system.
    """

    def __init__(self, *, video: bool = True, load_timeout: float = 10.0) -> None:
        """Initialize the VLC engine.

        Args:
            video: Whether to open a video output window.
            load_timeout: Seconds to wait for a source to report its length.
        """
        super().__init__()
        args = ["--quiet"] if video else ["--quiet", "--no-video"]
        self._instance = vlc.Instance(*args)
        self._player: vlc.MediaPlayer = self._instance.media_player_new()
        self._media: vlc.Media | None = None
        self._load_timeout = load_timeout
        self._poll_interval = 0.05  # seconds
        self._paused = False
        self._looping = False

        events = self._player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerTimeChanged, self._on_time_changed)
        events.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end_reached)

    def _on_time_changed(self, _event: vlc.Event) -> None:
        self._emit_new_frame()

    def _on_end_reached(self, _event: vlc.Event) -> None:
        self._emit_end_of_stream()
        if self._looping:
            # libVLC must not be called back from its own event thread
            threading.Thread(target=self._restart, daemon=True).start()
        else:
            self._paused = True

    def _restart(self) -> None:
        self._player.stop()
        self._player.play()

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        if value == self._paused:
            return
        self._paused = value
        if not value and self._player.get_state() == vlc.State.Ended:
            self._restart()
        else:
            self._player.set_pause(1 if value else 0)

    @property
    def looping(self) -> bool:
        return self._looping

    @looping.setter
    def looping(self, value: bool) -> None:
        self._looping = value

    @property
    def position(self) -> float:
        pos = self._player.get_time()
        return pos / 1000.0 if pos >= 0 else 0.0

    @property
    def duration(self) -> float:
        length = self._player.get_length()
        return length / 1000.0 if length > 0 else 0.0

    def load(self, source: str) -> None:
        """Open a source and wait until its length is known.

        Args:
            source: URL or file path to play.

        Raises:
            LoadFailure: If the source is missing or VLC cannot open it in time.
        """
        check_source(source)
        _log.info("Loading %s", source)
        self._media = self._instance.media_new(source)
        self._player.set_media(self._media)
        if self._player.play() == -1:
            raise LoadFailure(source, "VLC refused to play the media")

        deadline = time.monotonic() + self._load_timeout
        while self._player.get_length() <= 0:
            if self._player.get_state() == vlc.State.Error:
                raise LoadFailure(source, "VLC could not decode the media")
            if time.monotonic() > deadline:
                self._player.stop()
                raise LoadFailure(source, "timed out waiting for media")
            time.sleep(self._poll_interval)

        self._paused = False
        self._source = source
        _log.debug("Loaded %s (%.1fs)", source, self.duration)

    def seek(self, target: float, *, accurate: bool) -> None:
        """Seek to an absolute position.

        Args:
            target: Target position in seconds.
            accurate: Requested precision (advisory for libVLC).

        Raises:
            SeekFailure: If the target is out of range or the media is not seekable.
        """
        self._check_target(target)
        if not self._player.is_seekable():
            raise SeekFailure(target, "stream is not seekable")
        _log.debug("Seeking to %.2fs (accurate=%s)", target, accurate)
        self._player.set_time(int(target * 1000))

    def close(self) -> None:
        """Stop playback and release libVLC resources."""
        self._player.stop()
        self._player.release()
        self._instance.release()
