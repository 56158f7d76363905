"""Playback engine implementations for scrubber."""

from __future__ import annotations

from scrubber.engine.base import BaseEngine, Engine, NullEngine
from scrubber.errors import LoadFailure

BACKENDS = ("mpv", "vlc", "null")


def create_engine(
    backend: str, *, video: bool = True, load_timeout: float = 10.0
) -> BaseEngine:
    """Create an unloaded engine for a backend name.

    Args:
        backend: One of "mpv", "vlc" or "null".
        video: Whether the backend should open a video output window.
        load_timeout: Seconds to wait for a source to load.

    Returns:
        Engine instance.

    Raises:
        LoadFailure: If the backend is unknown or its library is unavailable.
    """
    name = backend.lower()

    if name == "mpv":
        try:
            from scrubber.engine.mpv import MPVEngine

            return MPVEngine(video=video, load_timeout=load_timeout)
        except (ImportError, OSError) as e:
            raise LoadFailure(name, f"mpv not available: {e}") from e
    elif name == "vlc":
        try:
            from scrubber.engine.vlc import VLCEngine

            return VLCEngine(video=video, load_timeout=load_timeout)
        except (ImportError, OSError, AttributeError) as e:
            # python-vlc leaves vlc.Instance unusable when libvlc is missing
            raise LoadFailure(name, f"VLC not available: {e}") from e
    elif name == "null":
        return NullEngine()
    else:
        raise LoadFailure(name, f"unknown backend, expected one of {', '.join(BACKENDS)}")


def load_engine(
    source: str, backend: str, *, video: bool = True, load_timeout: float = 10.0
) -> BaseEngine:
    """Create an engine and open a source with it.

    Raises:
        LoadFailure: If the engine cannot be created or the source cannot be opened.
    """
    engine = create_engine(backend, video=video, load_timeout=load_timeout)
    try:
        engine.load(source)
    except LoadFailure:
        engine.close()
        raise
    return engine


__all__ = ["BACKENDS", "BaseEngine", "Engine", "NullEngine", "create_engine", "load_engine"]
