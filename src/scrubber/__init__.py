"""Scrubber - a keyboard and mouse driven media playback controller for the terminal."""

__title__ = "scrubber"
__description__ = "A keyboard and mouse driven media playback controller for the terminal"
__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__description__",
    "__license__",
    "__title__",
    "__version__",
]
