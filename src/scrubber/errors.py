"""Exceptions raised by scrubber."""


class ScrubberError(Exception):
    """Base class for scrubber errors."""


class LoadFailure(ScrubberError):
    """A media source could not be opened or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        """Initialize the error.

        Args:
            source: The path or URL that failed to load.
            reason: Human-readable cause.
        """
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load {source}: {reason}")


class SeekFailure(ScrubberError):
    """The engine rejected a seek request."""

    def __init__(self, target: float, reason: str) -> None:
        """Initialize the error.

        Args:
            target: Requested position in seconds.
            reason: Human-readable cause.
        """
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot seek to {target:g}s: {reason}")


class ConfigLoadFailure(ScrubberError):
    """The configuration file is malformed or holds invalid values."""
