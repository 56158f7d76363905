"""Logging setup for scrubber.

Records from every ``scrubber.*`` logger go to a rotating file in the data
directory. In debug mode they are also handed to Textual's devtools console:
the terminal is owned by the running app, so a plain stderr handler would
draw over the UI.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from textual.logging import TextualHandler

from scrubber.config import get_data_path

if TYPE_CHECKING:
    from pathlib import Path

    from scrubber.config import LogConfig

logger = logging.getLogger("scrubber")

LOG_FILENAME = "scrubber.log"
_MAX_LOG_BYTES = 5 * 1024 * 1024

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DEVTOOLS_FORMAT = "%(levelname)s %(name)s: %(message)s"


def default_log_path() -> Path:
    """Get the log file location in the data directory."""
    return get_data_path() / LOG_FILENAME


def setup_logging(
    *,
    level: int = logging.INFO,
    log_path: Path | None = None,
    devtools: bool = False,
) -> None:
    """Configure the ``scrubber`` logger.

    Calling it again replaces the handlers of a previous call.

    Args:
        level: Minimum level for scrubber records.
        log_path: File to append to, rotated once it grows past 5 MB. No file
            is written if None.
        devtools: Also forward records to the Textual devtools console, or to
            stderr while no app is running.
    """
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=_MAX_LOG_BYTES, backupCount=1, encoding="utf-8"
        )
        file_handler.setFormatter(
            logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)

    if devtools:
        devtools_handler = TextualHandler()
        devtools_handler.setFormatter(logging.Formatter(_DEVTOOLS_FORMAT))
        logger.addHandler(devtools_handler)

    if not logger.handlers:
        # Keep records away from the last-resort stderr handler
        logger.addHandler(logging.NullHandler())


def configure_from(
    config: LogConfig, *, debug: bool = False, log_path: Path | None = None
) -> Path | None:
    """Set up logging from the ``[log]`` config section and CLI flags.

    ``debug`` forces DEBUG level and the devtools handler. An explicit
    ``log_path`` is used even when the config disables the log file.

    Returns:
        The log file in use, or None.
    """
    if log_path is None and config.to_file:
        log_path = default_log_path()
    level = logging.DEBUG if debug else logging.getLevelName(config.level.upper())
    setup_logging(level=level, log_path=log_path, devtools=debug)
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Get a child of the ``scrubber`` logger, e.g. ``scrubber.engine.mpv``."""
    return logging.getLogger(f"scrubber.{name}")
