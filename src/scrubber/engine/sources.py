"""Media source validation shared by engine backends."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from scrubber.errors import LoadFailure


def is_url(source: str) -> bool:
    """Check whether a source looks like a URL rather than a local path."""
    parsed = urlparse(source)
    return bool(parsed.scheme) and len(parsed.scheme) > 1 and parsed.scheme != "file"


def check_source(source: str) -> None:
    """Fail early for local sources that cannot be read.

    URLs are left to the backend to open.

    Raises:
        LoadFailure: If a local source is missing or not a regular file.
    """
    if not source:
        raise LoadFailure(source, "empty source")
    if is_url(source):
        return
    path = Path(urlparse(source).path) if source.startswith("file:") else Path(source)
    if not path.exists():
        raise LoadFailure(source, "file not found")
    if not path.is_file():
        raise LoadFailure(source, "not a regular file")


def display_name(source: str) -> str:
    """Short name for a source: the file name, or the last URL path segment."""
    if is_url(source):
        parsed = urlparse(source)
        return unquote(parsed.path.rstrip("/").rsplit("/", 1)[-1]) or parsed.netloc
    if source.startswith("file:"):
        return Path(unquote(urlparse(source).path)).name
    return Path(source).name
