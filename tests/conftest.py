"""Pytest configuration and fixtures for scrubber tests."""

import logging
import tempfile
from pathlib import Path

import pytest

from scrubber.bindings import BindingResolver
from scrubber.config import Config
from scrubber.controller import PlaybackController
from scrubber.engine import NullEngine


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def default_config() -> Config:
    """Create a default configuration."""
    return Config()


@pytest.fixture
def temp_config_path(temp_dir: Path) -> Path:
    """Path for a temporary config file."""
    return temp_dir / "config.toml"


@pytest.fixture
def engine() -> NullEngine:
    """A null engine with a two minute source loaded."""
    engine = NullEngine(duration=120.0)
    engine.load("/media/sample.mkv")
    return engine


@pytest.fixture
def controller(engine: NullEngine) -> PlaybackController:
    """A controller over the loaded null engine with default bindings."""
    return PlaybackController(engine, BindingResolver.default())


@pytest.fixture(autouse=True)
def _reset_scrubber_logger():
    """Drop handlers a test installed on the scrubber logger."""
    yield
    logger = logging.getLogger("scrubber")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
