"""Configuration system for scrubber."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scrubber.errors import ConfigLoadFailure

_log = logging.getLogger("scrubber.config")


class PlayerConfig(BaseModel):
    """Player configuration."""

    model_config = ConfigDict(frozen=True)

    backend: str = Field(default="mpv", description="Engine backend (mpv, vlc or null)")
    seek_step: float = Field(default=10.0, gt=0, description="Seek step in seconds")
    video: bool = Field(default=True, description="Open a video output window")
    load_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for a source to load"
    )


class UIConfig(BaseModel):
    """UI configuration."""

    model_config = ConfigDict(frozen=True)

    theme: str = Field(default="dark", description="UI theme (dark, light or system)")
    tick_interval: float = Field(
        default=2.0, ge=0.1, description="Seconds between config change checks"
    )


class LogConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", description="Minimum level written to the log file"
    )
    to_file: bool = Field(default=True, description="Write a log file in the data directory")


class KeyConfig(BaseModel):
    """Keyboard configuration.

    Each key binding can be either a single chord string or a list of them.
    Chords support modifiers: ctrl+, alt+, shift+, super+ (e.g. "ctrl+right").
    """

    model_config = ConfigDict(frozen=True)

    seek_backward: str | list[str] = Field(default="left", description="Seek backward")
    seek_forward: str | list[str] = Field(default="right", description="Seek forward")
    toggle_pause: str | list[str] = Field(default="space", description="Play/pause")
    toggle_loop: str | list[str] = Field(default="l", description="Toggle looping")

    def get_keys(self, action: str) -> list[str]:
        """Get all key bindings for an action.

        Args:
            action: The action name (e.g., 'toggle_pause').

        Returns:
            List of chord strings for the action.
        """
        value = getattr(self, action, None)
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]


class Config(BaseModel):
    """Complete application configuration.

    Instances are immutable snapshots; reloading builds a new one.
    """

    model_config = ConfigDict(frozen=True)

    player: PlayerConfig = Field(default_factory=PlayerConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    keys: KeyConfig = Field(default_factory=KeyConfig)
    log: LogConfig = Field(default_factory=LogConfig)


_SECTIONS: dict[str, type[BaseModel]] = {
    "player": PlayerConfig,
    "ui": UIConfig,
    "keys": KeyConfig,
    "log": LogConfig,
}


def get_config_path() -> Path:
    """Get the configuration file path."""
    return Path.home() / ".config" / "scrubber" / "config.toml"


def get_data_path() -> Path:
    """Get the data directory path."""
    xdg_data = Path.home() / ".local" / "share"
    return xdg_data / "scrubber"


def get_default_config_toml() -> str:
    """Generate the default configuration as TOML."""
    return """# Scrubber Configuration
# This file is auto-generated with default values.
# Uncomment and modify settings as needed.

[player]
backend = "mpv"  # or "vlc", "null"
seek_step = 10.0
video = true
load_timeout = 10.0

[ui]
theme = "dark"  # or "light", "system"
tick_interval = 2.0

[keys]
# Keys can be single values or lists: key = "l" or key = ["l", "ctrl+l"]
# Modifiers supported: ctrl+, alt+, shift+, super+ (e.g., "ctrl+right")
seek_backward = "left"
seek_forward = "right"
toggle_pause = "space"
toggle_loop = "l"

[log]
level = "info"  # or "debug", "warning", "error"
to_file = true
"""


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Loaded configuration, with defaults for missing or malformed values.
    """
    if path is None:
        path = get_config_path()

    if not path.exists():
        # Create default config file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(get_default_config_toml())
        return Config()

    try:
        return _parse_config(_read_config(path))
    except ConfigLoadFailure as e:
        _log.warning("Using default configuration: %s", e)
        return Config()


def _read_config(path: Path) -> dict[str, Any]:
    """Read the raw TOML data from a config file.

    Raises:
        ConfigLoadFailure: If the file cannot be read or parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigLoadFailure(f"{path}: {e}") from e


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration from dictionary.

    A section that fails validation falls back to its defaults without
    affecting the other sections.

    Args:
        data: Dictionary of configuration data from TOML.

    Returns:
        Parsed Config object with all sections populated.
    """
    sections: dict[str, BaseModel] = {}
    for name, model in _SECTIONS.items():
        raw = data.get(name, {})
        if not isinstance(raw, dict):
            _log.warning("Config section [%s] is not a table, using defaults", name)
            sections[name] = model()
            continue
        try:
            sections[name] = model(**raw)
        except ValidationError as e:
            _log.warning(
                "Invalid values in config section [%s], using defaults: %s",
                name,
                e.errors(include_url=False),
            )
            sections[name] = model()
    return Config(**sections)


class ConfigWatcher:
    """Reports when the configuration file changes on disk."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the watcher.

        Args:
            path: Path to watch. If None, uses the default config location.
        """
        self._path = path if path is not None else get_config_path()
        self._mtime = self._stat()

    @property
    def path(self) -> Path:
        """The watched configuration file."""
        return self._path

    def _stat(self) -> float | None:
        try:
            return self._path.stat().st_mtime
        except OSError:
            return None

    def changed(self) -> bool:
        """Check whether the file was modified, created or removed since the last check."""
        mtime = self._stat()
        if mtime == self._mtime:
            return False
        self._mtime = mtime
        return True


# Global configuration snapshot (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration snapshot."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(path: Path | None = None) -> Config:
    """Replace the global configuration snapshot with a freshly loaded one."""
    global _config
    _config = load_config(path)
    return _config
