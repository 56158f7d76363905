"""Screen modules for scrubber."""

from scrubber.screens.help import HelpScreen
from scrubber.screens.player import PlayerScreen

__all__ = ["HelpScreen", "PlayerScreen"]
