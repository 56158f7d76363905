"""Custom Textual widgets for scrubber."""

from scrubber.widgets.player_bar import PlayerBar
from scrubber.widgets.seek_bar import SeekBar

__all__ = [
    "PlayerBar",
    "SeekBar",
]
