"""
Services - game logic on top of the repositories.
"""

from riddles.services.players import PlayerService
from riddles.services.riddles import RiddleService, validate_riddle_data
from riddles.services.visibility import project_player_stats

__all__ = [
    "PlayerService",
    "RiddleService",
    "validate_riddle_data",
    "project_player_stats",
]
