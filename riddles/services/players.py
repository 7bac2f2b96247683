"""
Player service - profiles, scores and the leaderboard.
"""

from __future__ import annotations

import logging
import math

from riddles.core.errors import NotFoundError, ValidationError
from riddles.core.models import LeaderboardEntry, Player, PlayerStats, PublicUser, Role
from riddles.storage.players import PlayerRepository

logger = logging.getLogger(__name__)


class PlayerService:
    
    def __init__(self, players: PlayerRepository):
        self.players = players
    
    async def create_player(self, username: str | None) -> tuple[Player, bool]:
        """
        Create a password-less player, or return the existing one.
        
        Returns:
            (player, created)
        """
        if not username or not username.strip():
            raise ValidationError("Username is required")
        
        username = username.strip()
        existing = await self.players.get_by_username(username)
        if existing:
            return existing, False
        
        player = await self.players.create(username)
        logger.info(f"Player created: {username}")
        return player, True
    
    async def get_player_stats(self, username: str) -> PlayerStats:
        player = await self.players.get_by_username(username)
        if player is None:
            raise NotFoundError("Player not found")
        return player.stats()
    
    async def submit_score(
        self,
        username: str | None,
        riddle_id: str | None,
        time_to_solve: float | None,
    ) -> Player:
        """Record a solve for `username`, creating the player if needed."""
        if not username or not riddle_id or time_to_solve is None:
            raise ValidationError("Missing required fields: username, riddleId, timeToSolve")
        if not math.isfinite(time_to_solve) or time_to_solve <= 0:
            raise ValidationError("timeToSolve must be a positive number")
        
        player, _ = await self.create_player(username)
        player.record_score(riddle_id, time_to_solve)
        await self.players.save(player)
        return player
    
    async def leaderboard(self, limit: int = 10) -> list[LeaderboardEntry]:
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        
        ranked = await self.players.leaderboard(limit)
        return [
            LeaderboardEntry(
                rank=position,
                username=player.username,
                best_time=player.best_time,
                riddles_solved=len(player.score_history),
            )
            for position, player in enumerate(ranked, start=1)
        ]
    
    async def list_players(self) -> list[PublicUser]:
        return [player.to_public() for player in await self.players.list_all()]
    
    async def change_role(self, username: str, role: Role) -> Player:
        """
        Change a player's role.
        
        Tokens issued under the old role stop working on their next use.
        """
        if role == Role.GUEST:
            raise ValidationError("Registered players cannot be demoted to guest")
        
        player = await self.players.get_by_username(username)
        if player is None:
            raise NotFoundError("Player not found")
        
        updated = await self.players.update_role(player.id, role)
        logger.info(f"Role of {username} changed from {player.role.value} to {role.value}")
        return updated
