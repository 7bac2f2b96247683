"""
Core data models for the riddles service.

Players double as user accounts: a player created through registration
has a password hash, one created by an admin or by a score submission
does not.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from riddles.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Platform-wide role governing route access."""
    
    GUEST = "guest"  # No account, or no token presented
    USER = "user"    # Registered player
    ADMIN = "admin"  # Can manage riddles and players


class RiddleLevel(str, Enum):
    """Difficulty of a riddle."""
    
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Players
# =============================================================================


class ScoreEntry(BaseModel):
    """One solved riddle."""
    
    riddle_id: str
    time_to_solve: float  # seconds
    solved_at: datetime = Field(default_factory=utc_now)


class PublicUser(BaseModel):
    """User data returned to clients (no credentials)."""
    
    id: int
    username: str
    role: Role
    created_at: datetime


class Player(BaseModel):
    """A player record, owned by the player repository."""
    
    id: int
    username: str
    password_hash: str | None = None
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utc_now)
    
    best_time: float | None = None
    score_history: list[ScoreEntry] = Field(default_factory=list)
    
    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)
    
    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            username=self.username,
            role=self.role,
            created_at=self.created_at,
        )
    
    def record_score(self, riddle_id: str, time_to_solve: float) -> ScoreEntry:
        """Append a solve and keep best_time at the fastest one."""
        entry = ScoreEntry(riddle_id=riddle_id, time_to_solve=time_to_solve)
        self.score_history.append(entry)
        if self.best_time is None or time_to_solve < self.best_time:
            self.best_time = time_to_solve
        return entry
    
    def stats(self) -> PlayerStats:
        """Compute the full stats view. Nothing here is persisted."""
        times = [entry.time_to_solve for entry in self.score_history]
        total = sum(times)
        return PlayerStats(
            username=self.username,
            created_at=self.created_at,
            riddles_solved=len(times),
            best_time=self.best_time,
            total_time=total,
            average_time=(total / len(times)) if times else None,
            detailed_history=list(self.score_history),
        )


class PlayerStats(BaseModel):
    """
    Derived, read-only view of a player.
    
    Which of these fields a caller may see is decided by
    riddles.services.visibility.
    """
    
    # Basic
    username: str
    created_at: datetime
    riddles_solved: int
    
    # Extended
    best_time: float | None = None
    total_time: float = 0.0
    average_time: float | None = None
    detailed_history: list[ScoreEntry] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    rank: int
    username: str
    best_time: float
    riddles_solved: int


# =============================================================================
# Riddles
# =============================================================================


class Riddle(BaseModel):
    """A riddle with its expected answer."""
    
    id: str = Field(default_factory=lambda: generate_id("riddle"))
    question: str
    answer: str
    level: RiddleLevel = RiddleLevel.MEDIUM
    created_at: datetime = Field(default_factory=utc_now)
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Riddle:
        return cls.model_validate(data)
