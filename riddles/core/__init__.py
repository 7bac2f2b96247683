"""Core models, errors and utilities."""

from riddles.core.errors import (
    ApiError,
    AuthError,
    ConflictError,
    ErrorKind,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from riddles.core.models import (
    LeaderboardEntry,
    Player,
    PlayerStats,
    PublicUser,
    Riddle,
    RiddleLevel,
    Role,
    ScoreEntry,
)

__all__ = [
    # Errors
    "ApiError",
    "AuthError",
    "ConflictError",
    "ErrorKind",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
    # Models
    "LeaderboardEntry",
    "Player",
    "PlayerStats",
    "PublicUser",
    "Riddle",
    "RiddleLevel",
    "Role",
    "ScoreEntry",
]
