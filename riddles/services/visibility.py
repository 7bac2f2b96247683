"""
Player visibility - which stats a caller may see.

Everyone with at least a guest identity sees the basic fields. Admins,
and players looking at their own profile, also see the extended ones.
"""

from __future__ import annotations

from typing import Any

from riddles.auth.context import IdentityContext
from riddles.core.errors import AuthError
from riddles.core.models import PlayerStats, Role

BASIC_FIELDS = ("username", "created_at", "riddles_solved")
EXTENDED_FIELDS = ("best_time", "total_time", "average_time", "detailed_history")


def can_view_extended(caller: IdentityContext, target_username: str) -> bool:
    return caller.role == Role.ADMIN or (
        caller.username is not None and caller.username == target_username
    )


def project_player_stats(
    caller: IdentityContext | None,
    target_username: str,
    stats: PlayerStats,
) -> dict[str, Any]:
    """
    Build the response body for a player profile.
    
    Returns a new dict; `stats` is left untouched.
    
    Raises:
        AuthError: no identity at all was attached to the request
    """
    if caller is None:
        raise AuthError("Authentication required to view player information")
    
    data = stats.model_dump(mode="json")
    fields = BASIC_FIELDS
    if can_view_extended(caller, target_username):
        fields = BASIC_FIELDS + EXTENDED_FIELDS
    
    return {name: data[name] for name in fields}
