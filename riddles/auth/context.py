"""
Identity context - the "who is calling" for each request.

This is the lightweight object passed to route handlers once
authentication has run. It is built fresh per request and never shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from riddles.auth.jwt import TokenPayload
from riddles.core.models import Player, Role


@dataclass(frozen=True)
class IdentityContext:
    """
    Who is making the request.
    
    Usage in routes:
        async def my_route(ctx: IdentityContext = Depends(require_admin())):
            print(f"{ctx.username} ({ctx.role.value}) is deleting a riddle")
    """
    
    id: int | None = None
    username: str | None = None
    role: Role = Role.GUEST
    
    # The verified token this identity came from (None for guests)
    token: TokenPayload | None = None
    
    @property
    def is_authenticated(self) -> bool:
        """Is there a logged-in user?"""
        return self.id is not None
    
    @property
    def is_guest(self) -> bool:
        return self.role == Role.GUEST
    
    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
    
    @property
    def token_expiry(self) -> datetime | None:
        return self.token.expires_at if self.token else None
    
    def has_role(self, *roles: Role) -> bool:
        return self.role in roles
    
    @classmethod
    def guest(cls) -> IdentityContext:
        """Create a guest context (no account, no token)."""
        return cls()
    
    @classmethod
    def from_player(cls, player: Player, token: TokenPayload) -> IdentityContext:
        """Build from the freshly fetched record, not from token claims."""
        return cls(
            id=player.id,
            username=player.username,
            role=player.role,
            token=token,
        )
