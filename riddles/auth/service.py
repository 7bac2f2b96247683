"""
Auth service - registration, login and token verification.

Orchestrates the password hasher, the token codec and the player
repository. Route handlers and the authentication dependency talk to
this class only.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

from riddles.auth.jwt import (
    TokenPayload,
    create_access_token,
    decode_token,
    hash_password_async,
    verify_password_async,
)
from riddles.config import Settings
from riddles.core.errors import (
    ApiError,
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from riddles.core.models import Player, Role
from riddles.storage.players import PlayerRepository

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# Same wording for unknown username and wrong password
INVALID_CREDENTIALS = "Invalid username or password"


def is_valid_role(value: Any) -> bool:
    """Check whether a string names one of the known roles."""
    return value in {role.value for role in Role}


def _validate_password(password: Any) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


class AuthService:
    """Account lifecycle and token issuance."""
    
    def __init__(self, settings: Settings, players: PlayerRepository):
        self.settings = settings
        self.players = players
    
    # =========================================================================
    # Tokens
    # =========================================================================
    
    def generate_token(self, player: Player) -> str:
        return create_access_token(player.id, player.username, player.role, self.settings)
    
    def verify_token(self, token: str) -> TokenPayload:
        """Raises AuthError for empty, malformed, forged or expired tokens."""
        return decode_token(token, self.settings)
    
    def _resolve_role(self, admin_code: str | None) -> Role:
        secret = self.settings.admin_secret_code
        if admin_code and secret and secrets.compare_digest(admin_code.encode(), secret.encode()):
            return Role.ADMIN
        return Role.USER
    
    def _session(self, player: Player) -> dict[str, Any]:
        return {
            "user": player.to_public().model_dump(mode="json"),
            "token": self.generate_token(player),
        }
    
    # =========================================================================
    # Registration / Login
    # =========================================================================
    
    async def register_user(
        self,
        username: str | None,
        password: str | None,
        admin_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Create an account and return `{user, token}`.
        
        Raises:
            ValidationError: missing or too short username/password
            ConflictError: username already taken
            InternalError: storage failed unexpectedly
        """
        if not username or not password:
            raise ValidationError("Username and password are required")
        if not isinstance(username, str):
            raise ValidationError("Username must be a string")
        
        username = username.strip()
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters long"
            )
        _validate_password(password)
        
        role = self._resolve_role(admin_code)
        
        try:
            if await self.players.get_by_username(username):
                raise ConflictError("Username already exists")
            
            password_hash = await hash_password_async(
                password, self.settings.password_hash_iterations
            )
            player = await self.players.create(username, password_hash, role)
        except ApiError:
            raise
        except Exception as e:
            logger.exception(f"Registration failed for {username}")
            raise InternalError("Failed to register user", cause=e) from e
        
        logger.info(f"New user registered: {username} with role: {role.value}")
        return self._session(player)
    
    async def login_user(self, username: str | None, password: str | None) -> dict[str, Any]:
        """Check credentials and return `{user, token}` with the current role."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        
        player = await self.players.get_by_username(username.strip())
        if player is None:
            raise AuthError(INVALID_CREDENTIALS)
        
        if not player.has_password:
            raise AuthError("Account has no password set. Please register to log in")
        
        if not await verify_password_async(password, player.password_hash):
            raise AuthError(INVALID_CREDENTIALS)
        
        logger.info(f"User logged in: {player.username} with role: {player.role.value}")
        return self._session(player)
    
    # =========================================================================
    # Account
    # =========================================================================
    
    async def get_user_by_id(self, user_id: int) -> Player | None:
        """None means the subject no longer exists."""
        return await self.players.get_by_id(user_id)
    
    async def change_password(
        self,
        user_id: int,
        current_password: str | None,
        new_password: str | None,
    ) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        _validate_password(new_password)
        
        player = await self.players.get_by_id(user_id)
        if player is None:
            raise NotFoundError("User not found")
        
        if not player.has_password or not await verify_password_async(
            current_password, player.password_hash
        ):
            raise AuthError("Current password is incorrect")
        
        password_hash = await hash_password_async(
            new_password, self.settings.password_hash_iterations
        )
        await self.players.update_password(player.id, password_hash)
        logger.info(f"Password changed for user: {player.username}")
