# =============================================================================
# JWT Tokens and Password Hashing
# =============================================================================
#
# This module provides the two primitives authentication is built on:
#   - Password hashing (PBKDF2-SHA256, salted)
#   - Token creation and validation (signed, expiring JWTs)
#
# =============================================================================

from datetime import datetime, timedelta, timezone
import asyncio
import hashlib
import logging
import secrets

from pydantic import BaseModel
import jwt

from riddles.config import Settings
from riddles.core.errors import AuthError
from riddles.core.models import Role
from riddles.core.utils import utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================

class TokenPayload(BaseModel):
    """Verified identity claims carried by a token."""
    id: int
    username: str
    role: Role
    issued_at: datetime
    expires_at: datetime


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str, iterations: int = 100_000) -> str:
    """
    Hash a password using PBKDF2-SHA256.
    
    Returns: iterations:salt:hash format string
    """
    if not password or not isinstance(password, str):
        raise ValueError("Password must be a non-empty string")
    
    salt = secrets.token_hex(16)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=iterations,
    )
    return f"{iterations}:{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        iterations, salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=int(iterations),
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


async def hash_password_async(password: str, iterations: int = 100_000) -> str:
    """Hash off the event loop; PBKDF2 is deliberately slow."""
    return await asyncio.to_thread(hash_password, password, iterations)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash)


# =============================================================================
# Token Creation
# =============================================================================

def create_access_token(
    user_id: int,
    username: str,
    role: Role,
    settings: Settings,
) -> str:
    """Create a signed JWT carrying the subject's identity and role."""
    now = utc_now()
    expire = now + timedelta(minutes=settings.jwt_expire_minutes)
    
    payload = {
        "id": user_id,
        "username": username,
        "role": role.value,
        "iat": now,
        "exp": expire,
    }
    
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


# =============================================================================
# Token Validation
# =============================================================================

def decode_token(token: str, settings: Settings) -> TokenPayload:
    """
    Decode and validate a JWT token.
    
    Args:
        token: The JWT string
        settings: Supplies the secret and algorithm
    
    Returns:
        TokenPayload with validated claims
    
    Raises:
        AuthError: empty, expired, forged or malformed token
    """
    if not token or not isinstance(token, str):
        raise AuthError("Token must be a non-empty string")
    
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise AuthError("Invalid token")
    
    try:
        return TokenPayload(
            id=claims["id"],
            username=claims["username"],
            role=Role(claims["role"]),
            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError, TypeError):
        raise AuthError("Malformed token payload")
