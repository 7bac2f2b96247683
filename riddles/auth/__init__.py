"""
Authentication and authorization.

Design principles:
1. One dependency per route: `Depends(require_admin())` and friends
2. Closed set of roles: guest, user, admin
3. Nothing cached between requests, so role changes and deletions
   revoke outstanding tokens on their next use
"""

from riddles.auth.context import IdentityContext
from riddles.auth.policies import (
    authenticate,
    authorize,
    check_roles,
    extract_token,
    require_admin,
    require_auth,
    require_user_or_admin,
)
from riddles.auth.jwt import (
    TokenPayload,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from riddles.auth.service import AuthService, is_valid_role

__all__ = [
    # Main interface
    "authenticate",
    "authorize",
    "check_roles",
    "extract_token",
    "require_admin",
    "require_auth",
    "require_user_or_admin",
    "IdentityContext",
    "AuthService",
    "is_valid_role",
    # JWT
    "TokenPayload",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
]
