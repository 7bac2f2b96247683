"""
Policies - authentication and authorization as FastAPI dependencies.

Just use: `ctx: IdentityContext = Depends(require_admin())`

Design:
- `authenticate()` returns a dependency that resolves the caller's
  IdentityContext from the request's token
- `authorize()` chains on it and checks the caller's role against an
  allowed set
- Nothing is cached between requests: every call re-verifies the token
  and re-fetches the subject, so deletions and role changes take effect
  on the very next request
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from fastapi import Depends, Request

from riddles.auth.context import IdentityContext
from riddles.auth.service import AuthService
from riddles.core.errors import ApiError, AuthError, ForbiddenError, InternalError
from riddles.core.models import Role

logger = logging.getLogger(__name__)


# =============================================================================
# Token Extraction
# =============================================================================


def extract_token(request: Request) -> str | None:
    """
    Find the caller's token. First match wins:
    
    1. `Authorization: Bearer <token>` header
    2. `token` query parameter
    3. `x-auth-token` header
    """
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            return token
    
    token = request.query_params.get("token")
    if token:
        return token
    
    token = request.headers.get("x-auth-token")
    if token:
        return token
    
    return None


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.context.auth


# =============================================================================
# Authentication
# =============================================================================


async def resolve_identity(
    token: str | None,
    auth: AuthService,
    required: bool = True,
    allow_guest: bool = True,
) -> IdentityContext | None:
    """
    Turn a (possibly missing) token into an identity.
    
    Returns None only when no token was sent and neither `required`
    nor `allow_guest` is set.
    """
    try:
        if not token:
            if required:
                raise AuthError("Authentication token is required")
            return IdentityContext.guest() if allow_guest else None
        
        payload = auth.verify_token(token)
        
        user = await auth.get_user_by_id(payload.id)
        if user is None:
            raise AuthError("User not found or has been deleted")
        
        if user.role != payload.role:
            raise AuthError("User role has changed. Please login again")
        
        return IdentityContext.from_player(user, payload)
    
    except ApiError:
        raise
    except Exception as e:
        logger.exception("Unexpected error during authentication")
        raise InternalError("Authentication failed", cause=e) from e


def authenticate(required: bool = True, allow_guest: bool = True) -> Callable:
    """
    Authenticate the caller.
    
    Modes:
        authenticate()                                   token required
        authenticate(required=False)                     guest when no token
        authenticate(required=False, allow_guest=False)  None when no token
    
    A token that IS sent is always fully checked, whatever the mode.
    """
    
    async def dependency(
        request: Request,
        auth: AuthService = Depends(get_auth_service),
    ) -> IdentityContext | None:
        ctx = await resolve_identity(
            extract_token(request),
            auth,
            required=required,
            allow_guest=allow_guest,
        )
        request.state.identity = ctx
        return ctx
    
    return dependency


# =============================================================================
# Authorization
# =============================================================================


def check_roles(ctx: IdentityContext | None, allowed: frozenset[Role]) -> IdentityContext:
    """
    Enforce a role allow-list on an already authenticated caller.
    
    An empty set lets any identity through.
    """
    if ctx is None:
        raise AuthError("Authentication required for authorization")
    
    if not allowed or ctx.role in allowed:
        return ctx
    
    required = " or ".join(sorted(role.value for role in allowed))
    raise ForbiddenError(
        f"Access denied. Required role: {required}. Your role: {ctx.role.value}"
    )


def authorize(
    allowed: Iterable[Role] = frozenset(),
    authentication: Callable | None = None,
) -> Callable:
    """
    Require one of the `allowed` roles.
    
    Usage:
        @router.delete("/{riddle_id}")
        async def delete_riddle(
            riddle_id: str,
            ctx: IdentityContext = Depends(authorize({Role.ADMIN})),
        ):
            ...
    
    Args:
        allowed: Roles that may pass; empty means any identity
        authentication: Dependency supplying the identity
            (defaults to `authenticate()`, token required)
    """
    allowed_roles = frozenset(allowed)
    
    async def dependency(
        ctx: IdentityContext | None = Depends(authentication or authenticate()),
    ) -> IdentityContext:
        return check_roles(ctx, allowed_roles)
    
    return dependency


def require_auth() -> Callable:
    """Just require a valid token, any role."""
    return authorize()


def require_user_or_admin() -> Callable:
    return authorize({Role.USER, Role.ADMIN})


def require_admin() -> Callable:
    return authorize({Role.ADMIN})
