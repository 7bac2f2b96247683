# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register        - Create account (adminCode grants admin)
#   POST /auth/login           - Get a token
#   GET  /auth/profile         - Get current user
#   POST /auth/validate        - Check the presented token
#   POST /auth/logout          - Log out (client discards the token)
#   PUT  /auth/change-password - Change password
#
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from riddles.api.dependencies import get_context
from riddles.api.responses import ok
from riddles.app_context import AppContext
from riddles.auth.context import IdentityContext
from riddles.auth.policies import require_auth

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    username: str | None = None
    password: str | None = None
    admin_code: str | None = Field(None, alias="adminCode")


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    current_password: str | None = Field(None, alias="currentPassword")
    new_password: str | None = Field(None, alias="newPassword")


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", status_code=201)
async def register(data: RegisterRequest, app: AppContext = Depends(get_context)):
    """
    Create a new account.
    
    Returns the public user and a token on success.
    """
    result = await app.auth.register_user(data.username, data.password, data.admin_code)
    return ok(result, message="User registered successfully")


@router.post("/login")
async def login(data: LoginRequest, app: AppContext = Depends(get_context)):
    result = await app.auth.login_user(data.username, data.password)
    return ok(result, message="Login successful")


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/profile")
async def profile(ctx: IdentityContext = Depends(require_auth())):
    return ok({
        "id": ctx.id,
        "username": ctx.username,
        "role": ctx.role,
        "tokenExpiry": ctx.token_expiry,
    })


@router.post("/validate")
async def validate(ctx: IdentityContext = Depends(require_auth())):
    return ok({
        "valid": True,
        "user": {"id": ctx.id, "username": ctx.username, "role": ctx.role},
        "expiresAt": ctx.token_expiry,
    })


@router.post("/logout")
async def logout(ctx: IdentityContext = Depends(require_auth())):
    """
    Logout (client should discard its token).
    
    Tokens stay valid until expiry; changing the role or deleting the
    account is what revokes them server-side.
    """
    logger.info(f"User logged out: {ctx.username}")
    return ok(message="Logout successful. Please discard your token")


@router.put("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    ctx: IdentityContext = Depends(require_auth()),
    app: AppContext = Depends(get_context),
):
    await app.auth.change_password(ctx.id, data.current_password, data.new_password)
    return ok(message="Password changed successfully")
