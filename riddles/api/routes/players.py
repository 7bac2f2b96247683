# =============================================================================
# Player Routes
# =============================================================================
#
# Access:
#   GET  /players                  - admin
#   POST /players                  - admin
#   GET  /players/leaderboard      - user, admin
#   POST /players/submit-score     - user, admin (admins may submit for others)
#   PUT  /players/{username}/role  - admin
#   GET  /players/{username}       - anyone; guests get basic stats only
#
# =============================================================================

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field

from riddles.api.dependencies import get_context
from riddles.api.responses import ok
from riddles.app_context import AppContext
from riddles.auth.context import IdentityContext
from riddles.auth.policies import authenticate, require_admin, require_user_or_admin
from riddles.core.errors import ForbiddenError
from riddles.core.models import Role
from riddles.services.visibility import project_player_stats

router = APIRouter(prefix="/players", tags=["players"])


class CreatePlayerRequest(BaseModel):
    username: str | None = None


class ScoreSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    username: str | None = None
    riddle_id: str | None = Field(None, alias="riddleId")
    time_to_solve: float | None = Field(None, alias="timeToSolve")


class RoleChangeRequest(BaseModel):
    role: Role


@router.get("")
async def list_players(
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    return ok(await app.players.list_players())


@router.post("", status_code=201)
async def create_player(
    data: CreatePlayerRequest,
    response: Response,
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    player, created = await app.players.create_player(data.username)
    if not created:
        response.status_code = 200
        return ok(player.to_public(), message="Player already exists")
    return ok(player.to_public(), message="Player created successfully")


@router.get("/leaderboard")
async def leaderboard(
    limit: int = 10,
    ctx: IdentityContext = Depends(require_user_or_admin()),
    app: AppContext = Depends(get_context),
):
    return ok(await app.players.leaderboard(limit))


@router.post("/submit-score")
async def submit_score(
    data: ScoreSubmission,
    ctx: IdentityContext = Depends(require_user_or_admin()),
    app: AppContext = Depends(get_context),
):
    username = data.username or ctx.username
    if username != ctx.username and not ctx.is_admin:
        raise ForbiddenError("You can only submit scores for your own account")
    
    player = await app.players.submit_score(username, data.riddle_id, data.time_to_solve)
    return ok(
        {"username": player.username, "best_time": player.best_time},
        message="Score submitted successfully",
    )


@router.put("/{username}/role")
async def change_role(
    username: str,
    data: RoleChangeRequest,
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    player = await app.players.change_role(username, data.role)
    return ok(player.to_public(), message="Role updated. Existing tokens for this player are revoked")


@router.get("/{username}")
async def get_player(
    username: str,
    ctx: IdentityContext | None = Depends(authenticate(required=False)),
    app: AppContext = Depends(get_context),
):
    stats = await app.players.get_player_stats(username)
    return ok(project_player_stats(ctx, username, stats))
