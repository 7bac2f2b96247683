# =============================================================================
# Riddle Routes
# =============================================================================
#
# Access:
#   GET    /riddles              - user, admin
#   GET    /riddles/random       - public
#   GET    /riddles/{id}         - user, admin
#   POST   /riddles              - user, admin
#   PUT    /riddles/{id}         - admin
#   DELETE /riddles/{id}         - admin
#   POST   /riddles/load-initial - admin
#
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from riddles.api.dependencies import get_context
from riddles.api.responses import ok
from riddles.app_context import AppContext
from riddles.auth.context import IdentityContext
from riddles.auth.policies import require_admin, require_user_or_admin

router = APIRouter(prefix="/riddles", tags=["riddles"])


class RiddleInput(BaseModel):
    question: str | None = None
    answer: str | None = None
    level: str | None = None


@router.get("")
async def list_riddles(
    level: str | None = None,
    limit: int = 50,
    skip: int = 0,
    ctx: IdentityContext = Depends(require_user_or_admin()),
    app: AppContext = Depends(get_context),
):
    riddles = await app.riddles.list_riddles(level=level, limit=limit, skip=skip)
    return ok(riddles, count=len(riddles))


@router.get("/random")
async def random_riddle(app: AppContext = Depends(get_context)):
    return ok(await app.riddles.random_riddle())


@router.post("/load-initial")
async def load_initial_riddles(
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    inserted = await app.riddles.load_initial_riddles()
    return ok(
        {"inserted": inserted, "total": await app.storage.riddles.count()},
        message=f"Loaded {inserted} initial riddles",
    )


@router.get("/{riddle_id}")
async def get_riddle(
    riddle_id: str,
    ctx: IdentityContext = Depends(require_user_or_admin()),
    app: AppContext = Depends(get_context),
):
    return ok(await app.riddles.get_riddle(riddle_id))


@router.post("", status_code=201)
async def create_riddle(
    data: RiddleInput,
    ctx: IdentityContext = Depends(require_user_or_admin()),
    app: AppContext = Depends(get_context),
):
    riddle = await app.riddles.create_riddle(data.model_dump(exclude_none=True))
    return ok(riddle, message="Riddle created successfully")


@router.put("/{riddle_id}")
async def update_riddle(
    riddle_id: str,
    data: RiddleInput,
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    riddle = await app.riddles.update_riddle(riddle_id, data.model_dump(exclude_none=True))
    return ok(riddle, message="Riddle updated successfully")


@router.delete("/{riddle_id}")
async def delete_riddle(
    riddle_id: str,
    ctx: IdentityContext = Depends(require_admin()),
    app: AppContext = Depends(get_context),
):
    return ok(await app.riddles.delete_riddle(riddle_id), message="Riddle deleted successfully")
