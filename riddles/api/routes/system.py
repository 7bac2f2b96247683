"""Root and health endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from riddles.core.utils import utc_now

router = APIRouter(tags=["system"])


@router.get("/")
async def root():
    return {
        "message": "Welcome to Riddles Server!",
        "version": "2.0.0",
        "features": {
            "auth": [
                "POST /auth/register - Create account",
                "POST /auth/login - Get a token",
                "GET /auth/profile - Current user",
                "POST /auth/validate - Check a token",
                "POST /auth/logout - Log out",
                "PUT /auth/change-password - Change password",
            ],
            "riddles": [
                "GET /riddles - Get all riddles",
                "GET /riddles/random - Get random riddle",
                "GET /riddles/{id} - Get riddle by ID",
                "POST /riddles - Create new riddle",
                "PUT /riddles/{id} - Update riddle",
                "DELETE /riddles/{id} - Delete riddle",
                "POST /riddles/load-initial - Load initial riddles",
            ],
            "players": [
                "GET /players - List players",
                "POST /players - Create player",
                "GET /players/leaderboard - Get leaderboard",
                "POST /players/submit-score - Submit score",
                "PUT /players/{username}/role - Change role",
                "GET /players/{username} - Get player stats",
            ],
            "system": ["GET /health - Health check"],
        },
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health")
async def health(request: Request):
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "status": "OK",
        "timestamp": utc_now().isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
    }
