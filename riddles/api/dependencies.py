"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from riddles.app_context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context
