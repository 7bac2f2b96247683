"""
FastAPI application for the riddles service.

`create_app()` builds an app bound to explicit settings; the lifespan
opens an AppContext (storage + services) on `app.state` and closes it on
shutdown.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from riddles.api.responses import error_response, status_response
from riddles.api.routes import players, riddles, system
from riddles.app_context import AppContext
from riddles.auth.routes import router as auth_router
from riddles.config import Settings, configure_logging, get_settings
from riddles.core.errors import (
    ApiError,
    InternalError,
    ValidationError,
)
from riddles.integrations.sentry import capture_exception, init_sentry

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings: Settings = app.state.settings
    
    init_sentry(settings)
    
    context = AppContext.from_settings(settings, storage=app.state.storage)
    await context.open()
    app.state.context = context
    app.state.started_at = time.monotonic()
    
    logger.info(f"Riddles API starting in {settings.environment} mode")
    
    yield
    
    await context.close()
    logger.info("Riddles API shutting down")


# =============================================================================
# Exception Handlers
# =============================================================================


async def handle_api_error(request: Request, exc: ApiError):
    if not exc.kind.is_domain:
        cause = getattr(exc, "cause", None) or exc
        logger.error(
            f"Internal error on {request.method} {request.url.path}: {exc.message}",
            exc_info=cause,
        )
        capture_exception(cause, path=request.url.path)
    return error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return error_response(ValidationError("Invalid request data", details=details))


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """Unknown routes, wrong methods and the like."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return status_response(exc.status_code, message)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    capture_exception(exc, path=request.url.path)
    return error_response(InternalError())


# =============================================================================
# App Setup
# =============================================================================


def create_app(settings: Settings | None = None, storage=None) -> FastAPI:
    """
    Build the application.
    
    Args:
        settings: Defaults to the environment-derived settings
        storage: Pre-built StorageProvider (tests); otherwise created
            from settings at startup
    """
    settings = settings or get_settings()
    configure_logging(settings)
    
    app = FastAPI(
        title="Riddles API",
        description="Riddles game backend with JWT auth and role-based access",
        version="2.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            identity = getattr(request.state, "identity", None)
            caller = identity.username if identity is not None and identity.username else "anonymous"
            logger.info(
                f"{request.method} {request.url.path} -> {status_code} "
                f"({elapsed_ms:.1f}ms, caller={caller})"
            )
    
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
    
    # Include routers
    app.include_router(system.router)
    app.include_router(auth_router)
    app.include_router(riddles.router)
    app.include_router(players.router)
    
    return app
