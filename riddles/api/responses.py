"""
Response envelopes.

Success: {"success": true, "message"?: str, "data": ...}
Error:   {"success": false, "error": {"message", "statusCode", "details"?}}
"""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from riddles.core.errors import ApiError


def ok(data: Any = None, message: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build a success envelope for a route to return."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(extra)
    body["data"] = jsonable_encoder(data)
    return body


def error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "error": error.to_dict()},
    )


def status_response(status_code: int, message: str) -> JSONResponse:
    """Error envelope for failures raised by the framework itself."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "statusCode": status_code}},
    )
