from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("famtime.api.errors")

ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "VALIDATION_ERROR",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
    status.HTTP_502_BAD_GATEWAY: "BAD_GATEWAY",
}

DEFAULT_MESSAGE = "Request failed"


def error_body(code: str, message: str, details: Any | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return body


def unpack_detail(status_code: int, detail: Any) -> dict[str, Any]:
    """Turn an ``HTTPException.detail`` into ``{code, message, details?}``.

    Routes may raise with a plain string or with a mapping carrying its own
    ``code``/``message``/``details``; anything else is passed through as details.
    """
    code = ERROR_CODES.get(status_code, "HTTP_ERROR")
    if isinstance(detail, str):
        return error_body(code, detail or DEFAULT_MESSAGE)
    if isinstance(detail, Mapping):
        raw_code, raw_message = detail.get("code"), detail.get("message")
        return error_body(
            raw_code if isinstance(raw_code, str) and raw_code else code,
            raw_message if isinstance(raw_message, str) and raw_message else DEFAULT_MESSAGE,
            detail.get("details"),
        )
    return error_body(code, DEFAULT_MESSAGE, detail)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(unpack_detail(exc.status_code, exc.detail)),
        headers=exc.headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(error_body("VALIDATION_ERROR", "Validation failed", exc.errors())),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "Internal server error"),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
