from __future__ import annotations

import logging
from time import perf_counter
from typing import Any
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("famtime.api.request")

REQUEST_ID_HEADER = "X-Request-Id"


def _route_template(request: Request) -> str:
    path = getattr(request.scope.get("route"), "path", None)
    return path if isinstance(path, str) else request.url.path


def _request_fields(request: Request, *, status_code: int, started: float) -> dict[str, Any]:
    return {
        "request_id": request.state.request_id,
        "user_id": getattr(request.state, "user_id", None),
        "route": _route_template(request),
        "method": request.method,
        "status_code": status_code,
        "execution_time_ms": round((perf_counter() - started) * 1000, 2),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and echoes the request id back to the caller."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = perf_counter()
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request.failed", extra=_request_fields(request, status_code=500, started=started))
            raise

        logger.info(
            "request.completed",
            extra=_request_fields(request, status_code=response.status_code, started=started),
        )
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response
