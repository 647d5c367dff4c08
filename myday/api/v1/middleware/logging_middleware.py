"""Access log with a per-request correlation id.

The id comes from ``x-request-id`` when the client sends one and is
generated otherwise.  It is bound into the structlog context together with
the method and path, so events logged deeper in the stack (intent
classification, task writes) carry it too, and it is echoed back in the
response header.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from myday.utils.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error("request_aborted", elapsed_ms=_elapsed_ms(start))
            raise

        level = "info" if response.status_code < 400 else "warning"
        getattr(logger, level)(
            "request_served",
            status_code=response.status_code,
            elapsed_ms=_elapsed_ms(start),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
