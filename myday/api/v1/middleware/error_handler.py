"""Turns service exceptions into JSON error bodies.

Every :class:`~myday.utils.exceptions.MyDayError` raised while handling a
request becomes ``{"error": <class name>, "detail": <message>}`` with the
status code registered for its class (or the nearest registered base).
Anything else is logged with its traceback and reported as a 500 without
leaking the message.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from myday.utils.exceptions import (
    AuthenticationError,
    ChatNotFoundError,
    ConfigurationError,
    LLMError,
    MyDayError,
    TaskNotFoundError,
    ValidationError,
)
from myday.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[type[MyDayError], int] = {
    AuthenticationError: 401,
    TaskNotFoundError: 404,
    ChatNotFoundError: 404,
    ValidationError: 400,
    LLMError: 502,
    ConfigurationError: 500,
}


def status_for(exc: MyDayError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except MyDayError as exc:
            code = status_for(exc)
            logger.warning(
                "request_rejected",
                path=request.url.path,
                status_code=code,
                error=type(exc).__name__,
                detail=str(exc),
            )
            return JSONResponse(
                {"error": type(exc).__name__, "detail": str(exc)},
                status_code=code,
            )
        except Exception as exc:
            logger.error(
                "request_crashed",
                path=request.url.path,
                error=type(exc).__name__,
                detail=str(exc),
                exc_info=True,
            )
            return JSONResponse(
                {"error": "InternalServerError", "detail": "Something went wrong on our side."},
                status_code=500,
            )
