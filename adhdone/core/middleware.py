"""
Request/response logging middleware for FastAPI.

Logs all requests and responses with timing information.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from adhdone.core.config import settings
from adhdone.core.constants import SESSION_HEADER, SESSION_QUERY_PARAM
from adhdone.core.logging_config import truncate_caller

logger = logging.getLogger(__name__)


def _session_id(request: Request) -> str | None:
    """Streaming session named by a posted message, if any."""
    return request.query_params.get(SESSION_QUERY_PARAM) or request.headers.get(SESSION_HEADER)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Log request and response with timing."""
        start_time = time.time()

        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
                "caller": truncate_caller(request.headers.get(settings.CALLER_ID_HEADER)),
                "session_id": _session_id(request),
            },
        )

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            # For SSE streams this is the time to first byte, not the stream lifetime
            logger.info(
                f"Response: {request.method} {request.url.path} - {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "session_id": _session_id(request) or response.headers.get(SESSION_HEADER),
                    "process_time": f"{process_time:.3f}s",
                },
            )

            response.headers["X-Process-Time"] = str(process_time)
            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "process_time": f"{process_time:.3f}s",
                },
                exc_info=True,
            )
            raise
