"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hiddenspins.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


# Hey future me - this runs around EVERY request. It picks up the caller's X-Correlation-ID
# (or makes one), so all logs of that request share it, and echoes it back in the response.
# The SSE route is the exception to "log when done": its response object returns as soon as
# streaming starts, so the duration logged there is time-to-first-byte, not stream lifetime.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests/responses and propagate correlation IDs."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        set_correlation_id(request.headers.get(CORRELATION_HEADER))

        method = request.method
        path = request.url.path
        logger.info(
            f"→ {method} {path}",
            extra={
                "method": method,
                "path": path,
                "query_params": str(request.query_params),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = int((time.perf_counter() - start) * 1000)
        marker = "✓" if response.status_code < 400 else "✗"
        logger.info(
            f"{marker} {method} {path} → {response.status_code} ({duration_ms}ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
