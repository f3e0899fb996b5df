"""
FastAPI middleware for observability.

Binds a correlation ID to each request and logs method, path, status and
latency under it.

Dependencies: fastapi, starlette, signflow.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from signflow.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Probes hit these constantly; keep them out of INFO logs
QUIET_PATHS = frozenset({"/api/v1/health", "/api/v1/health/db"})


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate and log every HTTP request."""

    async def dispatch(self, request: Request, call_next):
        """
        Run the request with a correlation ID bound to the context.

        The ID comes from the X-Correlation-ID header when the client sent
        one and is echoed back on the response.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response carrying the correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        method, path = request.method, request.url.path
        log = logger.debug if path in QUIET_PATHS else logger.info
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - unhandled {type(e).__name__}",
                extra={
                    "method": method,
                    "path": path,
                    "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            raise
        else:
            log(
                f"{method} {path} - {response.status_code}",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "client_host": request.client.host if request.client else None,
                    "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()
