"""Request logging middleware."""
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

EXCLUDED_PATHS = frozenset({
    "/api/health/live",
    "/api/health/ready",
})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs request details in structured JSON format.

    Binds a request id into the structlog context so handler log lines can
    be correlated with the access line. Health probes are not logged.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response from handler.
        """
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000

            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
                client=request.client.host if request.client else None,
            )

        response.headers["X-Request-ID"] = request_id
        return response
