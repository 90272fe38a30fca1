"""Request logging middleware.

Every audited request gets a short request id that is attached to its log
lines and echoed back in the ``X-Request-ID`` response header.
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses."""

    def __init__(self, app, exclude_paths: list[str] | None = None) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/api/v1/health"]

    def _is_excluded(self, path: str) -> bool:
        # "/" must match exactly, everything else by prefix
        return any(
            path == p if p == "/" else path.startswith(p) for p in self.exclude_paths
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        """Log request and response details."""
        if self._is_excluded(request.url.path):
            return await call_next(request)

        request_id = uuid.uuid4().hex[:8]
        extra = {"request_id": request_id}

        start_time = time.perf_counter()
        query = f"?{request.url.query}" if request.url.query else ""
        logger.info(
            f"{request.method} {request.url.path}{query} from={_client_ip(request)}",
            extra=extra,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"ERROR {type(e).__name__}: {str(e)[:100]} duration={duration_ms:.1f}ms",
                extra=extra,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{response.status_code} duration={duration_ms:.1f}ms",
            extra=extra,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
