import time
from os import urandom

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from status_monitor.observability.metrics import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL

_SKIP_LOG_PREFIXES = ("/health", "/metrics", "/static")


def _normalize_path(request: Request) -> str:
    """Use the matched route template so device ids don't explode label cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = urandom(4).hex()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        method = request.method
        path = request.url.path
        status_code = str(response.status_code)
        normalized = _normalize_path(request)

        HTTP_REQUEST_DURATION.labels(method=method, path=normalized, status_code=status_code).observe(duration)
        HTTP_REQUESTS_TOTAL.labels(method=method, path=normalized, status_code=status_code).inc()

        if not any(path.startswith(p) for p in _SKIP_LOG_PREFIXES):
            logger = structlog.get_logger()
            logger.info(
                "http_request",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 1),
            )

        response.headers["x-request-id"] = request_id
        return response
