"""Access logging and HTTP metrics."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.metrics import record_http_request
from .request_context import get_client_ip, get_request_id

logger = structlog.get_logger(__name__)

# Polled by load balancers and Prometheus; logged at debug only
PROBE_PATHS = frozenset({"/metrics", "/v1/health"})


def _endpoint(request: Request) -> str:
    # Route templates keep label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its outcome and duration, and records it in
    the HTTP request metrics.

    Server errors are logged at error level, client errors at warning.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        log = logger.bind(
            request_id=get_request_id(),
            method=method,
            path=path,
            client_ip=get_client_ip(),
        )
        emit = log.debug if path in PROBE_PATHS else log.info

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            record_http_request(method, _endpoint(request), 500, duration)
            raise

        duration = time.perf_counter() - start_time
        status_code = response.status_code
        if status_code >= 500:
            emit = log.error
        elif status_code >= 400:
            emit = log.warning

        emit(
            "request_completed",
            status_code=status_code,
            duration_ms=round(duration * 1000, 2),
        )
        record_http_request(method, _endpoint(request), status_code, duration)

        return response
