"""Per-request context: request ID and caller address."""

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
client_ip_var: ContextVar[Optional[str]] = ContextVar("client_ip", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


def get_client_ip() -> Optional[str]:
    """Address of the caller, as seen by the first proxy when there is one."""
    return client_ip_var.get()


def _resolve_client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets the request ID and client IP for the duration of a request.

    An incoming ``X-Request-ID`` is reused so traces can span services;
    otherwise one is generated. The ID is echoed on the response.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())

        request_token = request_id_var.set(request_id)
        ip_token = client_ip_var.set(_resolve_client_ip(request))

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            client_ip_var.reset(ip_token)
            request_id_var.reset(request_token)
