"""HTTP middleware: request context, access logging and error mapping."""

from .error_handler import error_handler_middleware
from .logging import LoggingMiddleware
from .request_context import RequestContextMiddleware, get_client_ip, get_request_id

__all__ = [
    "error_handler_middleware",
    "LoggingMiddleware",
    "RequestContextMiddleware",
    "get_client_ip",
    "get_request_id",
]
