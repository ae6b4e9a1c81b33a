"""Authentication and authorization exceptions."""

from .base import DomainException


class AuthenticationException(DomainException):
    """Raised when a bearer token is missing, malformed or expired."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(
            message=message,
            code="UNAUTHENTICATED",
        )


class ForbiddenException(DomainException):
    """Raised when an authenticated user acts on someone else's resource."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
        )
