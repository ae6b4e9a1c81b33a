"""Generative AI service exceptions."""

from .base import DomainException


class AIServiceException(DomainException):
    """Raised when the generative AI API returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="AI_SERVICE_ERROR",
        )
        self.status_code = status_code


class AIServiceTimeoutException(AIServiceException):
    """Raised when the generative AI API times out."""

    def __init__(self):
        super().__init__(
            message="AI service request timed out",
            status_code=None,
        )
        self.code = "AI_SERVICE_TIMEOUT"
