"""Document verification exceptions."""

from .base import DomainException


class InvalidDocumentException(DomainException):
    """Raised when an uploaded document is rejected before AI analysis."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_DOCUMENT",
        )
