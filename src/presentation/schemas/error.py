"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """
    Body of every non-2xx response.

    ``error`` is a stable machine-readable code such as
    ``INSUFFICIENT_FUNDS`` or ``LOAN_NOT_FOUND``; ``message`` is meant for
    display.
    """
    error: str = Field(
        ...,
        description="Error code",
        examples=["INSUFFICIENT_FUNDS"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Insufficient wallet balance"],
    )
    request_id: str | None = Field(
        None,
        description="Echo of the X-Request-ID header, for support tickets",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "LOAN_NOT_FOUND",
                    "message": "Loan not found: 550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "6f1c1d2e-8a43-4b8e-9d55-0c8b6c3f7d21",
                }
            ]
        }
    }
