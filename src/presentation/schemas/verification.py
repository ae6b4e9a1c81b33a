"""Verification-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import DocumentType


class VerifyDocumentRequestSchema(BaseModel):
    """Schema for POST /v1/verifications request body."""

    document_type: DocumentType
    image_data: str = Field(
        ...,
        description="Base64 document content, optionally as a data URL",
    )
    mime_type: str = Field(..., examples=["image/jpeg"])
    file_name: Optional[str] = Field(None, examples=["aadhaar.jpg"])


class VerificationResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    confidence: float = Field(..., ge=0, le=1)
    details: str
    extracted_data: dict[str, Any]
    quality: str = Field(..., description="good, fair or poor")
    quality_issues: list[str]
    verification_id: Optional[str] = Field(
        None,
        description="Set when the document was verified and stored",
    )


class VerificationSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_type: str
    verification_status: str
    confidence_score: float
    verified_at: str
