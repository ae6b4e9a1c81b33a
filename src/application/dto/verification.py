"""Data transfer objects for document verification."""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from src.core.timeutils import to_utc_iso
from src.domain.entities import (
    DocumentQuality,
    DocumentType,
    DocumentVerification,
    VerificationResult,
)

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "application/pdf"})
ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".pdf")


@dataclass(frozen=True)
class VerifyDocumentRequest:
    """An uploaded document, base64-encoded."""

    user_id: str
    document_type: DocumentType
    image_data: str
    mime_type: str
    file_name: Optional[str] = None

    @property
    def encoded_data(self) -> str:
        """Base64 payload without a ``data:...;base64,`` prefix."""
        data = self.image_data.strip()
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        return data

    def decode(self) -> bytes:
        """
        Decode the document bytes.

        Raises:
            ValueError: If the payload isn't valid base64
        """
        try:
            return base64.b64decode(self.encoded_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("Document data is not valid base64") from e

    def validate(self, size_bytes: int) -> List[str]:
        errors = []

        if size_bytes == 0:
            errors.append("Document is empty")
        elif size_bytes > MAX_DOCUMENT_BYTES:
            errors.append("File size too large. Please upload a file smaller than 10MB.")

        valid_format = self.mime_type.lower() in ALLOWED_MIME_TYPES
        if self.file_name is not None:
            valid_format = valid_format and self.file_name.lower().endswith(ALLOWED_EXTENSIONS)
        if not valid_format:
            errors.append("Invalid file format. Please upload JPG, PNG, or PDF files only.")

        return errors


@dataclass(frozen=True)
class VerificationResponse:
    is_valid: bool
    confidence: float
    details: str
    extracted_data: Dict[str, Any]
    quality: str
    quality_issues: List[str]
    verification_id: Optional[str] = None

    @classmethod
    def from_result(
        cls,
        result: VerificationResult,
        quality: DocumentQuality,
        quality_issues: List[str],
        verification: Optional[DocumentVerification] = None,
    ) -> "VerificationResponse":
        return cls(
            is_valid=result.is_valid,
            confidence=result.confidence,
            details=result.details,
            extracted_data=dict(result.extracted_data),
            quality=quality.value,
            quality_issues=quality_issues,
            verification_id=str(verification.id) if verification else None,
        )


@dataclass(frozen=True)
class VerificationSummary:
    id: str
    document_type: str
    verification_status: str
    confidence_score: float
    verified_at: str

    @classmethod
    def from_entity(cls, verification: DocumentVerification) -> "VerificationSummary":
        return cls(
            id=str(verification.id),
            document_type=verification.document_type.value,
            verification_status=verification.verification_status.value,
            confidence_score=verification.confidence_score,
            verified_at=to_utc_iso(verification.verified_at),
        )
