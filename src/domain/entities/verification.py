"""Document verification entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class DocumentType(str, Enum):
    GOVERNMENT_ID = "government_id"
    MEDICAL_PRESCRIPTION = "medical_prescription"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"


class DocumentQuality(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of asking the AI model to inspect a document.

    ``confidence`` is in the 0-1 range.
    """

    is_valid: bool
    confidence: float
    extracted_data: dict[str, Any]
    details: str


@dataclass
class DocumentVerification:
    """Persisted record of a successfully verified document."""

    user_id: str
    document_type: DocumentType
    confidence_score: float
    extracted_data: dict[str, Any]
    verification_status: VerificationStatus = VerificationStatus.VERIFIED
    id: UUID = field(default_factory=uuid4)
    verified_at: datetime = field(default_factory=datetime.utcnow)
