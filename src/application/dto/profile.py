"""Data transfer objects for profiles."""

from dataclasses import dataclass
from typing import List, Optional

from src.domain.entities import DocumentType, DocumentVerification, Profile, ProfileStats
from .verification import VerificationSummary


@dataclass(frozen=True)
class ProfileResponse:
    """A profile with its verification badges and lending track record."""

    id: str
    name: str
    email: str
    phone: Optional[str]
    avatar_url: Optional[str]
    is_verified: bool
    identity_verified: bool
    medical_verified: bool
    language: str
    total_loans_taken: int
    successful_repayments: int
    total_loans_given: int
    verifications: List[VerificationSummary]

    @classmethod
    def from_entity(
        cls,
        profile: Profile,
        stats: ProfileStats,
        verifications: List[DocumentVerification],
    ) -> "ProfileResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            phone=profile.phone,
            avatar_url=profile.avatar_url,
            is_verified=profile.is_verified,
            identity_verified=profile.identity_verified,
            medical_verified=any(
                v.document_type == DocumentType.MEDICAL_PRESCRIPTION for v in verifications
            ),
            language=profile.language,
            total_loans_taken=stats.total_loans_taken,
            successful_repayments=stats.successful_repayments,
            total_loans_given=stats.total_loans_given,
            verifications=[VerificationSummary.from_entity(v) for v in verifications],
        )
