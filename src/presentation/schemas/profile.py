"""Profile-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .verification import VerificationSummarySchema


class ProfileResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool
    identity_verified: bool
    medical_verified: bool
    language: str
    total_loans_taken: int
    successful_repayments: int
    total_loans_given: int
    verifications: list[VerificationSummarySchema]
