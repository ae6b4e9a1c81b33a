"""Loan agreement entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class AgreementType(str, Enum):
    LOAN_REQUEST = "loan_request"
    SANCTION_LETTER = "sanction_letter"
    LENDING_PROOF = "lending_proof"
    LOAN_CLOSURE = "loan_closure"


class AgreementStatus(str, Enum):
    PENDING = "pending"
    SIGNED = "signed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SignatureType(str, Enum):
    BORROWER = "borrower"
    LENDER = "lender"


@dataclass
class LoanAgreement:
    """A legal document attached to a loan (terms, closure, etc.)."""

    loan_id: UUID
    borrower_id: str
    agreement_type: AgreementType
    agreement_data: dict[str, Any]
    lender_id: Optional[str] = None
    status: AgreementStatus = AgreementStatus.PENDING
    pdf_url: Optional[str] = None
    signed_at: Optional[datetime] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def is_party(self, user_id: str) -> bool:
        return user_id in (self.borrower_id, self.lender_id)

    def signature_type_for(self, user_id: str) -> SignatureType:
        if user_id == self.borrower_id:
            return SignatureType.BORROWER
        return SignatureType.LENDER

    def mark_signed(self) -> None:
        now = datetime.utcnow()
        self.status = AgreementStatus.SIGNED
        self.signed_at = now
        self.updated_at = now


@dataclass(frozen=True)
class AgreementSignature:
    """A party's signature on an agreement."""

    agreement_id: UUID
    signer_id: str
    signature_type: SignatureType
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    signed_at: datetime = field(default_factory=datetime.utcnow)
