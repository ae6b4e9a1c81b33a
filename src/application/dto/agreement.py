"""Data transfer objects for loan agreements."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.timeutils import to_utc_iso
from src.domain.entities import LoanAgreement


@dataclass(frozen=True)
class SignAgreementRequest:
    user_id: str
    agreement_id: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class AgreementResponse:
    id: str
    loan_id: str
    borrower_id: str
    lender_id: Optional[str]
    agreement_type: str
    agreement_data: Dict[str, Any]
    status: str
    signed_at: Optional[str]
    created_at: str

    @classmethod
    def from_entity(cls, agreement: LoanAgreement) -> "AgreementResponse":
        return cls(
            id=str(agreement.id),
            loan_id=str(agreement.loan_id),
            borrower_id=agreement.borrower_id,
            lender_id=agreement.lender_id,
            agreement_type=agreement.agreement_type.value,
            agreement_data=dict(agreement.agreement_data),
            status=agreement.status.value,
            signed_at=to_utc_iso(agreement.signed_at) if agreement.signed_at else None,
            created_at=to_utc_iso(agreement.created_at),
        )
