"""Data transfer objects for loan operations."""

from dataclasses import dataclass, field
from typing import List, Optional

from src.core.timeutils import to_utc_iso
from src.domain.entities import LoanFunding, LoanPurpose, LoanRequest, RiskAssessment

MIN_LOAN_PAISE = 100 * 100
MAX_LOAN_PAISE = 100_000 * 100


@dataclass(frozen=True)
class CreateLoanRequest:
    """Input for posting a new loan request."""

    borrower_id: str
    title: str
    description: str
    amount_paise: int
    interest_rate: float
    tenure_days: int
    purpose: LoanPurpose
    images: List[str] = field(default_factory=list)
    terms_accepted: bool = False

    def validate(self) -> List[str]:
        errors = []

        if len(self.title.strip()) < 10:
            errors.append("Title must be at least 10 characters long")

        if len(self.description.strip()) < 50:
            errors.append("Description must be at least 50 characters long")

        if not MIN_LOAN_PAISE <= self.amount_paise <= MAX_LOAN_PAISE:
            errors.append("Amount must be between ₹100 and ₹100,000")

        if not 0 <= self.interest_rate <= 20:
            errors.append("Interest rate must be between 0% and 20%")

        if not 7 <= self.tenure_days <= 365:
            errors.append("Tenure must be between 7 and 365 days")

        return errors


@dataclass(frozen=True)
class FundLoanRequest:
    lender_id: str
    loan_id: str
    amount_paise: int

    def validate(self) -> List[str]:
        errors = []

        if self.amount_paise <= 0:
            errors.append("Funding amount must be positive")

        return errors


@dataclass(frozen=True)
class FundingDTO:
    id: str
    lender_id: str
    lender_name: Optional[str]
    amount: float
    funded_at: str

    @classmethod
    def from_entity(cls, funding: LoanFunding) -> "FundingDTO":
        return cls(
            id=str(funding.id),
            lender_id=funding.lender_id,
            lender_name=funding.lender_name,
            amount=funding.amount_paise / 100,
            funded_at=to_utc_iso(funding.funded_at),
        )


@dataclass(frozen=True)
class LoanResponse:
    """A loan request with its fundings. Amounts are in rupees."""

    id: str
    borrower_id: str
    title: str
    description: str
    amount: float
    currency: str
    interest_rate: float
    tenure_days: int
    purpose: str
    status: str
    total_funded: float
    funding_progress: float
    images: List[str]
    medical_verified: bool
    terms_accepted: bool
    fundings: List[FundingDTO]
    created_at: str

    @classmethod
    def from_entity(cls, loan: LoanRequest) -> "LoanResponse":
        return cls(
            id=str(loan.id),
            borrower_id=loan.borrower_id,
            title=loan.title,
            description=loan.description,
            amount=loan.amount_paise / 100,
            currency=loan.currency,
            interest_rate=loan.interest_rate,
            tenure_days=loan.tenure_days,
            purpose=loan.purpose.value,
            status=loan.status.value,
            total_funded=loan.total_funded_paise / 100,
            funding_progress=loan.funding_progress,
            images=list(loan.images),
            medical_verified=loan.medical_verified,
            terms_accepted=loan.terms_accepted,
            fundings=[FundingDTO.from_entity(f) for f in loan.fundings],
            created_at=to_utc_iso(loan.created_at),
        )


@dataclass(frozen=True)
class FundLoanResponse:
    loan: LoanResponse
    funding_id: str
    amount: float
    lender_balance: float


@dataclass(frozen=True)
class RiskAssessmentResponse:
    risk_level: str
    risk_score: int
    recommendations: List[str]
    concerns: List[str]
    method: str

    @classmethod
    def from_entity(cls, assessment: RiskAssessment, method: str) -> "RiskAssessmentResponse":
        return cls(
            risk_level=assessment.risk_level.value,
            risk_score=assessment.risk_score,
            recommendations=list(assessment.recommendations),
            concerns=list(assessment.concerns),
            method=method,
        )
