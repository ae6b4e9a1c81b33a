"""Loan request, funding and repayment entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4


class LoanPurpose(str, Enum):
    EDUCATION = "education"
    MEDICAL = "medical"
    RENT = "rent"
    EMERGENCY = "emergency"
    TEXTBOOKS = "textbooks"
    ASSISTIVE_DEVICES = "assistive-devices"
    OTHER = "other"


class LoanStatus(str, Enum):
    ACTIVE = "active"  # Open for funding
    FUNDED = "funded"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"
    CANCELLED = "cancelled"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


REPAYABLE_STATUSES = frozenset({LoanStatus.ACTIVE, LoanStatus.FUNDED})


@dataclass
class LoanFunding:
    """A lender's contribution to a loan request."""

    loan_id: UUID
    lender_id: str
    amount_paise: int
    id: UUID = field(default_factory=uuid4)
    funded_at: datetime = field(default_factory=datetime.utcnow)
    lender_name: Optional[str] = None
    lender_email: Optional[str] = None


@dataclass
class LoanRequest:
    """
    A borrower's request for funds, open to any number of lenders.

    Amounts are in paise. ``interest_rate`` is an annual percentage and
    interest accrues as simple interest over ``tenure_days``.
    """

    borrower_id: str
    title: str
    description: str
    amount_paise: int
    interest_rate: float
    tenure_days: int
    purpose: LoanPurpose
    currency: str = "INR"
    status: LoanStatus = LoanStatus.ACTIVE
    total_funded_paise: int = 0
    images: List[str] = field(default_factory=list)
    medical_verified: bool = False
    terms_accepted: bool = False
    terms_accepted_at: Optional[datetime] = None
    fundings: List[LoanFunding] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def remaining_paise(self) -> int:
        return max(0, self.amount_paise - self.total_funded_paise)

    @property
    def funding_progress(self) -> float:
        """Funded share of the requested amount, as a percentage."""
        if self.amount_paise <= 0:
            return 0.0
        return round(self.total_funded_paise / self.amount_paise * 100, 2)

    @property
    def is_fully_funded(self) -> bool:
        return self.total_funded_paise >= self.amount_paise

    @property
    def is_repayable(self) -> bool:
        return self.status in REPAYABLE_STATUSES

    @property
    def primary_lender_id(self) -> Optional[str]:
        """The first lender to fund this loan."""
        return self.fundings[0].lender_id if self.fundings else None

    def add_funding(self, funding: LoanFunding) -> None:
        """Attach a funding and move to FUNDED once the target is reached."""
        self.fundings.append(funding)
        self.total_funded_paise += funding.amount_paise
        self.updated_at = datetime.utcnow()
        if self.is_fully_funded:
            self.status = LoanStatus.FUNDED

    def mark_completed(self) -> None:
        self.status = LoanStatus.COMPLETED
        self.updated_at = datetime.utcnow()


@dataclass
class LoanRepayment:
    """Record of a completed loan repayment."""

    loan_id: UUID
    borrower_id: str
    lender_id: str
    repayment_amount_paise: int
    platform_fee_paise: int
    net_amount_to_lender_paise: int
    transaction_id: UUID
    status: str = "completed"
    id: UUID = field(default_factory=uuid4)
    repaid_at: datetime = field(default_factory=datetime.utcnow)
