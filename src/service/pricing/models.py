"""
Data models for loan pricing.

Quotes work in rupees, like the figures borrowers type into the calculator.
Ledger amounts elsewhere are in paise.
"""

from dataclasses import dataclass, field
from typing import List

from src.domain.entities import LoanPurpose, Urgency


@dataclass(frozen=True)
class LoanParameters:
    """
    Inputs to the interest-rate calculator.

    Attributes:
        amount: Principal in rupees
        tenure_days: Loan term in days
        purpose: What the loan is for
        urgency: How soon the borrower needs the money
        medical_verified: True if a prescription was verified for this loan
        borrower_credit_score: Credit score, when known
        borrower_repayment_history: Number of past successful repayments
    """

    amount: float
    tenure_days: int
    purpose: LoanPurpose
    urgency: Urgency = Urgency.MEDIUM
    medical_verified: bool = False
    borrower_credit_score: int = 750
    borrower_repayment_history: int = 0


@dataclass(frozen=True)
class InterestRateResult:
    """A priced quote. Money fields are in rupees."""

    interest_rate: float
    platform_fee_percentage: float
    platform_fee: float
    interest_amount: float
    repayment_amount: float
    explanation: str
    factors: List[str] = field(default_factory=list)
    method: str = "rules"  # ai, rules


@dataclass(frozen=True)
class LoanMetrics:
    """Simple-interest breakdown for a loan, in rupees."""

    principal: float
    interest: float
    total_repayment: float
    daily_repayment: float
    effective_apr: str
    platform_fee_percentage: float
    platform_fee: float
