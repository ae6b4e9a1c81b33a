"""Loan risk assessment entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RiskAssessment:
    """
    Risk opinion on a loan request.

    ``risk_score`` is 0-100 where higher means safer.
    """

    risk_level: RiskLevel
    risk_score: int
    recommendations: List[str] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LoanRiskInput:
    """Loan and borrower facts sent for risk analysis. Amount is in rupees."""

    amount: float
    purpose: str
    interest_rate: float
    tenure_days: int
    description: str = ""
    borrower_verified: bool = False
    total_loans_taken: int = 0
    successful_repayments: int = 0
    average_rating: float = 0.0
