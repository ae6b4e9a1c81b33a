"""Data transfer objects for loan repayment."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class RepayLoanRequest:
    """
    Input for repaying a loan from the borrower's wallet.

    ``repayment_amount_paise`` defaults to principal plus simple interest.
    """

    borrower_id: str
    loan_id: str
    repayment_amount_paise: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if self.repayment_amount_paise is not None and self.repayment_amount_paise <= 0:
            errors.append("Repayment amount must be positive")

        return errors


@dataclass(frozen=True)
class LenderPaymentDTO:
    lender_id: str
    lender_name: Optional[str]
    lender_email: Optional[str]
    amount: float


@dataclass(frozen=True)
class RepaymentResponse:
    """Outcome of a repayment. Amounts are in rupees."""

    loan_id: str
    repayment_amount: float
    platform_fee: float
    platform_fee_percentage: float
    interest_amount: float
    net_amount_to_lender: float
    new_borrower_balance: float
    lender_payments: List[LenderPaymentDTO]
    closure_document_created: bool
