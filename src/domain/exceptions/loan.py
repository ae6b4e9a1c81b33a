"""Loan-related domain exceptions."""

from .base import DomainException


class LoanNotFoundException(DomainException):
    """Raised when a loan cannot be found (or isn't visible to the caller)."""

    def __init__(self, loan_id: str):
        super().__init__(
            message=f"Loan not found: {loan_id}",
            code="LOAN_NOT_FOUND",
        )
        self.loan_id = loan_id


class InvalidLoanRequestException(DomainException):
    """Raised when a loan request fails validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_LOAN_REQUEST",
        )


class LoanNotRepayableException(DomainException):
    """Raised when a loan is not in a repayable state."""

    def __init__(self, message: str = "Loan is not in a repayable status"):
        super().__init__(
            message=message,
            code="LOAN_NOT_REPAYABLE",
        )


class LoanFundingException(DomainException):
    """Raised when a funding request cannot be applied to a loan."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="LOAN_FUNDING_REJECTED",
        )
