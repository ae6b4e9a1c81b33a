"""Repository implementations."""

from .agreement_repository import PostgresAgreementRepository
from .billing_repository import PostgresBillingRepository
from .loan_repository import PostgresLoanRepository
from .profile_repository import PostgresProfileRepository
from .verification_repository import PostgresVerificationRepository
from .wallet_repository import PostgresWalletRepository

__all__ = [
    "PostgresAgreementRepository",
    "PostgresBillingRepository",
    "PostgresLoanRepository",
    "PostgresProfileRepository",
    "PostgresVerificationRepository",
    "PostgresWalletRepository",
]
