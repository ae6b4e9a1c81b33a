"""
Domain Interfaces (Ports)
"""

from .repositories import (
    AgreementRepository,
    BillingRepository,
    LoanRepository,
    ProfileRepository,
    VerificationRepository,
    WalletRepository,
)
from .clients import GenerativeAIClient, PaymentGateway

__all__ = [
    "AgreementRepository",
    "BillingRepository",
    "LoanRepository",
    "ProfileRepository",
    "VerificationRepository",
    "WalletRepository",
    "GenerativeAIClient",
    "PaymentGateway",
]
