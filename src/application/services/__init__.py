"""Application services - use case orchestration."""

from .agreement_service import AgreementService
from .chat_service import ChatService
from .customers import get_or_create_customer
from .loan_service import LoanService
from .payment_service import PaymentService
from .profile_service import ProfileService
from .repayment_service import RepaymentService
from .verification_service import VerificationService
from .wallet_service import WalletService

__all__ = [
    "AgreementService",
    "ChatService",
    "get_or_create_customer",
    "LoanService",
    "PaymentService",
    "ProfileService",
    "RepaymentService",
    "VerificationService",
    "WalletService",
]
