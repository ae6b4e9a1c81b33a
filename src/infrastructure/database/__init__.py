"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    AgreementSignatureModel,
    Base,
    DocumentVerificationModel,
    LoanAgreementModel,
    LoanFundingModel,
    LoanRepaymentModel,
    LoanRequestModel,
    NotificationModel,
    ProfileModel,
    StripeCustomerModel,
    StripeOrderModel,
    StripeSubscriptionModel,
    WalletModel,
    WalletTransactionModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "AgreementSignatureModel",
    "DocumentVerificationModel",
    "LoanAgreementModel",
    "LoanFundingModel",
    "LoanRepaymentModel",
    "LoanRequestModel",
    "NotificationModel",
    "ProfileModel",
    "StripeCustomerModel",
    "StripeOrderModel",
    "StripeSubscriptionModel",
    "WalletModel",
    "WalletTransactionModel",
]
