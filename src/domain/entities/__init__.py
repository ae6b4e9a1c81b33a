"""Domain Entities - Core business objects."""

from .agreement import (
    AgreementSignature,
    AgreementStatus,
    AgreementType,
    LoanAgreement,
    SignatureType,
)
from .billing import (
    Customer,
    Notification,
    Order,
    PaymentIntent,
    Subscription,
    SubscriptionUpdate,
    WebhookEvent,
)
from .loan import (
    LoanFunding,
    LoanPurpose,
    LoanRepayment,
    LoanRequest,
    LoanStatus,
    Urgency,
)
from .profile import Profile, ProfileStats
from .risk import LoanRiskInput, RiskAssessment, RiskLevel
from .verification import (
    DocumentQuality,
    DocumentType,
    DocumentVerification,
    VerificationResult,
    VerificationStatus,
)
from .wallet import ReferenceType, TransactionType, Wallet, WalletTransaction

__all__ = [
    "AgreementSignature",
    "AgreementStatus",
    "AgreementType",
    "LoanAgreement",
    "SignatureType",
    "Customer",
    "Notification",
    "Order",
    "PaymentIntent",
    "Subscription",
    "SubscriptionUpdate",
    "WebhookEvent",
    "LoanFunding",
    "LoanPurpose",
    "LoanRepayment",
    "LoanRequest",
    "LoanStatus",
    "Urgency",
    "Profile",
    "ProfileStats",
    "LoanRiskInput",
    "RiskAssessment",
    "RiskLevel",
    "DocumentQuality",
    "DocumentType",
    "DocumentVerification",
    "VerificationResult",
    "VerificationStatus",
    "ReferenceType",
    "TransactionType",
    "Wallet",
    "WalletTransaction",
]
