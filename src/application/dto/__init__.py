"""Data Transfer Objects for application layer."""

from .agreement import AgreementResponse, SignAgreementRequest
from .chat import ChatRequest, ChatResponse
from .loan import (
    CreateLoanRequest,
    FundingDTO,
    FundLoanRequest,
    FundLoanResponse,
    LoanResponse,
    RiskAssessmentResponse,
)
from .payment import (
    CancelSubscriptionResponse,
    CreatePaymentIntentRequest,
    OrderDTO,
    PaymentIntentResponse,
    SubscriptionDTO,
)
from .profile import ProfileResponse
from .repayment import LenderPaymentDTO, RepaymentResponse, RepayLoanRequest
from .verification import (
    VerificationResponse,
    VerificationSummary,
    VerifyDocumentRequest,
)
from .wallet import (
    TopUpRequest,
    TopUpResponse,
    WalletResponse,
    WalletTransactionDTO,
    WithdrawalRequest,
)

__all__ = [
    "AgreementResponse",
    "SignAgreementRequest",
    "ChatRequest",
    "ChatResponse",
    "CreateLoanRequest",
    "FundingDTO",
    "FundLoanRequest",
    "FundLoanResponse",
    "LoanResponse",
    "RiskAssessmentResponse",
    "CancelSubscriptionResponse",
    "CreatePaymentIntentRequest",
    "OrderDTO",
    "PaymentIntentResponse",
    "SubscriptionDTO",
    "ProfileResponse",
    "LenderPaymentDTO",
    "RepaymentResponse",
    "RepayLoanRequest",
    "VerificationResponse",
    "VerificationSummary",
    "VerifyDocumentRequest",
    "TopUpRequest",
    "TopUpResponse",
    "WalletResponse",
    "WalletTransactionDTO",
    "WithdrawalRequest",
]
