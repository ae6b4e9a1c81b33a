"""Pydantic schemas for API request/response validation."""

from .wallet import (
    TopUpRequestSchema,
    TopUpResponseSchema,
    ConfirmTopUpRequestSchema,
    WithdrawalRequestSchema,
    WalletTransactionSchema,
    WalletResponseSchema,
)
from .loan import (
    CreateLoanRequestSchema,
    FundingSchema,
    LoanResponseSchema,
    FundLoanRequestSchema,
    FundLoanResponseSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
    LoanMetricsRequestSchema,
    LoanMetricsSchema,
    RiskRequestSchema,
    RiskResponseSchema,
    RepayLoanRequestSchema,
    LenderPaymentSchema,
    RepaymentResponseSchema,
)
from .verification import (
    VerifyDocumentRequestSchema,
    VerificationResponseSchema,
    VerificationSummarySchema,
)
from .agreement import AgreementResponseSchema
from .payment import (
    CreatePaymentIntentRequestSchema,
    PaymentIntentResponseSchema,
    WebhookAckSchema,
    OrderSchema,
    SubscriptionSchema,
    CancelSubscriptionRequestSchema,
    CancelSubscriptionResponseSchema,
    ProductSchema,
)
from .chat import ChatTurnSchema, ChatRequestSchema, ChatResponseSchema
from .profile import ProfileResponseSchema
from .error import ErrorResponseSchema

__all__ = [
    # Wallet
    "TopUpRequestSchema",
    "TopUpResponseSchema",
    "ConfirmTopUpRequestSchema",
    "WithdrawalRequestSchema",
    "WalletTransactionSchema",
    "WalletResponseSchema",
    # Loans
    "CreateLoanRequestSchema",
    "FundingSchema",
    "LoanResponseSchema",
    "FundLoanRequestSchema",
    "FundLoanResponseSchema",
    "QuoteRequestSchema",
    "QuoteResponseSchema",
    "LoanMetricsRequestSchema",
    "LoanMetricsSchema",
    "RiskRequestSchema",
    "RiskResponseSchema",
    "RepayLoanRequestSchema",
    "LenderPaymentSchema",
    "RepaymentResponseSchema",
    # Verification
    "VerifyDocumentRequestSchema",
    "VerificationResponseSchema",
    "VerificationSummarySchema",
    # Agreements
    "AgreementResponseSchema",
    # Payments
    "CreatePaymentIntentRequestSchema",
    "PaymentIntentResponseSchema",
    "WebhookAckSchema",
    "OrderSchema",
    "SubscriptionSchema",
    "CancelSubscriptionRequestSchema",
    "CancelSubscriptionResponseSchema",
    "ProductSchema",
    # Chat
    "ChatTurnSchema",
    "ChatRequestSchema",
    "ChatResponseSchema",
    # Profile
    "ProfileResponseSchema",
    # Errors
    "ErrorResponseSchema",
]
