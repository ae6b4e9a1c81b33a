"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException, InvalidRequestException
from .agreement import AgreementNotFoundException
from .ai import AIServiceException, AIServiceTimeoutException
from .auth import AuthenticationException, ForbiddenException
from .loan import (
    InvalidLoanRequestException,
    LoanFundingException,
    LoanNotFoundException,
    LoanNotRepayableException,
)
from .payment import (
    CustomerNotFoundException,
    PaymentGatewayException,
    PaymentVerificationException,
    SubscriptionNotFoundException,
    WebhookSignatureException,
)
from .verification import InvalidDocumentException
from .wallet import (
    DuplicatePaymentException,
    InsufficientFundsException,
    InvalidAmountException,
    WalletNotFoundException,
)

__all__ = [
    "DomainException",
    "InvalidRequestException",
    "AgreementNotFoundException",
    "AIServiceException",
    "AIServiceTimeoutException",
    "AuthenticationException",
    "ForbiddenException",
    "InvalidLoanRequestException",
    "LoanFundingException",
    "LoanNotFoundException",
    "LoanNotRepayableException",
    "CustomerNotFoundException",
    "PaymentGatewayException",
    "PaymentVerificationException",
    "SubscriptionNotFoundException",
    "WebhookSignatureException",
    "InvalidDocumentException",
    "DuplicatePaymentException",
    "InsufficientFundsException",
    "InvalidAmountException",
    "WalletNotFoundException",
]
