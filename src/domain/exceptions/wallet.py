"""Wallet-related domain exceptions."""

from .base import DomainException


class WalletNotFoundException(DomainException):
    """Raised when a user has no wallet in the requested currency."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Wallet not found",
            code="WALLET_NOT_FOUND",
        )
        self.user_id = user_id


class InsufficientFundsException(DomainException):
    """Raised when a debit exceeds the wallet balance."""

    def __init__(self, required_paise: int, available_paise: int):
        super().__init__(
            message="Insufficient wallet balance",
            code="INSUFFICIENT_FUNDS",
        )
        self.required_paise = required_paise
        self.available_paise = available_paise


class InvalidAmountException(DomainException):
    """Raised when a monetary amount is out of range."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_AMOUNT",
        )


class DuplicatePaymentException(DomainException):
    """Raised when a payment intent has already been credited."""

    def __init__(self, payment_intent_id: str):
        super().__init__(
            message=f"Payment already processed: {payment_intent_id}",
            code="DUPLICATE_PAYMENT",
        )
        self.payment_intent_id = payment_intent_id
