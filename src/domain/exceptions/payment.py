"""Stripe/payment-related domain exceptions."""

from .base import DomainException


class PaymentGatewayException(DomainException):
    """Raised when the payment provider returns an error."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            code="PAYMENT_GATEWAY_ERROR",
        )
        self.operation = operation


class PaymentVerificationException(DomainException):
    """Raised when a payment cannot be attributed to the caller or hasn't settled."""

    def __init__(self, message: str = "Payment verification failed"):
        super().__init__(
            message=message,
            code="PAYMENT_VERIFICATION_FAILED",
        )


class WebhookSignatureException(DomainException):
    """Raised when a webhook payload fails signature verification."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_WEBHOOK_SIGNATURE",
        )


class SubscriptionNotFoundException(DomainException):
    """Raised when a subscription cannot be found."""

    def __init__(self, subscription_id: str):
        super().__init__(
            message="Subscription not found",
            code="SUBSCRIPTION_NOT_FOUND",
        )
        self.subscription_id = subscription_id


class CustomerNotFoundException(DomainException):
    """Raised when no Stripe customer maps to a subscription or intent."""

    def __init__(self):
        super().__init__(
            message="Customer not found",
            code="CUSTOMER_NOT_FOUND",
        )
