"""Data transfer objects for Stripe payments and subscriptions."""

from dataclasses import dataclass
from typing import List, Optional

from src.core.timeutils import to_utc_iso
from src.domain.entities import Order, Subscription


@dataclass(frozen=True)
class CreatePaymentIntentRequest:
    """A one-off purchase. ``amount`` is in major units of ``currency``."""

    user_id: str
    amount: float
    currency: str = "usd"
    product_name: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if self.amount <= 0:
            errors.append("amount must be positive")

        if len(self.currency) != 3 or not self.currency.isalpha():
            errors.append("currency must be a 3-letter ISO code")

        return errors


@dataclass(frozen=True)
class PaymentIntentResponse:
    client_secret: str
    payment_intent_id: str


@dataclass(frozen=True)
class OrderDTO:
    id: str
    payment_intent_id: str
    amount: float
    currency: str
    status: str
    product_name: Optional[str]
    created_at: str

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        return cls(
            id=str(order.id),
            payment_intent_id=order.stripe_payment_intent_id,
            amount=order.amount,
            currency=order.currency,
            status=order.status,
            product_name=order.product_name,
            created_at=to_utc_iso(order.created_at),
        )


@dataclass(frozen=True)
class SubscriptionDTO:
    subscription_id: str
    status: str
    price_id: Optional[str]
    product_name: Optional[str]
    current_period_start: Optional[str]
    current_period_end: Optional[str]
    cancel_at_period_end: bool

    @classmethod
    def from_entity(
        cls,
        subscription: Subscription,
        product_name: Optional[str] = None,
    ) -> "SubscriptionDTO":
        return cls(
            subscription_id=subscription.stripe_subscription_id,
            status=subscription.status,
            price_id=subscription.price_id,
            product_name=product_name,
            current_period_start=_iso(subscription.current_period_start),
            current_period_end=_iso(subscription.current_period_end),
            cancel_at_period_end=subscription.cancel_at_period_end,
        )


@dataclass(frozen=True)
class CancelSubscriptionResponse:
    message: str
    cancel_at_period_end: bool
    current_period_end: Optional[str]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None
