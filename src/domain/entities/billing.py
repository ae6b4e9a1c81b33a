"""Stripe-related billing entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Customer:
    """Mapping between a platform user and a Stripe customer."""

    user_id: str
    stripe_customer_id: str
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Order:
    """A one-off product purchase backed by a PaymentIntent."""

    user_id: str
    stripe_payment_intent_id: str
    amount: float
    currency: str
    status: str
    product_name: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Subscription:
    """A recurring Stripe subscription owned by a user."""

    user_id: str
    stripe_subscription_id: str
    status: str
    price_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class Notification:
    """An in-app notification."""

    user_id: str
    type: str
    title: str
    message: str
    is_read: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class PaymentIntent:
    """Provider-neutral view of a Stripe PaymentIntent."""

    id: str
    status: str
    amount: int  # Minor units
    currency: str
    client_secret: Optional[str] = None
    amount_received: int = 0
    customer_id: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SubscriptionUpdate:
    """Subscription state as reported by Stripe."""

    id: str
    status: str
    customer_id: Optional[str] = None
    price_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False


@dataclass(frozen=True)
class WebhookEvent:
    """A verified Stripe webhook event."""

    id: str
    type: str
    data_object: dict[str, Any]
    subscription: Optional[SubscriptionUpdate] = None  # Set for customer.subscription.* events
