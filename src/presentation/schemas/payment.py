"""Payment-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.billing import ProductMode


class CreatePaymentIntentRequestSchema(BaseModel):
    """Schema for POST /v1/payments/intents request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"amount": 10, "currency": "usd", "product_name": "Vibe"}]
        }
    )

    amount: float = Field(..., description="Amount in major currency units")
    currency: str = "usd"
    product_name: Optional[str] = None


class PaymentIntentResponseSchema(BaseModel):
    client_secret: str
    payment_intent_id: str


class WebhookAckSchema(BaseModel):
    received: bool = True


class OrderSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    payment_intent_id: str
    amount: float
    currency: str
    status: str
    product_name: Optional[str] = None
    created_at: str


class SubscriptionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subscription_id: str
    status: str
    price_id: Optional[str] = None
    product_name: Optional[str] = None
    current_period_start: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool


class CancelSubscriptionRequestSchema(BaseModel):
    subscription_id: Optional[str] = Field(None, examples=["sub_123"])


class CancelSubscriptionResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    cancel_at_period_end: bool
    current_period_end: Optional[str] = None


class ProductSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    price_id: str
    name: str
    description: str
    price: float
    currency: str
    mode: ProductMode
    features: list[str]
    popular: bool
