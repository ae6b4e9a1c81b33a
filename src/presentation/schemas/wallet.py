"""Wallet-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TopUpRequestSchema(BaseModel):
    """Schema for POST /v1/wallet/top-ups request body."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"amount": 500, "currency": "inr"}]}
    )

    amount: float = Field(
        ...,
        description="Amount to add in rupees (minimum ₹100)",
        examples=[500],
    )
    currency: str = Field(
        "inr",
        description="Payment currency",
    )


class TopUpResponseSchema(BaseModel):
    """Stripe PaymentIntent handle for completing a top-up client-side."""

    client_secret: str = Field(..., description="PaymentIntent client secret")
    payment_intent_id: str = Field(..., description="PaymentIntent ID", examples=["pi_123"])


class ConfirmTopUpRequestSchema(BaseModel):
    """Schema for POST /v1/wallet/top-ups/confirm request body."""

    payment_intent_id: str = Field(
        ...,
        description="ID of the succeeded PaymentIntent",
        examples=["pi_123"],
    )


class WithdrawalRequestSchema(BaseModel):
    """Schema for POST /v1/wallet/withdrawals request body."""

    amount: float = Field(..., description="Amount to withdraw in rupees", examples=[250])
    bank_name: str = Field(..., examples=["State Bank of India"])
    account_number: str = Field(..., examples=["123456789012"])
    ifsc_code: str = Field(..., examples=["SBIN0001234"])
    account_holder_name: str = Field(..., examples=["Asha Rao"])


class WalletTransactionSchema(BaseModel):
    """A wallet ledger row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    transaction_type: str = Field(..., description="credit or debit")
    amount: float = Field(..., description="Amount in rupees")
    balance_before: float
    balance_after: float
    description: str
    reference_type: str = Field(
        ...,
        description="stripe_payment, loan_funding, loan_disbursement, loan_repayment or withdrawal",
    )
    reference_id: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(..., description="ISO 8601 timestamp")


class WalletResponseSchema(BaseModel):
    """Schema for wallet responses."""

    model_config = ConfigDict(from_attributes=True)

    wallet_id: str
    user_id: str
    currency: str = Field(..., examples=["INR"])
    balance: float = Field(..., description="Balance in rupees", examples=[1250.0])
    transactions: list[WalletTransactionSchema] = Field(
        ...,
        description="Most recent ledger rows, newest first",
    )
