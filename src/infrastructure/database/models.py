"""SQLAlchemy ORM models for the lending marketplace."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def _uuid_pk() -> Mapped[str]:
    return mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )


def _created_at() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class ProfileModel(Base):
    """Platform member, keyed by the auth provider's user ID."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    identity_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    identity_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _created_at()


class WalletModel(Base):
    """One balance per user and currency, in minor units."""

    __tablename__ = "wallets"
    __table_args__ = (UniqueConstraint("user_id", "currency", name="uq_wallet_user_currency"),)

    id: Mapped[str] = _uuid_pk()
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    balance_paise: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _created_at()


class WalletTransactionModel(Base):
    """Append-only wallet ledger row."""

    __tablename__ = "wallet_transactions"
    __table_args__ = (
        Index("ix_wallet_transactions_reference", "reference_type", "reference_id"),
        # A PaymentIntent is credited at most once
        Index(
            "uq_wallet_transactions_stripe_payment",
            "reference_id",
            unique=True,
            postgresql_where=text("reference_type = 'stripe_payment'"),
            sqlite_where=text("reference_type = 'stripe_payment'"),
        ),
    )

    id: Mapped[str] = _uuid_pk()
    wallet_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("wallets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    transaction_type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_before_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reference_type: Mapped[str] = mapped_column(String(50), nullable=False)
    reference_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = _created_at()


class LoanRequestModel(Base):
    """Persisted loan request."""

    __tablename__ = "loan_requests"

    id: Mapped[str] = _uuid_pk()
    borrower_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    interest_rate: Mapped[float] = mapped_column(Float, nullable=False)
    tenure_days: Mapped[int] = mapped_column(Integer, nullable=False)
    purpose: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
    )
    total_funded_paise: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    medical_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    terms_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    terms_accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _created_at()

    fundings: Mapped[list["LoanFundingModel"]] = relationship(
        "LoanFundingModel",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanFundingModel.funded_at",
    )


class LoanFundingModel(Base):
    """A lender's contribution to a loan."""

    __tablename__ = "loan_fundings"

    id: Mapped[str] = _uuid_pk()
    loan_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("loan_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lender_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    funded_at: Mapped[datetime] = _created_at()

    loan: Mapped["LoanRequestModel"] = relationship(
        "LoanRequestModel",
        back_populates="fundings",
    )
    lender: Mapped["ProfileModel"] = relationship("ProfileModel")


class LoanRepaymentModel(Base):
    """Completed repayment of a loan."""

    __tablename__ = "loan_repayments"

    id: Mapped[str] = _uuid_pk()
    loan_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("loan_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    borrower_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    lender_id: Mapped[str] = mapped_column(String(255), nullable=False)
    repayment_amount_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    platform_fee_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    net_amount_to_lender_paise: Mapped[int] = mapped_column(Integer, nullable=False)
    transaction_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    repaid_at: Mapped[datetime] = _created_at()


class LoanAgreementModel(Base):
    """Legal document attached to a loan."""

    __tablename__ = "loan_agreements"

    id: Mapped[str] = _uuid_pk()
    loan_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("loan_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    borrower_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    lender_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    agreement_type: Mapped[str] = mapped_column(String(50), nullable=False)
    agreement_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    pdf_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    signed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _created_at()


class AgreementSignatureModel(Base):
    """A party's signature on an agreement."""

    __tablename__ = "agreement_signatures"

    id: Mapped[str] = _uuid_pk()
    agreement_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("loan_agreements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    signer_id: Mapped[str] = mapped_column(String(255), nullable=False)
    signature_type: Mapped[str] = mapped_column(String(20), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    signed_at: Mapped[datetime] = _created_at()


class DocumentVerificationModel(Base):
    """Successful AI document verification."""

    __tablename__ = "document_verifications"

    id: Mapped[str] = _uuid_pk()
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[str] = mapped_column(String(50), nullable=False)
    verification_status: Mapped[str] = mapped_column(String(20), nullable=False)
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False)
    extracted_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    verified_at: Mapped[datetime] = _created_at()


class StripeCustomerModel(Base):
    """User to Stripe customer mapping."""

    __tablename__ = "stripe_customers"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = _created_at()


class StripeOrderModel(Base):
    """One-off purchase backed by a PaymentIntent."""

    __tablename__ = "stripe_orders"

    id: Mapped[str] = _uuid_pk()
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    payment_intent_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    product_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = _created_at()


class StripeSubscriptionModel(Base):
    """Recurring Stripe subscription."""

    __tablename__ = "stripe_subscriptions"

    subscription_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    price_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    current_period_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    current_period_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    cancel_at_period_end: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    updated_at: Mapped[datetime] = _created_at()


class NotificationModel(Base):
    """In-app notification."""

    __tablename__ = "notifications"

    id: Mapped[str] = _uuid_pk()
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = _created_at()
