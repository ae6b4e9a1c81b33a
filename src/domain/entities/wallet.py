"""Wallet ledger entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from src.domain.exceptions import InsufficientFundsException, InvalidAmountException


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    CREDIT = "credit"  # Money into the wallet
    DEBIT = "debit"  # Money out of the wallet


class ReferenceType(str, Enum):
    """What caused a ledger entry."""

    STRIPE_PAYMENT = "stripe_payment"
    LOAN_FUNDING = "loan_funding"
    LOAN_DISBURSEMENT = "loan_disbursement"
    LOAN_REPAYMENT = "loan_repayment"
    WITHDRAWAL = "withdrawal"


@dataclass(frozen=True)
class WalletTransaction:
    """
    Immutable ledger row.

    Attributes:
        wallet_id: Wallet the entry belongs to
        user_id: Owner of the wallet
        transaction_type: Credit or debit
        amount_paise: Always positive; direction comes from transaction_type
        balance_before_paise: Wallet balance before the entry
        balance_after_paise: Wallet balance after the entry
        reference_type: What caused the entry
        reference_id: ID of the loan, payment intent, etc.
    """

    wallet_id: UUID
    user_id: str
    transaction_type: TransactionType
    amount_paise: int
    balance_before_paise: int
    balance_after_paise: int
    description: str
    reference_type: ReferenceType
    reference_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def amount_rupees(self) -> float:
        return self.amount_paise / 100


@dataclass
class Wallet:
    """
    Per-user balance record.

    Balances only change through ``credit`` and ``debit``, which return the
    ledger row describing the change.
    """

    user_id: str
    currency: str = "INR"
    balance_paise: int = 0
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def balance_rupees(self) -> float:
        return self.balance_paise / 100

    def credit(
        self,
        amount_paise: int,
        description: str,
        reference_type: ReferenceType,
        reference_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> WalletTransaction:
        """Add funds and return the ledger row."""
        return self._apply(
            TransactionType.CREDIT,
            amount_paise,
            description,
            reference_type,
            reference_id,
            metadata,
        )

    def debit(
        self,
        amount_paise: int,
        description: str,
        reference_type: ReferenceType,
        reference_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> WalletTransaction:
        """
        Remove funds and return the ledger row.

        Raises:
            InsufficientFundsException: If the balance doesn't cover the amount
        """
        if amount_paise > self.balance_paise:
            raise InsufficientFundsException(
                required_paise=amount_paise,
                available_paise=self.balance_paise,
            )
        return self._apply(
            TransactionType.DEBIT,
            amount_paise,
            description,
            reference_type,
            reference_id,
            metadata,
        )

    def _apply(
        self,
        transaction_type: TransactionType,
        amount_paise: int,
        description: str,
        reference_type: ReferenceType,
        reference_id: Optional[str],
        metadata: Optional[dict[str, Any]],
    ) -> WalletTransaction:
        if amount_paise <= 0:
            raise InvalidAmountException("Amount must be positive")

        balance_before = self.balance_paise
        if transaction_type == TransactionType.CREDIT:
            balance_after = balance_before + amount_paise
        else:
            balance_after = balance_before - amount_paise

        self.balance_paise = balance_after
        self.updated_at = datetime.utcnow()

        return WalletTransaction(
            wallet_id=self.id,
            user_id=self.user_id,
            transaction_type=transaction_type,
            amount_paise=amount_paise,
            balance_before_paise=balance_before,
            balance_after_paise=balance_after,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
            metadata=metadata or {},
        )
