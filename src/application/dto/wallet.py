"""Data transfer objects for wallet operations."""

from dataclasses import dataclass
from typing import Any, Dict, List

from src.core.timeutils import to_utc_iso
from src.domain.entities import Wallet, WalletTransaction


@dataclass(frozen=True)
class TopUpRequest:
    """Input for starting a wallet top-up through Stripe."""

    user_id: str
    amount_paise: int
    currency: str = "inr"

    def validate(self, min_amount_paise: int) -> List[str]:
        errors = []

        if self.amount_paise < min_amount_paise:
            errors.append(f"Minimum amount is ₹{min_amount_paise // 100}")

        if self.currency.lower() != "inr":
            errors.append("Wallet top-ups are only supported in INR")

        return errors


@dataclass(frozen=True)
class TopUpResponse:
    client_secret: str
    payment_intent_id: str


@dataclass(frozen=True)
class WithdrawalRequest:
    """Input for moving wallet funds to a bank account."""

    user_id: str
    amount_paise: int
    bank_name: str
    account_number: str
    ifsc_code: str
    account_holder_name: str

    def validate(self) -> List[str]:
        errors = []

        if self.amount_paise <= 0:
            errors.append("Please enter a valid amount")

        if not all(
            value.strip()
            for value in (
                self.bank_name,
                self.account_number,
                self.ifsc_code,
                self.account_holder_name,
            )
        ):
            errors.append("Please fill in all bank details")

        return errors

    @property
    def masked_account_number(self) -> str:
        digits = self.account_number.strip()
        return "X" * max(0, len(digits) - 4) + digits[-4:]


@dataclass(frozen=True)
class WalletTransactionDTO:
    id: str
    transaction_type: str
    amount: float
    balance_before: float
    balance_after: float
    description: str
    reference_type: str
    reference_id: str | None
    metadata: Dict[str, Any]
    created_at: str

    @classmethod
    def from_entity(cls, transaction: WalletTransaction) -> "WalletTransactionDTO":
        return cls(
            id=str(transaction.id),
            transaction_type=transaction.transaction_type.value,
            amount=transaction.amount_paise / 100,
            balance_before=transaction.balance_before_paise / 100,
            balance_after=transaction.balance_after_paise / 100,
            description=transaction.description,
            reference_type=transaction.reference_type.value,
            reference_id=transaction.reference_id,
            metadata=dict(transaction.metadata),
            created_at=to_utc_iso(transaction.created_at),
        )


@dataclass(frozen=True)
class WalletResponse:
    """A wallet with its most recent ledger rows. Amounts are in rupees."""

    wallet_id: str
    user_id: str
    currency: str
    balance: float
    transactions: List[WalletTransactionDTO]

    @classmethod
    def from_entity(
        cls,
        wallet: Wallet,
        transactions: List[WalletTransaction],
    ) -> "WalletResponse":
        return cls(
            wallet_id=str(wallet.id),
            user_id=wallet.user_id,
            currency=wallet.currency,
            balance=wallet.balance_rupees,
            transactions=[WalletTransactionDTO.from_entity(t) for t in transactions],
        )
