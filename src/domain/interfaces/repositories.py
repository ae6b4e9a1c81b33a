"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import (
    AgreementSignature,
    Customer,
    DocumentVerification,
    LoanAgreement,
    LoanFunding,
    LoanRepayment,
    LoanRequest,
    LoanStatus,
    Notification,
    Order,
    Profile,
    ProfileStats,
    ReferenceType,
    Subscription,
    Wallet,
    WalletTransaction,
)


class ProfileRepository(ABC):
    """Abstract repository for Profile persistence."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Profile]:
        ...

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Insert or update a profile."""
        ...

    @abstractmethod
    async def get_stats(self, user_id: str) -> ProfileStats:
        """
        Compute a user's lending track record.

        Args:
            user_id: The user's identifier

        Returns:
            Loans taken, completed repayments and loans given
        """
        ...


class WalletRepository(ABC):
    """
    Abstract repository for wallets and their ledger.

    Balance changes and ledger rows must be written in the caller's
    transaction so they commit or roll back together.
    """

    @abstractmethod
    async def get(
        self,
        user_id: str,
        currency: str = "INR",
        for_update: bool = False,
    ) -> Optional[Wallet]:
        """
        Retrieve a user's wallet.

        Args:
            user_id: The wallet owner
            currency: Wallet currency
            for_update: Lock the row until the transaction ends

        Returns:
            The wallet if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_or_create(
        self,
        user_id: str,
        currency: str = "INR",
        for_update: bool = False,
    ) -> Wallet:
        ...

    @abstractmethod
    async def apply(self, wallet: Wallet, transaction: WalletTransaction) -> None:
        """
        Persist a balance change together with its ledger row.

        Args:
            wallet: The wallet after ``credit``/``debit`` was applied
            transaction: The ledger row returned by that call
        """
        ...

    @abstractmethod
    async def list_transactions(
        self,
        wallet_id: UUID,
        limit: int = 20,
    ) -> List[WalletTransaction]:
        """Ledger rows for a wallet, newest first."""
        ...

    @abstractmethod
    async def has_reference(
        self,
        reference_type: ReferenceType,
        reference_id: str,
    ) -> bool:
        """Whether a ledger row already exists for this reference."""
        ...


class LoanRepository(ABC):
    """Abstract repository for loan requests, fundings and repayments."""

    @abstractmethod
    async def save(self, loan: LoanRequest) -> LoanRequest:
        """Insert a new loan request."""
        ...

    @abstractmethod
    async def get_by_id(
        self,
        loan_id: UUID,
        for_update: bool = False,
    ) -> Optional[LoanRequest]:
        """
        Retrieve a loan with its fundings (oldest first).

        Args:
            loan_id: The loan's unique identifier
            for_update: Lock the loan row until the transaction ends

        Returns:
            The loan if found, None otherwise
        """
        ...

    @abstractmethod
    async def list(
        self,
        status: Optional[LoanStatus] = None,
        borrower_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[LoanRequest]:
        """Loans newest first, optionally filtered."""
        ...

    @abstractmethod
    async def update(self, loan: LoanRequest) -> None:
        """Persist status and funded total."""
        ...

    @abstractmethod
    async def add_funding(self, funding: LoanFunding) -> LoanFunding:
        ...

    @abstractmethod
    async def save_repayment(self, repayment: LoanRepayment) -> LoanRepayment:
        ...

    @abstractmethod
    async def list_repayments(self, loan_id: UUID) -> List[LoanRepayment]:
        ...


class AgreementRepository(ABC):
    """Abstract repository for loan agreements and signatures."""

    @abstractmethod
    async def save(self, agreement: LoanAgreement) -> LoanAgreement:
        """Insert or update an agreement."""
        ...

    @abstractmethod
    async def save_in_savepoint(self, agreement: LoanAgreement) -> LoanAgreement:
        """
        Insert an agreement inside a nested transaction.

        A failure rolls back only the agreement insert; the enclosing
        transaction stays usable.
        """
        ...

    @abstractmethod
    async def get_by_id(self, agreement_id: UUID) -> Optional[LoanAgreement]:
        ...

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[LoanAgreement]:
        """Agreements where the user is borrower or lender, newest first."""
        ...

    @abstractmethod
    async def add_signature(self, signature: AgreementSignature) -> AgreementSignature:
        ...


class VerificationRepository(ABC):
    """Abstract repository for document verifications."""

    @abstractmethod
    async def save(self, verification: DocumentVerification) -> DocumentVerification:
        ...

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[DocumentVerification]:
        ...


class BillingRepository(ABC):
    """Abstract repository for Stripe customers, orders and subscriptions."""

    @abstractmethod
    async def get_customer_by_user(self, user_id: str) -> Optional[Customer]:
        ...

    @abstractmethod
    async def get_customer_by_stripe_id(
        self,
        stripe_customer_id: str,
    ) -> Optional[Customer]:
        ...

    @abstractmethod
    async def save_customer(self, customer: Customer) -> Customer:
        ...

    @abstractmethod
    async def save_order(self, order: Order) -> Order:
        ...

    @abstractmethod
    async def update_order_status(self, payment_intent_id: str, status: str) -> bool:
        """
        Set the status of the order backed by a PaymentIntent.

        Returns:
            True if an order was updated
        """
        ...

    @abstractmethod
    async def list_orders(self, user_id: str) -> List[Order]:
        ...

    @abstractmethod
    async def upsert_subscription(self, subscription: Subscription) -> Subscription:
        ...

    @abstractmethod
    async def get_subscription(
        self,
        stripe_subscription_id: str,
    ) -> Optional[Subscription]:
        ...

    @abstractmethod
    async def get_subscription_for_user(self, user_id: str) -> Optional[Subscription]:
        """The user's most recently updated subscription."""
        ...

    @abstractmethod
    async def save_notification(self, notification: Notification) -> Notification:
        ...
