"""PostgreSQL implementation of WalletRepository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.metrics import record_ledger_entry
from src.domain.entities import (
    ReferenceType,
    TransactionType,
    Wallet,
    WalletTransaction,
)
from src.domain.exceptions import DuplicatePaymentException
from src.domain.interfaces import WalletRepository
from src.infrastructure.database.models import WalletModel, WalletTransactionModel


class PostgresWalletRepository(WalletRepository):
    """
    PostgreSQL-backed wallet ledger.

    ``for_update`` reads take a row lock (``SELECT ... FOR UPDATE``) so
    concurrent debits against the same wallet serialize.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(
        self,
        user_id: str,
        currency: str = "INR",
        for_update: bool = False,
    ) -> Optional[Wallet]:
        stmt = select(WalletModel).where(
            WalletModel.user_id == user_id,
            WalletModel.currency == currency,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_or_create(
        self,
        user_id: str,
        currency: str = "INR",
        for_update: bool = False,
    ) -> Wallet:
        wallet = await self.get(user_id, currency, for_update=for_update)
        if wallet is not None:
            return wallet

        wallet = Wallet(user_id=user_id, currency=currency)
        self._session.add(
            WalletModel(
                id=str(wallet.id),
                user_id=wallet.user_id,
                currency=wallet.currency,
                balance_paise=wallet.balance_paise,
                created_at=wallet.created_at,
                updated_at=wallet.updated_at,
            )
        )
        await self._session.flush()
        return wallet

    async def apply(self, wallet: Wallet, transaction: WalletTransaction) -> None:
        model = await self._session.get(WalletModel, str(wallet.id))
        if model is None:
            raise ValueError(f"Wallet {wallet.id} is not persisted")

        model.balance_paise = wallet.balance_paise
        model.updated_at = wallet.updated_at

        self._session.add(
            WalletTransactionModel(
                id=str(transaction.id),
                wallet_id=str(transaction.wallet_id),
                user_id=transaction.user_id,
                transaction_type=transaction.transaction_type.value,
                amount_paise=transaction.amount_paise,
                balance_before_paise=transaction.balance_before_paise,
                balance_after_paise=transaction.balance_after_paise,
                description=transaction.description,
                reference_type=transaction.reference_type.value,
                reference_id=transaction.reference_id,
                metadata_=transaction.metadata,
                created_at=transaction.created_at,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError:
            if transaction.reference_type == ReferenceType.STRIPE_PAYMENT:
                raise DuplicatePaymentException(transaction.reference_id or "")
            raise

        record_ledger_entry(
            transaction.transaction_type.value,
            transaction.reference_type.value,
        )

    async def list_transactions(
        self,
        wallet_id: UUID,
        limit: int = 20,
    ) -> List[WalletTransaction]:
        stmt = (
            select(WalletTransactionModel)
            .where(WalletTransactionModel.wallet_id == str(wallet_id))
            .order_by(WalletTransactionModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_transaction(model) for model in result.scalars().all()]

    async def has_reference(
        self,
        reference_type: ReferenceType,
        reference_id: str,
    ) -> bool:
        stmt = (
            select(WalletTransactionModel.id)
            .where(
                WalletTransactionModel.reference_type == reference_type.value,
                WalletTransactionModel.reference_id == reference_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    def _to_entity(self, model: WalletModel) -> Wallet:
        return Wallet(
            id=UUID(model.id),
            user_id=model.user_id,
            currency=model.currency,
            balance_paise=model.balance_paise,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_transaction(self, model: WalletTransactionModel) -> WalletTransaction:
        return WalletTransaction(
            id=UUID(model.id),
            wallet_id=UUID(model.wallet_id),
            user_id=model.user_id,
            transaction_type=TransactionType(model.transaction_type),
            amount_paise=model.amount_paise,
            balance_before_paise=model.balance_before_paise,
            balance_after_paise=model.balance_after_paise,
            description=model.description,
            reference_type=ReferenceType(model.reference_type),
            reference_id=model.reference_id,
            metadata=model.metadata_ or {},
            created_at=model.created_at,
        )
