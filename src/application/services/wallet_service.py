"""Wallet service - balances, Stripe top-ups and withdrawals."""

import structlog

from src.application.dto import (
    TopUpRequest,
    TopUpResponse,
    WalletResponse,
    WithdrawalRequest,
)
from src.domain.entities import Profile, ReferenceType
from src.domain.exceptions import (
    DuplicatePaymentException,
    InvalidAmountException,
    InvalidRequestException,
    PaymentVerificationException,
    WalletNotFoundException,
)
from src.domain.interfaces import BillingRepository, PaymentGateway, WalletRepository
from src.service.pricing import paise_to_rupees
from .customers import get_or_create_customer

logger = structlog.get_logger(__name__)

WALLET_TOPUP_PURPOSE = "wallet_topup"
RECENT_TRANSACTIONS = 20


def _rupees(amount_paise: int) -> str:
    rupees = paise_to_rupees(amount_paise)
    return str(int(rupees)) if rupees.is_integer() else f"{rupees:.2f}"


class WalletService:
    """
    Application service for wallet use cases.

    Every balance change goes through Wallet.credit/debit and is persisted
    with its ledger row in the request's transaction.
    """

    def __init__(
        self,
        wallet_repository: WalletRepository,
        billing_repository: BillingRepository,
        payment_gateway: PaymentGateway,
        currency: str = "INR",
        min_top_up_paise: int = 10_000,
    ):
        self._wallet_repo = wallet_repository
        self._billing_repo = billing_repository
        self._gateway = payment_gateway
        self._currency = currency
        self._min_top_up_paise = min_top_up_paise

    async def get_wallet(self, user_id: str) -> WalletResponse:
        """Get (or open) the user's wallet with its recent ledger rows."""
        wallet = await self._wallet_repo.get_or_create(user_id, self._currency)
        transactions = await self._wallet_repo.list_transactions(
            wallet.id,
            limit=RECENT_TRANSACTIONS,
        )
        return WalletResponse.from_entity(wallet, transactions)

    async def create_top_up(self, request: TopUpRequest, profile: Profile) -> TopUpResponse:
        """
        Start a wallet top-up by creating a Stripe PaymentIntent.

        The wallet is only credited once the payment is confirmed.

        Raises:
            InvalidAmountException: If the amount is below the minimum
            PaymentGatewayException: If Stripe rejects the request
        """
        errors = request.validate(self._min_top_up_paise)
        if errors:
            raise InvalidAmountException("; ".join(errors))

        customer_id = await get_or_create_customer(self._billing_repo, self._gateway, profile)

        intent = await self._gateway.create_payment_intent(
            amount=request.amount_paise,
            currency=request.currency,
            customer_id=customer_id,
            metadata={
                "supabase_user_id": profile.id,
                "purpose": WALLET_TOPUP_PURPOSE,
                "wallet_amount": _rupees(request.amount_paise),
            },
            description=f"Vibe Wallet Top-up - ₹{_rupees(request.amount_paise)}",
        )

        logger.info(
            "wallet_top_up_started",
            user_id=profile.id,
            amount_paise=request.amount_paise,
            payment_intent_id=intent.id,
        )

        return TopUpResponse(
            client_secret=intent.client_secret or "",
            payment_intent_id=intent.id,
        )

    async def confirm_top_up(self, user_id: str, payment_intent_id: str) -> WalletResponse:
        """
        Credit the wallet for a succeeded top-up PaymentIntent.

        The credited amount is what Stripe reports as received. A
        PaymentIntent is credited at most once.

        Raises:
            PaymentVerificationException: If the payment isn't the caller's
                succeeded top-up
            DuplicatePaymentException: If the payment was already credited
        """
        if not payment_intent_id:
            raise InvalidRequestException("Payment intent ID is required")

        log = logger.bind(user_id=user_id, payment_intent_id=payment_intent_id)

        intent = await self._gateway.retrieve_payment_intent(payment_intent_id)
        if intent.status != "succeeded":
            raise PaymentVerificationException(
                f"Payment not successful. Status: {intent.status}"
            )

        customer = (
            await self._billing_repo.get_customer_by_stripe_id(intent.customer_id)
            if intent.customer_id
            else None
        )
        if customer is None or customer.user_id != user_id:
            log.warning("wallet_top_up_ownership_mismatch")
            raise PaymentVerificationException()

        purpose = intent.metadata.get("purpose")
        if purpose is not None and purpose != WALLET_TOPUP_PURPOSE:
            raise PaymentVerificationException("Payment is not a wallet top-up")

        if intent.currency.upper() != self._currency:
            raise PaymentVerificationException("Payment currency doesn't match the wallet")

        # Lock first so a concurrent confirmation waits, then sees our credit
        wallet = await self._wallet_repo.get_or_create(
            user_id,
            self._currency,
            for_update=True,
        )
        if await self._wallet_repo.has_reference(ReferenceType.STRIPE_PAYMENT, intent.id):
            raise DuplicatePaymentException(intent.id)

        amount_paise = intent.amount_received or intent.amount
        transaction = wallet.credit(
            amount_paise,
            description=f"Wallet top-up via Stripe - ₹{_rupees(amount_paise)}",
            reference_type=ReferenceType.STRIPE_PAYMENT,
            reference_id=intent.id,
            metadata={"payment_method": "stripe", "payment_intent_id": intent.id},
        )
        await self._wallet_repo.apply(wallet, transaction)

        log.info(
            "wallet_topped_up",
            amount_paise=amount_paise,
            balance_paise=wallet.balance_paise,
        )

        transactions = await self._wallet_repo.list_transactions(
            wallet.id,
            limit=RECENT_TRANSACTIONS,
        )
        return WalletResponse.from_entity(wallet, transactions)

    async def withdraw(self, request: WithdrawalRequest) -> WalletResponse:
        """
        Debit the wallet for a transfer to the user's bank account.

        Raises:
            InvalidAmountException: If the request is incomplete
            WalletNotFoundException: If the user has no wallet
            InsufficientFundsException: If the balance doesn't cover the amount
        """
        errors = request.validate()
        if errors:
            raise InvalidAmountException("; ".join(errors))

        wallet = await self._wallet_repo.get(
            request.user_id,
            self._currency,
            for_update=True,
        )
        if wallet is None:
            raise WalletNotFoundException(request.user_id)

        transaction = wallet.debit(
            request.amount_paise,
            description=(
                f"Withdrawal to {request.bank_name.strip()} - ₹{_rupees(request.amount_paise)}"
            ),
            reference_type=ReferenceType.WITHDRAWAL,
            metadata={
                "bank_name": request.bank_name.strip(),
                "account_holder_name": request.account_holder_name.strip(),
                "account_number": request.masked_account_number,
                "ifsc_code": request.ifsc_code.strip().upper(),
                "status": "processing",
            },
        )
        await self._wallet_repo.apply(wallet, transaction)

        logger.info(
            "wallet_withdrawal_requested",
            user_id=request.user_id,
            amount_paise=request.amount_paise,
            transaction_id=str(transaction.id),
        )

        transactions = await self._wallet_repo.list_transactions(
            wallet.id,
            limit=RECENT_TRANSACTIONS,
        )
        return WalletResponse.from_entity(wallet, transactions)
