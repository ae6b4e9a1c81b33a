"""
Integration tests for the wallet API.

These tests verify:
1. GET /v1/wallet opens an empty INR wallet on first use
2. Top-ups go through a Stripe PaymentIntent and credit exactly once
3. Withdrawals debit the wallet and mask the bank account
4. Every balance change leaves a ledger row
5. The ledger holds at most one credit per PaymentIntent
"""

import pytest
from httpx import AsyncClient

from src.domain.entities import ReferenceType
from src.domain.exceptions import DuplicatePaymentException
from src.infrastructure.repositories import PostgresWalletRepository


WITHDRAWAL = {
    "bank_name": "State Bank of India",
    "account_number": "123456789012",
    "ifsc_code": "sbin0001234",
    "account_holder_name": "Asha Rao",
}


# =============================================================================
# GET /v1/wallet Tests
# =============================================================================

class TestGetWallet:
    """Tests for GET /v1/wallet endpoint."""

    @pytest.mark.asyncio
    async def test_new_user_gets_empty_wallet(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        """First access opens a zero-balance INR wallet."""
        response = await client.get("/v1/wallet", headers=auth_headers("student_a"))

        assert response.status_code == 200

        data = response.json()
        assert data["user_id"] == "student_a"
        assert data["currency"] == "INR"
        assert data["balance"] == 0
        assert data["transactions"] == []

    @pytest.mark.asyncio
    async def test_wallet_is_stable_across_calls(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        """The same wallet is returned on every call."""
        headers = auth_headers("student_a")

        first = await client.get("/v1/wallet", headers=headers)
        second = await client.get("/v1/wallet", headers=headers)

        assert first.json()["wallet_id"] == second.json()["wallet_id"]

    @pytest.mark.asyncio
    async def test_wallet_requires_authentication(
        self,
        client: AsyncClient,
    ):
        """Requests without a bearer token are rejected with 401."""
        response = await client.get("/v1/wallet")

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHENTICATED"
        assert response.headers["WWW-Authenticate"] == "Bearer"


# =============================================================================
# Top-up Tests
# =============================================================================

class TestTopUp:
    """Tests for POST /v1/wallet/top-ups and /v1/wallet/top-ups/confirm."""

    @pytest.mark.asyncio
    async def test_top_up_creates_payment_intent_in_paise(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """A ₹500 top-up asks Stripe for 50000 paise tagged as a wallet top-up."""
        response = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": 500},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 200

        data = response.json()
        intent = mock_payment_gateway.intents[data["payment_intent_id"]]
        assert data["client_secret"] == intent.client_secret
        assert intent.amount == 50000
        assert intent.currency == "inr"
        assert intent.metadata == {
            "supabase_user_id": "student_a",
            "purpose": "wallet_topup",
            "wallet_amount": "500",
        }

    @pytest.mark.asyncio
    async def test_top_up_reuses_stripe_customer(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """The Stripe customer is created once per user."""
        headers = auth_headers("student_a")

        await client.post("/v1/wallet/top-ups", json={"amount": 200}, headers=headers)
        await client.post("/v1/wallet/top-ups", json={"amount": 300}, headers=headers)

        assert list(mock_payment_gateway.customers.values()) == ["student_a"]
        customer_ids = {i.customer_id for i in mock_payment_gateway.intents.values()}
        assert len(customer_ids) == 1

    @pytest.mark.asyncio
    async def test_top_up_below_minimum_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """Top-ups under ₹100 never reach Stripe."""
        response = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": 99},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_AMOUNT"
        assert data["message"] == "Minimum amount is ₹100"
        assert mock_payment_gateway.intents == {}

    @pytest.mark.asyncio
    async def test_top_up_in_other_currency_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        """Wallets only take INR."""
        response = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": 500, "currency": "usd"},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_AMOUNT"

    @pytest.mark.asyncio
    async def test_confirm_credits_amount_received(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """The wallet is credited with what Stripe reports as received."""
        headers = auth_headers("student_a")
        top_up = await client.post("/v1/wallet/top-ups", json={"amount": 500}, headers=headers)
        intent_id = top_up.json()["payment_intent_id"]
        mock_payment_gateway.succeed(intent_id, amount_received=49000)

        response = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": intent_id},
            headers=headers,
        )

        assert response.status_code == 200

        data = response.json()
        assert data["balance"] == 490.0
        assert len(data["transactions"]) == 1

        entry = data["transactions"][0]
        assert entry["transaction_type"] == "credit"
        assert entry["amount"] == 490.0
        assert entry["balance_before"] == 0
        assert entry["balance_after"] == 490.0
        assert entry["reference_type"] == "stripe_payment"
        assert entry["reference_id"] == intent_id

    @pytest.mark.asyncio
    async def test_confirm_twice_is_rejected_as_duplicate(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """A PaymentIntent is credited at most once."""
        headers = auth_headers("student_a")
        top_up = await client.post("/v1/wallet/top-ups", json={"amount": 500}, headers=headers)
        intent_id = top_up.json()["payment_intent_id"]
        mock_payment_gateway.succeed(intent_id)

        first = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": intent_id},
            headers=headers,
        )
        second = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": intent_id},
            headers=headers,
        )

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error"] == "DUPLICATE_PAYMENT"

        wallet = await client.get("/v1/wallet", headers=headers)
        assert wallet.json()["balance"] == 500.0
        assert len(wallet.json()["transactions"]) == 1

    @pytest.mark.asyncio
    async def test_confirm_unpaid_intent_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        """Payments that haven't succeeded are not credited."""
        headers = auth_headers("student_a")
        top_up = await client.post("/v1/wallet/top-ups", json={"amount": 500}, headers=headers)

        response = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": top_up.json()["payment_intent_id"]},
            headers=headers,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "PAYMENT_VERIFICATION_FAILED"
        assert data["message"] == "Payment not successful. Status: requires_payment_method"

    @pytest.mark.asyncio
    async def test_confirm_someone_elses_payment_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """A user can't claim a top-up paid by another user's customer."""
        top_up = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": 500},
            headers=auth_headers("student_a"),
        )
        intent_id = top_up.json()["payment_intent_id"]
        mock_payment_gateway.succeed(intent_id)

        response = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": intent_id},
            headers=auth_headers("student_b"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "PAYMENT_VERIFICATION_FAILED"

        wallet = await client.get("/v1/wallet", headers=auth_headers("student_b"))
        assert wallet.json()["balance"] == 0

    @pytest.mark.asyncio
    async def test_stripe_outage_returns_502(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        """Gateway errors surface as 502 Bad Gateway."""
        mock_payment_gateway.fail_mode = True

        response = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": 500},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 502
        assert response.json()["error"] == "PAYMENT_GATEWAY_ERROR"


# =============================================================================
# Withdrawal Tests
# =============================================================================

class TestWithdrawal:
    """Tests for POST /v1/wallet/withdrawals endpoint."""

    @pytest.mark.asyncio
    async def test_withdrawal_debits_wallet(
        self,
        client: AsyncClient,
        auth_headers,
        fund_wallet,
    ):
        """A withdrawal records a debit with masked bank details."""
        await fund_wallet("student_a", 1000)

        response = await client.post(
            "/v1/wallet/withdrawals",
            json={"amount": 250, **WITHDRAWAL},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 200

        data = response.json()
        assert data["balance"] == 750.0

        entry = data["transactions"][0]
        assert entry["transaction_type"] == "debit"
        assert entry["reference_type"] == "withdrawal"
        assert entry["balance_before"] == 1000.0
        assert entry["balance_after"] == 750.0
        assert entry["metadata"]["account_number"] == "XXXXXXXX9012"
        assert entry["metadata"]["ifsc_code"] == "SBIN0001234"
        assert entry["metadata"]["status"] == "processing"

    @pytest.mark.asyncio
    async def test_withdrawal_over_balance_returns_402(
        self,
        client: AsyncClient,
        auth_headers,
        fund_wallet,
    ):
        """The balance never goes negative."""
        await fund_wallet("student_a", 200)

        response = await client.post(
            "/v1/wallet/withdrawals",
            json={"amount": 500, **WITHDRAWAL},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 402
        assert response.json()["error"] == "INSUFFICIENT_FUNDS"

        wallet = await client.get("/v1/wallet", headers=auth_headers("student_a"))
        assert wallet.json()["balance"] == 200.0

    @pytest.mark.asyncio
    async def test_withdrawal_without_wallet_returns_404(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        """Withdrawing before any wallet exists is a 404."""
        response = await client.post(
            "/v1/wallet/withdrawals",
            json={"amount": 100, **WITHDRAWAL},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "WALLET_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_withdrawal_requires_bank_details(
        self,
        client: AsyncClient,
        auth_headers,
        fund_wallet,
    ):
        """Blank bank fields are rejected."""
        await fund_wallet("student_a", 500)

        response = await client.post(
            "/v1/wallet/withdrawals",
            json={"amount": 100, **WITHDRAWAL, "ifsc_code": "  "},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Please fill in all bank details"


# =============================================================================
# Ledger Constraint Tests
# =============================================================================

class TestTopUpLedger:
    """The database refuses a second credit for the same PaymentIntent."""

    @pytest.mark.asyncio
    async def test_payment_intent_cannot_credit_two_wallets(self, test_session):
        repo = PostgresWalletRepository(test_session)
        first = await repo.get_or_create("student_a")
        second = await repo.get_or_create("student_b")

        await repo.apply(
            first,
            first.credit(50_000, "Wallet top-up", ReferenceType.STRIPE_PAYMENT, "pi_0001"),
        )

        with pytest.raises(DuplicatePaymentException) as exc_info:
            await repo.apply(
                second,
                second.credit(50_000, "Wallet top-up", ReferenceType.STRIPE_PAYMENT, "pi_0001"),
            )

        assert exc_info.value.payment_intent_id == "pi_0001"

    @pytest.mark.asyncio
    async def test_other_references_may_repeat(self, test_session):
        """Repayments of one loan share its ID as their reference."""
        repo = PostgresWalletRepository(test_session)
        wallet = await repo.get_or_create("lender_a")

        for _ in range(2):
            await repo.apply(
                wallet,
                wallet.credit(10_000, "Loan repayment", ReferenceType.LOAN_REPAYMENT, "loan_1"),
            )

        assert wallet.balance_paise == 20_000
        assert await repo.has_reference(ReferenceType.LOAN_REPAYMENT, "loan_1")
