"""
Integration tests for Stripe payments.

These tests verify:
1. POST /v1/payments/intents creates a PaymentIntent and records the order
2. POST /v1/payments/webhook only applies events with a valid signature
3. Subscriptions are synced from webhooks and canceled at period end
4. GET /v1/payments/products serves the catalog
"""

import json
from typing import Any, Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from src.infrastructure.clients import StripePaymentGateway
from src.infrastructure.database.models import NotificationModel

VIBE_PRICE_ID = "price_1RfIzoG3rwHz1Z4E29SKAJt4"


def _event(event_type: str, data_object: Dict[str, Any], event_id: str = "evt_0001") -> bytes:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": data_object},
    }).encode("utf-8")


def _subscription(status: str = "active", customer: str = "cus_0001") -> Dict[str, Any]:
    return {
        "id": "sub_0001",
        "object": "subscription",
        "customer": customer,
        "status": status,
        "cancel_at_period_end": False,
        "current_period_start": 1893456000,  # 2030-01-01
        "current_period_end": 1896134400,  # 2030-02-01
        "items": {"data": [{"price": {"id": VIBE_PRICE_ID}}]},
    }


async def _post_event(client: AsyncClient, payload: bytes, signature: str):
    return await client.post(
        "/v1/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


# =============================================================================
# Payment Intent Tests
# =============================================================================

class TestCreatePaymentIntent:
    """Tests for POST /v1/payments/intents endpoint."""

    @pytest.mark.asyncio
    async def test_intent_is_created_and_order_recorded(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
    ):
        headers = auth_headers("student_a")

        response = await client.post(
            "/v1/payments/intents",
            json={"amount": 10, "product_name": "Vibe"},
            headers=headers,
        )

        assert response.status_code == 200

        data = response.json()
        intent = mock_payment_gateway.intents[data["payment_intent_id"]]
        assert data["client_secret"] == intent.client_secret
        assert intent.amount == 1000
        assert intent.currency == "usd"
        assert intent.metadata == {"supabase_user_id": "student_a", "product_name": "Vibe"}

        orders = await client.get("/v1/payments/orders", headers=headers)
        assert orders.status_code == 200
        assert len(orders.json()) == 1

        order = orders.json()[0]
        assert order["payment_intent_id"] == intent.id
        assert order["amount"] == 10.0
        assert order["currency"] == "usd"
        assert order["status"] == "requires_payment_method"
        assert order["product_name"] == "Vibe"

    @pytest.mark.asyncio
    async def test_orders_are_private(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        await client.post(
            "/v1/payments/intents",
            json={"amount": 10},
            headers=auth_headers("student_a"),
        )

        response = await client.get("/v1/payments/orders", headers=auth_headers("student_b"))

        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"amount": 0},
            {"amount": -5},
            {"amount": 10, "currency": "dollars"},
        ],
    )
    async def test_invalid_intent_request_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
        body: dict,
    ):
        response = await client.post(
            "/v1/payments/intents",
            json=body,
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_REQUEST"
        assert mock_payment_gateway.intents == {}

    @pytest.mark.asyncio
    async def test_intent_requires_authentication(
        self,
        client: AsyncClient,
    ):
        response = await client.post("/v1/payments/intents", json={"amount": 10})

        assert response.status_code == 401


# =============================================================================
# Webhook Tests
# =============================================================================

class TestStripeWebhook:
    """Tests for POST /v1/payments/webhook endpoint."""

    @pytest.mark.asyncio
    async def test_payment_succeeded_updates_order_and_notifies(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
        test_session,
    ):
        headers = auth_headers("student_a")
        intent = await client.post(
            "/v1/payments/intents",
            json={"amount": 10, "product_name": "P2"},
            headers=headers,
        )
        intent_id = intent.json()["payment_intent_id"]

        payload = _event(
            "payment_intent.succeeded",
            {
                "id": intent_id,
                "object": "payment_intent",
                "metadata": {"supabase_user_id": "student_a", "product_name": "P2"},
            },
        )
        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200
        assert response.json() == {"received": True}

        orders = await client.get("/v1/payments/orders", headers=headers)
        assert orders.json()[0]["status"] == "succeeded"

        result = await test_session.execute(
            select(NotificationModel).where(NotificationModel.user_id == "student_a")
        )
        notifications = result.scalars().all()
        assert len(notifications) == 1
        assert notifications[0].type == "payment_success"
        assert notifications[0].title == "Payment Successful"
        assert notifications[0].message == "Your payment for P2 was successful!"

    @pytest.mark.asyncio
    async def test_wallet_top_up_notification_wording(
        self,
        client: AsyncClient,
        webhook_signer,
        test_session,
    ):
        payload = _event(
            "payment_intent.succeeded",
            {
                "id": "pi_unknown",
                "metadata": {"supabase_user_id": "student_a", "purpose": "wallet_topup"},
            },
        )

        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200

        result = await test_session.execute(select(NotificationModel.message))
        assert result.scalars().all() == ["Your payment for your wallet top-up was successful!"]

    @pytest.mark.asyncio
    async def test_payment_without_user_sends_no_notification(
        self,
        client: AsyncClient,
        webhook_signer,
        test_session,
    ):
        payload = _event("payment_intent.succeeded", {"id": "pi_anon", "metadata": {}})

        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200

        result = await test_session.execute(select(NotificationModel))
        assert result.scalars().all() == []

    @pytest.mark.asyncio
    async def test_payment_failed_marks_order_failed(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
    ):
        headers = auth_headers("student_a")
        intent = await client.post("/v1/payments/intents", json={"amount": 10}, headers=headers)

        payload = _event(
            "payment_intent.payment_failed",
            {"id": intent.json()["payment_intent_id"], "metadata": {}},
        )
        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200

        orders = await client.get("/v1/payments/orders", headers=headers)
        assert orders.json()[0]["status"] == "failed"

    @pytest.mark.asyncio
    async def test_invalid_signature_is_rejected(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
    ):
        headers = auth_headers("student_a")
        intent = await client.post("/v1/payments/intents", json={"amount": 10}, headers=headers)

        payload = _event(
            "payment_intent.succeeded",
            {"id": intent.json()["payment_intent_id"], "metadata": {}},
        )
        response = await _post_event(client, payload, webhook_signer(payload, "whsec_other"))

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_WEBHOOK_SIGNATURE"

        orders = await client.get("/v1/payments/orders", headers=headers)
        assert orders.json()[0]["status"] == "requires_payment_method"

    @pytest.mark.asyncio
    async def test_missing_signature_is_rejected(
        self,
        client: AsyncClient,
    ):
        response = await client.post(
            "/v1/payments/webhook",
            content=_event("payment_intent.succeeded", {"id": "pi_0001"}),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_WEBHOOK_SIGNATURE"

    @pytest.mark.asyncio
    async def test_events_rejected_without_signing_secret(
        self,
        client: AsyncClient,
        auth_headers,
        mock_payment_gateway,
        webhook_signer,
    ):
        """An empty secret must not let an empty-key HMAC through."""
        mock_payment_gateway._verifier = StripePaymentGateway(
            api_key="sk_test_unused",
            webhook_secret="",
        )
        headers = auth_headers("student_a")
        intent = await client.post("/v1/payments/intents", json={"amount": 10}, headers=headers)

        payload = _event(
            "payment_intent.succeeded",
            {
                "id": intent.json()["payment_intent_id"],
                "metadata": {"supabase_user_id": "student_a"},
            },
        )
        response = await _post_event(client, payload, webhook_signer(payload, ""))

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_WEBHOOK_SIGNATURE"
        assert "not configured" in response.json()["message"]

        orders = await client.get("/v1/payments/orders", headers=headers)
        assert orders.json()[0]["status"] == "requires_payment_method"

    @pytest.mark.asyncio
    async def test_unhandled_event_is_acknowledged(
        self,
        client: AsyncClient,
        webhook_signer,
    ):
        payload = _event("charge.refunded", {"id": "ch_0001"})

        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200
        assert response.json() == {"received": True}


# =============================================================================
# Subscription Tests
# =============================================================================

class TestSubscriptions:
    """Subscription sync, lookup and cancellation."""

    async def _subscribe(self, client, auth_headers, webhook_signer, user_id="student_a"):
        # First purchase creates the Stripe customer cus_0001
        await client.post(
            "/v1/payments/intents",
            json={"amount": 10},
            headers=auth_headers(user_id),
        )
        payload = _event("customer.subscription.created", _subscription())
        response = await _post_event(client, payload, webhook_signer(payload))
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_no_subscription_returns_null(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        response = await client.get("/v1/payments/subscription", headers=auth_headers("student_a"))

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_subscription_created_webhook_is_synced(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
    ):
        await self._subscribe(client, auth_headers, webhook_signer)

        response = await client.get("/v1/payments/subscription", headers=auth_headers("student_a"))

        data = response.json()
        assert data["subscription_id"] == "sub_0001"
        assert data["status"] == "active"
        assert data["price_id"] == VIBE_PRICE_ID
        assert data["product_name"] == "Vibe"
        assert data["cancel_at_period_end"] is False
        assert data["current_period_end"].startswith("2030-02-01")

    @pytest.mark.asyncio
    async def test_subscription_for_unknown_customer_is_ignored(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
    ):
        payload = _event(
            "customer.subscription.created",
            _subscription(customer="cus_missing"),
        )

        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200

        subscription = await client.get(
            "/v1/payments/subscription",
            headers=auth_headers("student_a"),
        )
        assert subscription.json() is None

    @pytest.mark.asyncio
    async def test_subscription_deleted_webhook_cancels(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
    ):
        await self._subscribe(client, auth_headers, webhook_signer)

        payload = _event(
            "customer.subscription.deleted",
            _subscription(status="canceled"),
            event_id="evt_0002",
        )
        response = await _post_event(client, payload, webhook_signer(payload))

        assert response.status_code == 200

        subscription = await client.get(
            "/v1/payments/subscription",
            headers=auth_headers("student_a"),
        )
        assert subscription.json()["status"] == "canceled"

    @pytest.mark.asyncio
    async def test_cancel_at_period_end(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
        mock_payment_gateway,
    ):
        await self._subscribe(client, auth_headers, webhook_signer)
        headers = auth_headers("student_a")

        response = await client.post(
            "/v1/payments/subscription/cancel",
            json={"subscription_id": "sub_0001"},
            headers=headers,
        )

        assert response.status_code == 200

        data = response.json()
        assert data["message"] == "Subscription will be canceled at the end of the billing period"
        assert data["cancel_at_period_end"] is True
        assert data["current_period_end"].startswith("2030-01-31")
        assert mock_payment_gateway.canceled_subscriptions == ["sub_0001"]

        subscription = await client.get("/v1/payments/subscription", headers=headers)
        assert subscription.json()["cancel_at_period_end"] is True
        assert subscription.json()["status"] == "active"

    @pytest.mark.asyncio
    async def test_cancel_requires_subscription_id(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        response = await client.post(
            "/v1/payments/subscription/cancel",
            json={},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Subscription ID is required"

    @pytest.mark.asyncio
    async def test_cancel_unknown_subscription_returns_404(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        response = await client.post(
            "/v1/payments/subscription/cancel",
            json={"subscription_id": "sub_missing"},
            headers=auth_headers("student_a"),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "SUBSCRIPTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_cancel_someone_elses_subscription_is_forbidden(
        self,
        client: AsyncClient,
        auth_headers,
        webhook_signer,
        mock_payment_gateway,
    ):
        await self._subscribe(client, auth_headers, webhook_signer)

        response = await client.post(
            "/v1/payments/subscription/cancel",
            json={"subscription_id": "sub_0001"},
            headers=auth_headers("student_b"),
        )

        assert response.status_code == 403
        assert mock_payment_gateway.canceled_subscriptions == []


# =============================================================================
# Product Catalog Tests
# =============================================================================

class TestProducts:
    """Tests for GET /v1/payments/products endpoint."""

    @pytest.mark.asyncio
    async def test_all_products_are_public(
        self,
        client: AsyncClient,
    ):
        response = await client.get("/v1/payments/products")

        assert response.status_code == 200
        assert sorted(p["name"] for p in response.json()) == ["P2", "P3", "Vibe"]

    @pytest.mark.asyncio
    async def test_products_filtered_by_mode(
        self,
        client: AsyncClient,
    ):
        response = await client.get("/v1/payments/products", params={"mode": "subscription"})

        products = response.json()
        assert [p["name"] for p in products] == ["Vibe"]
        assert products[0]["price_id"] == VIBE_PRICE_ID
        assert products[0]["popular"] is True

    @pytest.mark.asyncio
    async def test_unknown_mode_is_rejected(
        self,
        client: AsyncClient,
    ):
        response = await client.get("/v1/payments/products", params={"mode": "lifetime"})

        assert response.status_code == 422
