"""
Unit Tests for the external service clients.

These tests verify:
1. GeminiClient request shape, retries and error mapping
2. Demo mode when no Gemini key is configured
3. StripePaymentGateway parameter mapping and error handling
4. Stripe webhook signature checks and subscription mapping
5. Access token verification and the JWT secret setting
6. Product catalog lookups
"""

import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import stripe
from jose import jwt
from pydantic import ValidationError

from src.core.config import PLACEHOLDER_JWT_SECRET, Settings, settings
from src.core.security import decode_access_token
from src.domain.exceptions import (
    AIServiceException,
    AIServiceTimeoutException,
    AuthenticationException,
    PaymentGatewayException,
    WebhookSignatureException,
)
from src.infrastructure.clients import GeminiClient, StripePaymentGateway
from src.infrastructure.clients.stripe_gateway import subscription_from_stripe
from src.service.billing import (
    ProductMode,
    get_product_by_id,
    get_product_by_price_id,
    get_products,
)

WEBHOOK_SECRET = "whsec_unit_secret"
PARTS = [{"text": "Please respond to the user's message: hello"}]


def gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": text}]}}]},
    )


def make_gemini(handler, max_retries: int = 3, api_key: str = "test-key") -> GeminiClient:
    return GeminiClient(
        api_key=api_key,
        base_url="https://gemini.test/v1beta/",
        model="gemini-test",
        timeout=5,
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def backoff(monkeypatch) -> AsyncMock:
    """Replace the retry sleep so tests don't wait."""
    sleep = AsyncMock()
    monkeypatch.setattr("src.infrastructure.clients.gemini_client.asyncio.sleep", sleep)
    return sleep


# =============================================================================
# Gemini Client Tests
# =============================================================================

class TestGeminiClient:
    """Tests for GeminiClient.generate()."""

    @pytest.mark.asyncio
    async def test_returns_first_candidate_text(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return gemini_reply("Hello from Gemini")

        reply = await make_gemini(handler).generate(PARTS, temperature=0.2)

        assert reply == "Hello from Gemini"
        assert len(requests) == 1

        request = requests[0]
        assert request.url.path == "/v1beta/models/gemini-test:generateContent"
        assert request.url.params["key"] == "test-key"

        body = json.loads(request.content)
        assert body["contents"] == [{"role": "user", "parts": PARTS}]
        assert body["generationConfig"]["temperature"] == 0.2
        assert len(body["safetySettings"]) == 4

    @pytest.mark.asyncio
    async def test_retries_server_errors_with_backoff(self, backoff):
        responses = [
            httpx.Response(503),
            httpx.Response(429),
            gemini_reply("Recovered"),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        reply = await make_gemini(handler).generate(PARTS)

        assert reply == "Recovered"
        assert [call.args[0] for call in backoff.await_args_list] == [0.1, 0.2]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, backoff):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(500)

        with pytest.raises(AIServiceException) as exc_info:
            await make_gemini(handler).generate(PARTS)

        assert exc_info.value.status_code == 500
        assert len(attempts) == 3
        assert backoff.await_count == 2

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, backoff):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(400, json={"error": {"message": "bad request"}})

        with pytest.raises(AIServiceException) as exc_info:
            await make_gemini(handler).generate(PARTS)

        assert exc_info.value.status_code == 400
        assert len(attempts) == 1
        backoff.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(AIServiceTimeoutException) as exc_info:
            await make_gemini(handler, max_retries=1).generate(PARTS)

        assert exc_info.value.code == "AI_SERVICE_TIMEOUT"

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AIServiceException, match="Gemini unreachable"):
            await make_gemini(handler, max_retries=1).generate(PARTS)

    @pytest.mark.asyncio
    async def test_malformed_reply(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"candidates": []})

        with pytest.raises(AIServiceException, match="Invalid response format"):
            await make_gemini(handler).generate(PARTS)

    @pytest.mark.asyncio
    async def test_missing_text_is_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{}]}}]},
            )

        assert await make_gemini(handler).generate(PARTS) == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", ["", "your_gemini_api_key_here"])
    async def test_demo_mode_without_key(self, api_key):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("demo mode must not call Gemini")

        gemini = make_gemini(handler, api_key=api_key)

        assert gemini.is_configured is False
        assert (await gemini.generate(PARTS)).startswith("Hello! Welcome to Vibe!")


# =============================================================================
# Stripe Gateway Tests
# =============================================================================

@pytest.fixture
def stripe_sdk() -> MagicMock:
    sdk = MagicMock()
    sdk.customers.create_async = AsyncMock(return_value=MagicMock(id="cus_123"))
    sdk.payment_intents.create_async = AsyncMock(
        return_value={
            "id": "pi_123",
            "status": "requires_payment_method",
            "amount": 50000,
            "currency": "inr",
            "client_secret": "pi_123_secret_abc",
            "customer": "cus_123",
            "metadata": {"supabase_user_id": "student_a"},
        }
    )
    return sdk


class TestStripePaymentGateway:
    """Tests for StripePaymentGateway with a stubbed SDK client."""

    @pytest.mark.asyncio
    async def test_create_customer(self, stripe_sdk):
        gateway = StripePaymentGateway(api_key="sk_test", client=stripe_sdk)

        customer_id = await gateway.create_customer("student_a", "a@example.edu", "Asha")

        assert customer_id == "cus_123"
        stripe_sdk.customers.create_async.assert_awaited_once_with(
            params={
                "email": "a@example.edu",
                "metadata": {"supabase_user_id": "student_a"},
                "name": "Asha",
            }
        )

    @pytest.mark.asyncio
    async def test_create_payment_intent(self, stripe_sdk):
        gateway = StripePaymentGateway(api_key="sk_test", client=stripe_sdk)

        intent = await gateway.create_payment_intent(
            amount=50000,
            currency="INR",
            customer_id="cus_123",
            metadata={"supabase_user_id": "student_a"},
        )

        assert intent.id == "pi_123"
        assert intent.client_secret == "pi_123_secret_abc"
        assert intent.amount_received == 0
        assert intent.customer_id == "cus_123"

        params = stripe_sdk.payment_intents.create_async.await_args.kwargs["params"]
        assert params["currency"] == "inr"
        assert params["automatic_payment_methods"] == {"enabled": True}
        assert "description" not in params

    @pytest.mark.asyncio
    async def test_sdk_errors_become_gateway_errors(self, stripe_sdk):
        stripe_sdk.customers.create_async.side_effect = stripe.APIConnectionError(
            "Network unreachable"
        )
        gateway = StripePaymentGateway(api_key="sk_test", client=stripe_sdk)

        with pytest.raises(PaymentGatewayException) as exc_info:
            await gateway.create_customer("student_a", "a@example.edu")

        assert exc_info.value.code == "PAYMENT_GATEWAY_ERROR"
        assert exc_info.value.operation == "create_customer"

    @pytest.mark.asyncio
    async def test_cancel_subscription(self, stripe_sdk):
        stripe_sdk.subscriptions.update_async = AsyncMock(
            return_value={
                "id": "sub_123",
                "status": "active",
                "customer": "cus_123",
                "cancel_at_period_end": True,
                "current_period_end": 1896134400,
            }
        )
        gateway = StripePaymentGateway(api_key="sk_test", client=stripe_sdk)

        update = await gateway.cancel_subscription_at_period_end("sub_123")

        assert update.cancel_at_period_end is True
        stripe_sdk.subscriptions.update_async.assert_awaited_once_with(
            "sub_123",
            params={"cancel_at_period_end": True},
        )


# =============================================================================
# Stripe Webhook Tests
# =============================================================================

def sign(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


class TestWebhookEvents:
    """Tests for construct_webhook_event() and subscription_from_stripe()."""

    def make_gateway(self) -> StripePaymentGateway:
        return StripePaymentGateway(
            api_key="sk_test",
            webhook_secret=WEBHOOK_SECRET,
            client=MagicMock(),
        )

    def test_payment_event(self):
        payload = json.dumps({
            "id": "evt_1",
            "object": "event",
            "type": "payment_intent.succeeded",
            "data": {"object": {"id": "pi_123", "object": "payment_intent"}},
        }).encode("utf-8")

        event = self.make_gateway().construct_webhook_event(payload, sign(payload))

        assert event.id == "evt_1"
        assert event.type == "payment_intent.succeeded"
        assert event.data_object["id"] == "pi_123"
        assert event.subscription is None

    def test_subscription_event(self):
        payload = json.dumps({
            "id": "evt_2",
            "object": "event",
            "type": "customer.subscription.updated",
            "data": {"object": {"id": "sub_123", "status": "past_due", "customer": "cus_123"}},
        }).encode("utf-8")

        event = self.make_gateway().construct_webhook_event(payload, sign(payload))

        assert event.subscription.id == "sub_123"
        assert event.subscription.status == "past_due"

    def test_wrong_secret_is_rejected(self):
        payload = b'{"id": "evt_3", "object": "event", "type": "ping"}'

        with pytest.raises(WebhookSignatureException):
            self.make_gateway().construct_webhook_event(payload, sign(payload, "whsec_other"))

    def test_empty_secret_rejects_everything(self):
        gateway = StripePaymentGateway(api_key="sk_test", webhook_secret="", client=MagicMock())
        payload = json.dumps({
            "id": "evt_forged",
            "object": "event",
            "type": "payment_intent.succeeded",
            "data": {"object": {"id": "pi_123"}},
        }).encode("utf-8")

        with pytest.raises(WebhookSignatureException, match="not configured"):
            gateway.construct_webhook_event(payload, sign(payload, ""))

    def test_tampered_payload_is_rejected(self):
        payload = b'{"id": "evt_4", "object": "event", "type": "ping"}'
        signature = sign(payload)

        with pytest.raises(WebhookSignatureException):
            self.make_gateway().construct_webhook_event(
                payload.replace(b"ping", b"pong"),
                signature,
            )

    def test_subscription_mapping(self):
        update = subscription_from_stripe({
            "id": "sub_123",
            "status": "active",
            "customer": {"id": "cus_123", "object": "customer"},
            "items": {"data": [{"price": {"id": "price_abc"}}]},
            "current_period_start": 1893456000,
            "current_period_end": 1896134400,
        })

        assert update.customer_id == "cus_123"
        assert update.price_id == "price_abc"
        assert update.current_period_start == datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert update.current_period_end == datetime(2030, 2, 1, tzinfo=timezone.utc)
        assert update.cancel_at_period_end is False

    def test_subscription_mapping_defaults(self):
        update = subscription_from_stripe({"id": "sub_123"})

        assert update.status == "incomplete"
        assert update.price_id is None
        assert update.current_period_end is None


# =============================================================================
# Access Token Tests
# =============================================================================

def make_claims(**overrides):
    claims = {
        "sub": "student_a",
        "email": "a@example.edu",
        "aud": settings.supabase_jwt_audience,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        "user_metadata": {"name": "Asha"},
    }
    claims.update(overrides)
    return claims


def encode(claims, secret: str | None = None) -> str:
    return jwt.encode(
        claims,
        secret or settings.supabase_jwt_secret,
        algorithm=settings.supabase_jwt_algorithm,
    )


class TestAccessTokens:
    """Tests for decode_access_token()."""

    def test_valid_token(self):
        user = decode_access_token(encode(make_claims()))

        assert user.id == "student_a"
        assert user.email == "a@example.edu"
        assert user.user_metadata == {"name": "Asha"}

    def test_expired_token(self):
        token = encode(make_claims(exp=datetime.now(timezone.utc) - timedelta(minutes=1)))

        with pytest.raises(AuthenticationException, match="Token has expired"):
            decode_access_token(token)

    @pytest.mark.parametrize(
        "token",
        [
            encode(make_claims(aud="anon")),
            encode(make_claims(), secret="some-other-secret-with-enough-length"),
            encode(make_claims(sub="")),
            "not-a-jwt",
        ],
    )
    def test_invalid_tokens(self, token):
        with pytest.raises(AuthenticationException, match="Invalid authentication token"):
            decode_access_token(token)

    def test_unset_secret_rejects_every_token(self, monkeypatch):
        token = encode(make_claims())
        monkeypatch.setattr(settings, "supabase_jwt_secret", "")

        with pytest.raises(AuthenticationException, match="not configured"):
            decode_access_token(token)

    @pytest.mark.asyncio
    async def test_app_refuses_to_start_without_secret(self, monkeypatch):
        from src.main import app, lifespan

        monkeypatch.setattr(settings, "supabase_jwt_secret", "")

        with pytest.raises(RuntimeError, match="SUPABASE_JWT_SECRET"):
            async with lifespan(app):
                pass


class TestJwtSecretSetting:
    """Tests for the supabase_jwt_secret setting."""

    def test_placeholder_secret_is_refused(self):
        with pytest.raises(ValidationError, match="public Supabase development secret"):
            Settings(supabase_jwt_secret=PLACEHOLDER_JWT_SECRET)

    def test_secret_has_no_default(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_JWT_SECRET", raising=False)

        assert Settings(_env_file=None).supabase_jwt_secret == ""


# =============================================================================
# Product Catalog Tests
# =============================================================================

class TestProducts:
    """Tests for the product catalog lookups."""

    def test_filter_by_mode(self):
        assert [p.name for p in get_products(ProductMode.PAYMENT)] == ["P3", "P2"]
        assert [p.name for p in get_products(ProductMode.SUBSCRIPTION)] == ["Vibe"]
        assert len(get_products()) == 3

    def test_lookup_by_price(self):
        product = get_product_by_price_id("price_1RfIzoG3rwHz1Z4E29SKAJt4")

        assert product.name == "Vibe"
        assert product.popular is True

    def test_lookup_by_id(self):
        assert get_product_by_id("prod_SanwoH3JZ835rh").price == 1000.00

    def test_unknown_lookups(self):
        assert get_product_by_price_id("price_missing") is None
        assert get_product_by_id("prod_missing") is None
