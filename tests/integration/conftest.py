"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Mock Gemini client (demo replies by default, scriptable per test)
- Mock Stripe gateway that verifies webhook signatures like Stripe does
- Bearer token and wallet funding helpers
- In-memory database for testing
"""

import hashlib
import hmac
import time
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.config import settings
from src.core.dependencies import get_ai_client, get_payment_gateway
from src.domain.entities import PaymentIntent, SubscriptionUpdate, WebhookEvent
from src.domain.exceptions import AIServiceException, PaymentGatewayException
from src.domain.interfaces import GenerativeAIClient, PaymentGateway
from src.infrastructure.clients import StripePaymentGateway
from src.infrastructure.clients.gemini_demo import demo_response
from src.infrastructure.database import Base, get_db_session

WEBHOOK_SECRET = "whsec_test_secret"


# =============================================================================
# Mock Clients
# =============================================================================

class MockAIClient(GenerativeAIClient):
    """
    Mock Gemini client.

    Unconfigured, it answers like the real client in demo mode. Configured,
    it returns the scripted replies in order, then falls back to demo replies.
    """

    def __init__(
        self,
        configured: bool = False,
        replies: Optional[List[str]] = None,
        fail_mode: bool = False,
    ):
        self.configured = configured
        self.replies = list(replies or [])
        self.fail_mode = fail_mode
        self.calls: List[List[Dict[str, Any]]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def generate(
        self,
        parts: List[Dict[str, Any]],
        temperature: float = 0.7,
    ) -> str:
        self.calls.append(parts)

        if self.fail_mode:
            raise AIServiceException(message="Gemini API error: 500", status_code=500)

        if self.configured and self.replies:
            return self.replies.pop(0)

        return demo_response(parts)


class MockPaymentGateway(PaymentGateway):
    """
    In-memory Stripe.

    PaymentIntents are created in ``requires_payment_method`` and moved to
    ``succeeded`` with ``succeed``. Webhooks are verified by the real
    Stripe SDK against WEBHOOK_SECRET.
    """

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.customers: Dict[str, str] = {}  # customer_id -> user_id
        self.intents: Dict[str, PaymentIntent] = {}
        self.canceled_subscriptions: List[str] = []
        self._verifier = StripePaymentGateway(
            api_key="sk_test_unused",
            webhook_secret=WEBHOOK_SECRET,
        )

    async def create_customer(
        self,
        user_id: str,
        email: str,
        name: Optional[str] = None,
    ) -> str:
        if self.fail_mode:
            raise PaymentGatewayException("Stripe unavailable", operation="create_customer")

        customer_id = f"cus_{len(self.customers) + 1:04d}"
        self.customers[customer_id] = user_id
        return customer_id

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> PaymentIntent:
        if self.fail_mode:
            raise PaymentGatewayException(
                "Stripe unavailable",
                operation="create_payment_intent",
            )

        intent_id = f"pi_{len(self.intents) + 1:04d}"
        intent = PaymentIntent(
            id=intent_id,
            status="requires_payment_method",
            amount=amount,
            currency=currency.lower(),
            client_secret=f"{intent_id}_secret_test",
            customer_id=customer_id,
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        intent = self.intents.get(payment_intent_id)
        if intent is None:
            raise PaymentGatewayException(
                "No such payment_intent",
                operation="retrieve_payment_intent",
            )
        return intent

    async def cancel_subscription_at_period_end(
        self,
        subscription_id: str,
    ) -> SubscriptionUpdate:
        self.canceled_subscriptions.append(subscription_id)
        return SubscriptionUpdate(
            id=subscription_id,
            status="active",
            cancel_at_period_end=True,
            current_period_end=datetime(2030, 1, 31, tzinfo=timezone.utc),
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        return self._verifier.construct_webhook_event(payload, signature)

    def succeed(self, payment_intent_id: str, amount_received: Optional[int] = None) -> None:
        """Mark a PaymentIntent as paid, as Stripe would after checkout."""
        intent = self.intents[payment_intent_id]
        self.intents[payment_intent_id] = replace(
            intent,
            status="succeeded",
            amount_received=intent.amount if amount_received is None else amount_received,
        )


def sign_webhook(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def make_token(
    user_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Issue an access token shaped like Supabase's."""
    claims: Dict[str, Any] = {
        "sub": user_id,
        "email": email if email is not None else f"{user_id}@example.edu",
        "aud": settings.supabase_jwt_audience,
        "exp": datetime.now(timezone.utc) + expires_in,
        "user_metadata": {"name": name} if name else {},
    }
    return jwt.encode(
        claims,
        settings.supabase_jwt_secret,
        algorithm=settings.supabase_jwt_algorithm,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs work on SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_ai_client() -> MockAIClient:
    """Create an AI client answering with demo replies."""
    return MockAIClient()


@pytest.fixture
def mock_payment_gateway() -> MockPaymentGateway:
    """Create an in-memory Stripe gateway."""
    return MockPaymentGateway()


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_ai_client: MockAIClient,
    mock_payment_gateway: MockPaymentGateway,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database, one transaction per request
    - Mocks the Gemini client
    - Mocks the Stripe gateway
    """
    async def override_get_db_session():
        try:
            yield test_session
            await test_session.commit()
        except Exception:
            await test_session.rollback()
            raise

    def override_get_ai_client():
        return mock_ai_client

    def override_get_payment_gateway():
        return mock_payment_gateway

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_ai_client] = override_get_ai_client
    app.dependency_overrides[get_payment_gateway] = override_get_payment_gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Build Authorization headers for a user."""
    def _headers(
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, email=email, name=name)}"}

    return _headers


@pytest.fixture
def webhook_signer() -> Callable[..., str]:
    """Sign webhook payloads with the test endpoint secret."""
    return sign_webhook


@pytest.fixture
def fund_wallet(
    client: AsyncClient,
    mock_payment_gateway: MockPaymentGateway,
    auth_headers: Callable[..., Dict[str, str]],
) -> Callable[[str, float], Awaitable[Dict[str, Any]]]:
    """Top up a user's wallet through the Stripe flow."""
    async def _fund(user_id: str, amount: float) -> Dict[str, Any]:
        headers = auth_headers(user_id)
        top_up = await client.post(
            "/v1/wallet/top-ups",
            json={"amount": amount},
            headers=headers,
        )
        assert top_up.status_code == 200, top_up.text

        intent_id = top_up.json()["payment_intent_id"]
        mock_payment_gateway.succeed(intent_id)

        confirm = await client.post(
            "/v1/wallet/top-ups/confirm",
            json={"payment_intent_id": intent_id},
            headers=headers,
        )
        assert confirm.status_code == 200, confirm.text
        return confirm.json()

    return _fund


@pytest.fixture
def loan_request() -> Dict[str, Any]:
    """A valid education loan request body."""
    return {
        "title": "Semester fees for final year",
        "description": (
            "I need help covering the remaining tuition for my final semester "
            "of engineering college this term."
        ),
        "amount": 10000,
        "interest_rate": 10,
        "tenure_days": 365,
        "purpose": "education",
        "terms_accepted": True,
    }


@pytest.fixture
def create_loan(
    client: AsyncClient,
    auth_headers: Callable[..., Dict[str, str]],
    loan_request: Dict[str, Any],
) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Post a loan request as a borrower, with optional field overrides."""
    async def _create(borrower_id: str, **overrides: Any) -> Dict[str, Any]:
        response = await client.post(
            "/v1/loans",
            json={**loan_request, **overrides},
            headers=auth_headers(borrower_id),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
