"""Stripe implementation of PaymentGateway."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
import structlog

from src.core.config import settings
from src.core.metrics import record_stripe_failure
from src.domain.entities import PaymentIntent, SubscriptionUpdate, WebhookEvent
from src.domain.exceptions import PaymentGatewayException, WebhookSignatureException
from src.domain.interfaces import PaymentGateway

logger = structlog.get_logger(__name__)


def _timestamp(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def subscription_from_stripe(data: Dict[str, Any]) -> SubscriptionUpdate:
    """Map a Stripe subscription object (or webhook payload) to a SubscriptionUpdate."""
    items = (data.get("items") or {}).get("data") or []
    price = (items[0].get("price") or {}) if items else {}
    customer = data.get("customer")
    if isinstance(customer, dict):
        customer = customer.get("id")

    return SubscriptionUpdate(
        id=data["id"],
        status=data.get("status", "incomplete"),
        customer_id=customer,
        price_id=price.get("id"),
        current_period_start=_timestamp(data.get("current_period_start")),
        current_period_end=_timestamp(data.get("current_period_end")),
        cancel_at_period_end=bool(data.get("cancel_at_period_end", False)),
    )


class StripePaymentGateway(PaymentGateway):
    """
    Payment gateway backed by the Stripe API.

    Uses the SDK's async methods over its HTTPX transport. SDK errors are
    logged, counted and re-raised as PaymentGatewayException.
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        api_version: str | None = None,
        client: Optional[stripe.StripeClient] = None,
    ):
        self._api_key = api_key or settings.stripe_secret_key
        self._api_version = api_version or settings.stripe_api_version
        self._webhook_secret = (
            settings.stripe_webhook_secret if webhook_secret is None else webhook_secret
        )
        self._stripe_client = client

    @property
    def _client(self) -> stripe.StripeClient:
        if self._stripe_client is None:
            if not self._api_key:
                raise PaymentGatewayException("Stripe is not configured")
            self._stripe_client = stripe.StripeClient(
                self._api_key,
                stripe_version=self._api_version,
                http_client=stripe.HTTPXClient(),
            )
        return self._stripe_client

    async def create_customer(
        self,
        user_id: str,
        email: str,
        name: Optional[str] = None,
    ) -> str:
        params: Dict[str, Any] = {"email": email, "metadata": {"supabase_user_id": user_id}}
        if name:
            params["name"] = name

        try:
            customer = await self._client.customers.create_async(params=params)
        except stripe.StripeError as e:
            raise self._gateway_error("create_customer", e)

        logger.info("stripe_customer_created", user_id=user_id, customer_id=customer.id)
        return customer.id

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> PaymentIntent:
        params: Dict[str, Any] = {
            "amount": amount,
            "currency": currency.lower(),
            "customer": customer_id,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if description:
            params["description"] = description

        try:
            intent = await self._client.payment_intents.create_async(params=params)
        except stripe.StripeError as e:
            raise self._gateway_error("create_payment_intent", e)

        return self._to_payment_intent(intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            intent = await self._client.payment_intents.retrieve_async(payment_intent_id)
        except stripe.StripeError as e:
            raise self._gateway_error("retrieve_payment_intent", e)

        return self._to_payment_intent(intent)

    async def cancel_subscription_at_period_end(
        self,
        subscription_id: str,
    ) -> SubscriptionUpdate:
        try:
            subscription = await self._client.subscriptions.update_async(
                subscription_id,
                params={"cancel_at_period_end": True},
            )
        except stripe.StripeError as e:
            raise self._gateway_error("cancel_subscription", e)

        return subscription_from_stripe(subscription)

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify a webhook payload against the endpoint signing secret.

        Without a configured secret every event is rejected, since an empty
        HMAC key lets anyone sign a payload.

        Raises:
            WebhookSignatureException: If the secret is unset or the
                signature doesn't match
        """
        if not self._webhook_secret:
            logger.error("stripe_webhook_secret_not_configured")
            raise WebhookSignatureException("Webhook signing secret is not configured")

        try:
            stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("stripe_webhook_signature_invalid", error=str(e))
            raise WebhookSignatureException(f"Webhook signature verification failed: {e}")
        except ValueError as e:
            raise WebhookSignatureException(f"Invalid webhook payload: {e}")

        event = json.loads(payload)
        event_type = event.get("type", "")
        data_object = (event.get("data") or {}).get("object") or {}

        subscription = None
        if event_type.startswith("customer.subscription.") and data_object.get("id"):
            subscription = subscription_from_stripe(data_object)

        return WebhookEvent(
            id=event.get("id", ""),
            type=event_type,
            data_object=data_object,
            subscription=subscription,
        )

    def _to_payment_intent(self, intent: Any) -> PaymentIntent:
        customer = intent.get("customer")
        if isinstance(customer, dict):
            customer = customer.get("id")

        return PaymentIntent(
            id=intent["id"],
            status=intent["status"],
            amount=intent["amount"],
            currency=intent["currency"],
            client_secret=intent.get("client_secret"),
            amount_received=intent.get("amount_received") or 0,
            customer_id=customer,
            metadata=dict(intent.get("metadata") or {}),
        )

    def _gateway_error(self, operation: str, error: stripe.StripeError) -> PaymentGatewayException:
        record_stripe_failure(operation)
        logger.error(
            "stripe_request_failed",
            operation=operation,
            error=error.user_message or str(error),
            http_status=error.http_status,
        )
        return PaymentGatewayException(
            message=error.user_message or "Payment provider error",
            operation=operation,
        )
