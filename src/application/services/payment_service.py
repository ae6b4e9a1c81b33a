"""Payment service - Stripe purchases, webhooks and subscriptions."""

from typing import List, Optional

import structlog

from src.application.dto import (
    CancelSubscriptionResponse,
    CreatePaymentIntentRequest,
    OrderDTO,
    PaymentIntentResponse,
    SubscriptionDTO,
)
from src.domain.entities import Notification, Order, Profile, Subscription, WebhookEvent
from src.domain.exceptions import (
    ForbiddenException,
    InvalidRequestException,
    SubscriptionNotFoundException,
)
from src.domain.interfaces import BillingRepository, PaymentGateway
from src.service.billing import Product, ProductMode, get_product_by_price_id, get_products
from src.service.pricing import rupees_to_paise
from .customers import get_or_create_customer

logger = structlog.get_logger(__name__)


class PaymentService:
    """Application service for Stripe payment use cases."""

    def __init__(
        self,
        billing_repository: BillingRepository,
        payment_gateway: PaymentGateway,
    ):
        self._billing_repo = billing_repository
        self._gateway = payment_gateway

    async def create_payment_intent(
        self,
        request: CreatePaymentIntentRequest,
        profile: Profile,
    ) -> PaymentIntentResponse:
        """
        Start a one-off purchase and record it as an order.

        Raises:
            InvalidRequestException: If request validation fails
            PaymentGatewayException: If Stripe rejects the request
        """
        errors = request.validate()
        if errors:
            raise InvalidRequestException("; ".join(errors))

        customer_id = await get_or_create_customer(self._billing_repo, self._gateway, profile)

        metadata = {"supabase_user_id": profile.id}
        if request.product_name:
            metadata["product_name"] = request.product_name

        intent = await self._gateway.create_payment_intent(
            amount=rupees_to_paise(request.amount),
            currency=request.currency,
            customer_id=customer_id,
            metadata=metadata,
        )

        await self._billing_repo.save_order(
            Order(
                user_id=profile.id,
                stripe_payment_intent_id=intent.id,
                amount=request.amount,
                currency=request.currency.lower(),
                status=intent.status,
                product_name=request.product_name,
            )
        )

        logger.info(
            "payment_intent_created",
            user_id=profile.id,
            payment_intent_id=intent.id,
            product_name=request.product_name,
        )

        return PaymentIntentResponse(
            client_secret=intent.client_secret or "",
            payment_intent_id=intent.id,
        )

    async def handle_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify and apply a Stripe webhook event.

        Raises:
            WebhookSignatureException: If the signature doesn't verify
        """
        event = self._gateway.construct_webhook_event(payload, signature)
        log = logger.bind(event_id=event.id, event_type=event.type)
        log.info("stripe_webhook_received")

        if event.type == "payment_intent.succeeded":
            await self._on_payment_succeeded(event)
        elif event.type == "payment_intent.payment_failed":
            await self._billing_repo.update_order_status(event.data_object["id"], "failed")
        elif event.type in ("customer.subscription.created", "customer.subscription.updated"):
            await self._on_subscription_changed(event)
        elif event.type == "customer.subscription.deleted":
            await self._on_subscription_deleted(event)
        else:
            log.info("stripe_webhook_unhandled")

        return event

    async def cancel_subscription(
        self,
        user_id: str,
        subscription_id: Optional[str],
    ) -> CancelSubscriptionResponse:
        """
        Cancel a subscription at the end of its billing period.

        Raises:
            InvalidRequestException: If no subscription ID is given
            SubscriptionNotFoundException: If the subscription is unknown
            ForbiddenException: If the subscription belongs to someone else
        """
        if not subscription_id:
            raise InvalidRequestException("Subscription ID is required")

        subscription = await self._billing_repo.get_subscription(subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundException(subscription_id)

        if subscription.user_id != user_id:
            raise ForbiddenException()

        update = await self._gateway.cancel_subscription_at_period_end(subscription_id)

        subscription.cancel_at_period_end = True
        if update.current_period_end is not None:
            subscription.current_period_end = update.current_period_end
        await self._billing_repo.upsert_subscription(subscription)

        logger.info(
            "subscription_cancel_scheduled",
            user_id=user_id,
            subscription_id=subscription_id,
        )

        period_end = subscription.current_period_end
        return CancelSubscriptionResponse(
            message="Subscription will be canceled at the end of the billing period",
            cancel_at_period_end=True,
            current_period_end=period_end.isoformat() if period_end else None,
        )

    async def list_orders(self, user_id: str) -> List[OrderDTO]:
        orders = await self._billing_repo.list_orders(user_id)
        return [OrderDTO.from_entity(order) for order in orders]

    async def get_subscription(self, user_id: str) -> Optional[SubscriptionDTO]:
        subscription = await self._billing_repo.get_subscription_for_user(user_id)
        if subscription is None:
            return None

        product = get_product_by_price_id(subscription.price_id) if subscription.price_id else None
        return SubscriptionDTO.from_entity(subscription, product.name if product else None)

    def list_products(self, mode: Optional[ProductMode] = None) -> List[Product]:
        return get_products(mode)

    async def _on_payment_succeeded(self, event: WebhookEvent) -> None:
        intent = event.data_object
        await self._billing_repo.update_order_status(intent["id"], "succeeded")

        metadata = intent.get("metadata") or {}
        user_id = metadata.get("supabase_user_id")
        if not user_id:
            return

        if metadata.get("purpose") == "wallet_topup":
            item = "your wallet top-up"
        else:
            item = metadata.get("product_name") or "your order"

        await self._billing_repo.save_notification(
            Notification(
                user_id=user_id,
                type="payment_success",
                title="Payment Successful",
                message=f"Your payment for {item} was successful!",
            )
        )

    async def _on_subscription_changed(self, event: WebhookEvent) -> None:
        update = event.subscription
        if update is None or not update.customer_id:
            logger.warning("stripe_subscription_event_incomplete", event_id=event.id)
            return

        customer = await self._billing_repo.get_customer_by_stripe_id(update.customer_id)
        if customer is None:
            logger.warning(
                "stripe_subscription_customer_unknown",
                event_id=event.id,
                customer_id=update.customer_id,
            )
            return

        await self._billing_repo.upsert_subscription(
            Subscription(
                user_id=customer.user_id,
                stripe_subscription_id=update.id,
                status=update.status,
                price_id=update.price_id,
                current_period_start=update.current_period_start,
                current_period_end=update.current_period_end,
                cancel_at_period_end=update.cancel_at_period_end,
            )
        )

    async def _on_subscription_deleted(self, event: WebhookEvent) -> None:
        subscription = await self._billing_repo.get_subscription(event.data_object["id"])
        if subscription is None:
            return

        subscription.status = "canceled"
        await self._billing_repo.upsert_subscription(subscription)
