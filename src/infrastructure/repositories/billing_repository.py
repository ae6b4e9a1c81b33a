"""PostgreSQL implementation of BillingRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Customer, Notification, Order, Subscription
from src.domain.interfaces import BillingRepository
from src.infrastructure.database.models import (
    NotificationModel,
    StripeCustomerModel,
    StripeOrderModel,
    StripeSubscriptionModel,
)


class PostgresBillingRepository(BillingRepository):
    """PostgreSQL-backed store for Stripe customers, orders and subscriptions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_customer_by_user(self, user_id: str) -> Optional[Customer]:
        model = await self._session.get(StripeCustomerModel, user_id)
        if model is None:
            return None
        return self._to_customer(model)

    async def get_customer_by_stripe_id(
        self,
        stripe_customer_id: str,
    ) -> Optional[Customer]:
        stmt = select(StripeCustomerModel).where(
            StripeCustomerModel.customer_id == stripe_customer_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_customer(model)

    async def save_customer(self, customer: Customer) -> Customer:
        self._session.add(
            StripeCustomerModel(
                user_id=customer.user_id,
                customer_id=customer.stripe_customer_id,
                created_at=customer.created_at,
            )
        )
        await self._session.flush()
        return customer

    async def save_order(self, order: Order) -> Order:
        self._session.add(
            StripeOrderModel(
                id=str(order.id),
                user_id=order.user_id,
                payment_intent_id=order.stripe_payment_intent_id,
                amount=order.amount,
                currency=order.currency,
                status=order.status,
                product_name=order.product_name,
                created_at=order.created_at,
            )
        )
        await self._session.flush()
        return order

    async def update_order_status(self, payment_intent_id: str, status: str) -> bool:
        stmt = (
            update(StripeOrderModel)
            .where(StripeOrderModel.payment_intent_id == payment_intent_id)
            .values(status=status)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def list_orders(self, user_id: str) -> List[Order]:
        stmt = (
            select(StripeOrderModel)
            .where(StripeOrderModel.user_id == user_id)
            .order_by(StripeOrderModel.created_at.desc())
        )
        result = await self._session.execute(stmt)

        return [
            Order(
                id=UUID(model.id),
                user_id=model.user_id,
                stripe_payment_intent_id=model.payment_intent_id,
                amount=model.amount,
                currency=model.currency,
                status=model.status,
                product_name=model.product_name,
                created_at=model.created_at,
            )
            for model in result.scalars().all()
        ]

    async def upsert_subscription(self, subscription: Subscription) -> Subscription:
        model = await self._session.get(
            StripeSubscriptionModel,
            subscription.stripe_subscription_id,
        )
        if model is None:
            model = StripeSubscriptionModel(
                subscription_id=subscription.stripe_subscription_id,
                user_id=subscription.user_id,
            )
            self._session.add(model)

        model.status = subscription.status
        model.price_id = subscription.price_id
        model.current_period_start = subscription.current_period_start
        model.current_period_end = subscription.current_period_end
        model.cancel_at_period_end = subscription.cancel_at_period_end
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return subscription

    async def get_subscription(
        self,
        stripe_subscription_id: str,
    ) -> Optional[Subscription]:
        model = await self._session.get(StripeSubscriptionModel, stripe_subscription_id)
        if model is None:
            return None
        return self._to_subscription(model)

    async def get_subscription_for_user(self, user_id: str) -> Optional[Subscription]:
        stmt = (
            select(StripeSubscriptionModel)
            .where(StripeSubscriptionModel.user_id == user_id)
            .order_by(StripeSubscriptionModel.updated_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_subscription(model)

    async def save_notification(self, notification: Notification) -> Notification:
        self._session.add(
            NotificationModel(
                id=str(notification.id),
                user_id=notification.user_id,
                type=notification.type,
                title=notification.title,
                message=notification.message,
                is_read=notification.is_read,
                created_at=notification.created_at,
            )
        )
        await self._session.flush()
        return notification

    def _to_customer(self, model: StripeCustomerModel) -> Customer:
        return Customer(
            user_id=model.user_id,
            stripe_customer_id=model.customer_id,
            created_at=model.created_at,
        )

    def _to_subscription(self, model: StripeSubscriptionModel) -> Subscription:
        return Subscription(
            user_id=model.user_id,
            stripe_subscription_id=model.subscription_id,
            status=model.status,
            price_id=model.price_id,
            current_period_start=model.current_period_start,
            current_period_end=model.current_period_end,
            cancel_at_period_end=model.cancel_at_period_end,
            updated_at=model.updated_at,
        )
