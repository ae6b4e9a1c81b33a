"""Shared lookup of the Stripe customer backing a profile."""

import structlog

from src.domain.entities import Customer, Profile
from src.domain.interfaces import BillingRepository, PaymentGateway

logger = structlog.get_logger(__name__)


async def get_or_create_customer(
    billing_repository: BillingRepository,
    gateway: PaymentGateway,
    profile: Profile,
) -> str:
    """
    Return the user's Stripe customer ID, creating the customer on first use.

    Raises:
        PaymentGatewayException: If Stripe rejects the customer
    """
    customer = await billing_repository.get_customer_by_user(profile.id)
    if customer is not None:
        return customer.stripe_customer_id

    stripe_customer_id = await gateway.create_customer(
        user_id=profile.id,
        email=profile.email,
        name=profile.name,
    )
    await billing_repository.save_customer(
        Customer(user_id=profile.id, stripe_customer_id=stripe_customer_id)
    )
    logger.info("customer_linked", user_id=profile.id, customer_id=stripe_customer_id)

    return stripe_customer_id
