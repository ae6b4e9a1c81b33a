"""Stripe payment API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from src.application.dto import CreatePaymentIntentRequest
from src.application.services import PaymentService
from src.core.dependencies import get_current_profile, get_payment_service
from src.domain.entities import Profile
from src.presentation.schemas import (
    CancelSubscriptionRequestSchema,
    CancelSubscriptionResponseSchema,
    CreatePaymentIntentRequestSchema,
    ErrorResponseSchema,
    OrderSchema,
    PaymentIntentResponseSchema,
    ProductSchema,
    SubscriptionSchema,
    WebhookAckSchema,
)
from src.service.billing import ProductMode

payments_router = APIRouter(
    prefix="/payments",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


@payments_router.post(
    "/intents",
    response_model=PaymentIntentResponseSchema,
    summary="Create Payment Intent",
    description="Create a Stripe PaymentIntent for a product purchase and record the order.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
        502: {"model": ErrorResponseSchema, "description": "Stripe unavailable"},
    },
)
async def create_payment_intent(
    request: CreatePaymentIntentRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentIntentResponseSchema:
    dto = CreatePaymentIntentRequest(
        user_id=profile.id,
        amount=request.amount,
        currency=request.currency,
        product_name=request.product_name,
    )
    response = await payment_service.create_payment_intent(dto, profile)

    return PaymentIntentResponseSchema(
        client_secret=response.client_secret,
        payment_intent_id=response.payment_intent_id,
    )


@payments_router.post(
    "/webhook",
    response_model=WebhookAckSchema,
    summary="Stripe Webhook",
    description="""
    Receive Stripe events.

    The raw body is verified against the Stripe-Signature header before
    any event is applied.
    """,
)
async def stripe_webhook(
    http_request: Request,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    stripe_signature: Annotated[Optional[str], Header(alias="Stripe-Signature")] = None,
) -> WebhookAckSchema:
    payload = await http_request.body()
    await payment_service.handle_webhook(payload, stripe_signature or "")
    return WebhookAckSchema(received=True)


@payments_router.get(
    "/orders",
    response_model=list[OrderSchema],
    summary="List Orders",
    description="The caller's orders, newest first.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)
async def list_orders(
    profile: Annotated[Profile, Depends(get_current_profile)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> list[OrderSchema]:
    orders = await payment_service.list_orders(profile.id)
    return [OrderSchema.model_validate(order) for order in orders]


@payments_router.get(
    "/subscription",
    response_model=Optional[SubscriptionSchema],
    summary="Get Subscription",
    description="The caller's subscription, or null when they have none.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)
async def get_subscription(
    profile: Annotated[Profile, Depends(get_current_profile)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> Optional[SubscriptionSchema]:
    subscription = await payment_service.get_subscription(profile.id)
    if subscription is None:
        return None
    return SubscriptionSchema.model_validate(subscription)


@payments_router.post(
    "/subscription/cancel",
    response_model=CancelSubscriptionResponseSchema,
    summary="Cancel Subscription",
    description="Cancel the subscription at the end of the current billing period.",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
        403: {"model": ErrorResponseSchema, "description": "Subscription owned by another user"},
        404: {"model": ErrorResponseSchema, "description": "Subscription not found"},
    },
)
async def cancel_subscription(
    request: CancelSubscriptionRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> CancelSubscriptionResponseSchema:
    response = await payment_service.cancel_subscription(profile.id, request.subscription_id)
    return CancelSubscriptionResponseSchema.model_validate(response)


@payments_router.get(
    "/products",
    response_model=list[ProductSchema],
    summary="List Products",
    description="The product catalog, optionally filtered by payment mode.",
)
async def list_products(
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    mode: Annotated[
        Optional[ProductMode],
        Query(description="payment or subscription"),
    ] = None,
) -> list[ProductSchema]:
    return [ProductSchema.model_validate(p) for p in payment_service.list_products(mode)]
