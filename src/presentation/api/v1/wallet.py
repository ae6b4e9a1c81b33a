"""Wallet API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import TopUpRequest, WithdrawalRequest
from src.application.services import WalletService
from src.core.dependencies import get_current_profile, get_wallet_service
from src.domain.entities import Profile
from src.presentation.schemas import (
    ConfirmTopUpRequestSchema,
    ErrorResponseSchema,
    TopUpRequestSchema,
    TopUpResponseSchema,
    WalletResponseSchema,
    WithdrawalRequestSchema,
)
from src.service.pricing import rupees_to_paise

wallet_router = APIRouter(
    prefix="/wallet",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@wallet_router.get(
    "",
    response_model=WalletResponseSchema,
    summary="Get Wallet",
    description="Returns the caller's INR wallet with its most recent ledger rows.",
)
async def get_wallet(
    profile: Annotated[Profile, Depends(get_current_profile)],
    wallet_service: Annotated[WalletService, Depends(get_wallet_service)],
) -> WalletResponseSchema:
    response = await wallet_service.get_wallet(profile.id)
    return WalletResponseSchema.model_validate(response)


@wallet_router.post(
    "/top-ups",
    response_model=TopUpResponseSchema,
    summary="Start Wallet Top-up",
    description="""
    Create a Stripe PaymentIntent for adding money to the wallet.

    The wallet is only credited once the payment is confirmed.
    """,
    responses={
        502: {"model": ErrorResponseSchema, "description": "Stripe unavailable"},
    },
)
async def create_top_up(
    request: TopUpRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    wallet_service: Annotated[WalletService, Depends(get_wallet_service)],
) -> TopUpResponseSchema:
    dto = TopUpRequest(
        user_id=profile.id,
        amount_paise=rupees_to_paise(request.amount),
        currency=request.currency,
    )
    response = await wallet_service.create_top_up(dto, profile)

    return TopUpResponseSchema(
        client_secret=response.client_secret,
        payment_intent_id=response.payment_intent_id,
    )


@wallet_router.post(
    "/top-ups/confirm",
    response_model=WalletResponseSchema,
    summary="Confirm Wallet Top-up",
    description="""
    Verify a succeeded PaymentIntent with Stripe and credit the wallet.

    Each PaymentIntent can be credited once.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Payment already processed"},
        502: {"model": ErrorResponseSchema, "description": "Stripe unavailable"},
    },
)
async def confirm_top_up(
    request: ConfirmTopUpRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    wallet_service: Annotated[WalletService, Depends(get_wallet_service)],
) -> WalletResponseSchema:
    response = await wallet_service.confirm_top_up(profile.id, request.payment_intent_id)
    return WalletResponseSchema.model_validate(response)


@wallet_router.post(
    "/withdrawals",
    response_model=WalletResponseSchema,
    summary="Withdraw From Wallet",
    description="Debit the wallet for a transfer to the given bank account.",
    responses={
        402: {"model": ErrorResponseSchema, "description": "Insufficient funds"},
        404: {"model": ErrorResponseSchema, "description": "Wallet not found"},
    },
)
async def withdraw(
    request: WithdrawalRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    wallet_service: Annotated[WalletService, Depends(get_wallet_service)],
) -> WalletResponseSchema:
    dto = WithdrawalRequest(
        user_id=profile.id,
        amount_paise=rupees_to_paise(request.amount),
        bank_name=request.bank_name,
        account_number=request.account_number,
        ifsc_code=request.ifsc_code,
        account_holder_name=request.account_holder_name,
    )
    response = await wallet_service.withdraw(dto)
    return WalletResponseSchema.model_validate(response)
