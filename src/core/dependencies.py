"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.security import AuthenticatedUser, get_current_user
from src.domain.entities import Profile
from src.domain.interfaces import GenerativeAIClient, PaymentGateway
from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import (
    PostgresAgreementRepository,
    PostgresBillingRepository,
    PostgresLoanRepository,
    PostgresProfileRepository,
    PostgresVerificationRepository,
    PostgresWalletRepository,
)
from src.infrastructure.clients import GeminiClient, StripePaymentGateway
from src.application.services import (
    AgreementService,
    ChatService,
    LoanService,
    PaymentService,
    ProfileService,
    RepaymentService,
    VerificationService,
    WalletService,
)
from src.service.ai import AIAssistant


# Repository dependencies
async def get_profile_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresProfileRepository:
    """Get a ProfileRepository instance."""
    return PostgresProfileRepository(session)


async def get_wallet_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresWalletRepository:
    """Get a WalletRepository instance."""
    return PostgresWalletRepository(session)


async def get_loan_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresLoanRepository:
    """Get a LoanRepository instance."""
    return PostgresLoanRepository(session)


async def get_agreement_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresAgreementRepository:
    """Get an AgreementRepository instance."""
    return PostgresAgreementRepository(session)


async def get_verification_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresVerificationRepository:
    """Get a VerificationRepository instance."""
    return PostgresVerificationRepository(session)


async def get_billing_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresBillingRepository:
    """Get a BillingRepository instance."""
    return PostgresBillingRepository(session)


# External client dependencies
@lru_cache
def get_ai_client() -> GenerativeAIClient:
    """Get the shared Gemini client."""
    return GeminiClient()


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    """Get the shared Stripe gateway."""
    return StripePaymentGateway()


def get_assistant(
    client: Annotated[GenerativeAIClient, Depends(get_ai_client)],
) -> AIAssistant:
    """Get an AIAssistant over the configured AI client."""
    return AIAssistant(client)


# Service dependencies
async def get_profile_service(
    profile_repo: Annotated[PostgresProfileRepository, Depends(get_profile_repository)],
    verification_repo: Annotated[
        PostgresVerificationRepository, Depends(get_verification_repository)
    ],
) -> ProfileService:
    """Get a ProfileService instance."""
    return ProfileService(
        profile_repository=profile_repo,
        verification_repository=verification_repo,
    )


async def get_current_profile(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
) -> Profile:
    """Resolve the caller's profile, creating it on first use."""
    return await profile_service.ensure_profile(user.id, user.email, user.user_metadata)


async def get_wallet_service(
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
    billing_repo: Annotated[PostgresBillingRepository, Depends(get_billing_repository)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> WalletService:
    """Get a WalletService instance with all dependencies."""
    return WalletService(
        wallet_repository=wallet_repo,
        billing_repository=billing_repo,
        payment_gateway=gateway,
        currency=settings.wallet_currency,
        min_top_up_paise=settings.min_top_up_paise,
    )


async def get_loan_service(
    loan_repo: Annotated[PostgresLoanRepository, Depends(get_loan_repository)],
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
    profile_repo: Annotated[PostgresProfileRepository, Depends(get_profile_repository)],
    agreement_repo: Annotated[PostgresAgreementRepository, Depends(get_agreement_repository)],
    verification_repo: Annotated[
        PostgresVerificationRepository, Depends(get_verification_repository)
    ],
    assistant: Annotated[AIAssistant, Depends(get_assistant)],
) -> LoanService:
    """Get a LoanService instance with all dependencies."""
    return LoanService(
        loan_repository=loan_repo,
        wallet_repository=wallet_repo,
        profile_repository=profile_repo,
        agreement_repository=agreement_repo,
        verification_repository=verification_repo,
        assistant=assistant,
        currency=settings.wallet_currency,
    )


async def get_repayment_service(
    loan_repo: Annotated[PostgresLoanRepository, Depends(get_loan_repository)],
    wallet_repo: Annotated[PostgresWalletRepository, Depends(get_wallet_repository)],
    profile_repo: Annotated[PostgresProfileRepository, Depends(get_profile_repository)],
    agreement_repo: Annotated[PostgresAgreementRepository, Depends(get_agreement_repository)],
) -> RepaymentService:
    """Get a RepaymentService instance with all dependencies."""
    return RepaymentService(
        loan_repository=loan_repo,
        wallet_repository=wallet_repo,
        profile_repository=profile_repo,
        agreement_repository=agreement_repo,
        currency=settings.wallet_currency,
    )


async def get_verification_service(
    verification_repo: Annotated[
        PostgresVerificationRepository, Depends(get_verification_repository)
    ],
    profile_repo: Annotated[PostgresProfileRepository, Depends(get_profile_repository)],
    assistant: Annotated[AIAssistant, Depends(get_assistant)],
) -> VerificationService:
    """Get a VerificationService instance."""
    return VerificationService(
        verification_repository=verification_repo,
        profile_repository=profile_repo,
        assistant=assistant,
    )


async def get_agreement_service(
    agreement_repo: Annotated[PostgresAgreementRepository, Depends(get_agreement_repository)],
) -> AgreementService:
    """Get an AgreementService instance."""
    return AgreementService(agreement_repository=agreement_repo)


async def get_payment_service(
    billing_repo: Annotated[PostgresBillingRepository, Depends(get_billing_repository)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> PaymentService:
    """Get a PaymentService instance."""
    return PaymentService(billing_repository=billing_repo, payment_gateway=gateway)


async def get_chat_service(
    assistant: Annotated[AIAssistant, Depends(get_assistant)],
) -> ChatService:
    """Get a ChatService instance."""
    return ChatService(assistant=assistant)
