"""PostgreSQL implementation of ProfileRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Profile, ProfileStats
from src.domain.interfaces import ProfileRepository
from src.infrastructure.database.models import (
    LoanFundingModel,
    LoanRepaymentModel,
    LoanRequestModel,
    ProfileModel,
)


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL-backed profile repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[Profile]:
        model = await self._session.get(ProfileModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    async def save(self, profile: Profile) -> Profile:
        model = await self._session.get(ProfileModel, profile.id)
        if model is None:
            model = ProfileModel(id=profile.id, created_at=profile.created_at)
            self._session.add(model)

        model.name = profile.name
        model.email = profile.email
        model.phone = profile.phone
        model.avatar_url = profile.avatar_url
        model.is_verified = profile.is_verified
        model.identity_verified = profile.identity_verified
        model.identity_verified_at = profile.identity_verified_at
        model.language = profile.language
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return profile

    async def get_stats(self, user_id: str) -> ProfileStats:
        loans_taken = await self._session.scalar(
            select(func.count(LoanRequestModel.id)).where(
                LoanRequestModel.borrower_id == user_id
            )
        )
        repayments = await self._session.scalar(
            select(func.count(LoanRepaymentModel.id)).where(
                LoanRepaymentModel.borrower_id == user_id,
                LoanRepaymentModel.status == "completed",
            )
        )
        loans_given = await self._session.scalar(
            select(func.count(distinct(LoanFundingModel.loan_id))).where(
                LoanFundingModel.lender_id == user_id
            )
        )

        return ProfileStats(
            total_loans_taken=loans_taken or 0,
            successful_repayments=repayments or 0,
            total_loans_given=loans_given or 0,
        )

    def _to_entity(self, model: ProfileModel) -> Profile:
        return Profile(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            avatar_url=model.avatar_url,
            is_verified=model.is_verified,
            identity_verified=model.identity_verified,
            identity_verified_at=model.identity_verified_at,
            language=model.language,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
