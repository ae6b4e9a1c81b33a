"""PostgreSQL implementation of LoanRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domain.entities import (
    LoanFunding,
    LoanPurpose,
    LoanRepayment,
    LoanRequest,
    LoanStatus,
)
from src.domain.interfaces import LoanRepository
from src.infrastructure.database.models import (
    LoanFundingModel,
    LoanRepaymentModel,
    LoanRequestModel,
)


class PostgresLoanRepository(LoanRepository):
    """PostgreSQL-backed loan repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, loan: LoanRequest) -> LoanRequest:
        model = LoanRequestModel(
            id=str(loan.id),
            borrower_id=loan.borrower_id,
            title=loan.title,
            description=loan.description,
            amount_paise=loan.amount_paise,
            currency=loan.currency,
            interest_rate=loan.interest_rate,
            tenure_days=loan.tenure_days,
            purpose=loan.purpose.value,
            status=loan.status.value,
            total_funded_paise=loan.total_funded_paise,
            images=list(loan.images),
            medical_verified=loan.medical_verified,
            terms_accepted=loan.terms_accepted,
            terms_accepted_at=loan.terms_accepted_at,
            created_at=loan.created_at,
            updated_at=loan.updated_at,
        )

        self._session.add(model)
        await self._session.flush()

        return loan

    async def get_by_id(
        self,
        loan_id: UUID,
        for_update: bool = False,
    ) -> Optional[LoanRequest]:
        stmt = (
            select(LoanRequestModel)
            .options(
                selectinload(LoanRequestModel.fundings).joinedload(LoanFundingModel.lender)
            )
            .where(LoanRequestModel.id == str(loan_id))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=LoanRequestModel)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def list(
        self,
        status: Optional[LoanStatus] = None,
        borrower_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[LoanRequest]:
        stmt = (
            select(LoanRequestModel)
            .options(
                selectinload(LoanRequestModel.fundings).joinedload(LoanFundingModel.lender)
            )
            .order_by(LoanRequestModel.created_at.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        if status is not None:
            stmt = stmt.where(LoanRequestModel.status == status.value)
        if borrower_id is not None:
            stmt = stmt.where(LoanRequestModel.borrower_id == borrower_id)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def update(self, loan: LoanRequest) -> None:
        model = await self._session.get(LoanRequestModel, str(loan.id))
        if model is None:
            raise ValueError(f"Loan {loan.id} is not persisted")

        model.status = loan.status.value
        model.total_funded_paise = loan.total_funded_paise
        model.medical_verified = loan.medical_verified
        model.updated_at = datetime.utcnow()

        await self._session.flush()

    async def add_funding(self, funding: LoanFunding) -> LoanFunding:
        self._session.add(
            LoanFundingModel(
                id=str(funding.id),
                loan_id=str(funding.loan_id),
                lender_id=funding.lender_id,
                amount_paise=funding.amount_paise,
                funded_at=funding.funded_at,
            )
        )
        await self._session.flush()
        return funding

    async def save_repayment(self, repayment: LoanRepayment) -> LoanRepayment:
        self._session.add(
            LoanRepaymentModel(
                id=str(repayment.id),
                loan_id=str(repayment.loan_id),
                borrower_id=repayment.borrower_id,
                lender_id=repayment.lender_id,
                repayment_amount_paise=repayment.repayment_amount_paise,
                platform_fee_paise=repayment.platform_fee_paise,
                net_amount_to_lender_paise=repayment.net_amount_to_lender_paise,
                transaction_id=str(repayment.transaction_id),
                status=repayment.status,
                repaid_at=repayment.repaid_at,
            )
        )
        await self._session.flush()
        return repayment

    async def list_repayments(self, loan_id: UUID) -> List[LoanRepayment]:
        stmt = (
            select(LoanRepaymentModel)
            .where(LoanRepaymentModel.loan_id == str(loan_id))
            .order_by(LoanRepaymentModel.repaid_at)
        )
        result = await self._session.execute(stmt)

        return [
            LoanRepayment(
                id=UUID(model.id),
                loan_id=UUID(model.loan_id),
                borrower_id=model.borrower_id,
                lender_id=model.lender_id,
                repayment_amount_paise=model.repayment_amount_paise,
                platform_fee_paise=model.platform_fee_paise,
                net_amount_to_lender_paise=model.net_amount_to_lender_paise,
                transaction_id=UUID(model.transaction_id),
                status=model.status,
                repaid_at=model.repaid_at,
            )
            for model in result.scalars().all()
        ]

    def _to_entity(self, model: LoanRequestModel) -> LoanRequest:
        fundings = [
            LoanFunding(
                id=UUID(funding.id),
                loan_id=UUID(funding.loan_id),
                lender_id=funding.lender_id,
                amount_paise=funding.amount_paise,
                funded_at=funding.funded_at,
                lender_name=funding.lender.name if funding.lender else None,
                lender_email=funding.lender.email if funding.lender else None,
            )
            for funding in model.fundings
        ]

        return LoanRequest(
            id=UUID(model.id),
            borrower_id=model.borrower_id,
            title=model.title,
            description=model.description,
            amount_paise=model.amount_paise,
            currency=model.currency,
            interest_rate=model.interest_rate,
            tenure_days=model.tenure_days,
            purpose=LoanPurpose(model.purpose),
            status=LoanStatus(model.status),
            total_funded_paise=model.total_funded_paise,
            images=list(model.images or []),
            medical_verified=model.medical_verified,
            terms_accepted=model.terms_accepted,
            terms_accepted_at=model.terms_accepted_at,
            fundings=fundings,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
