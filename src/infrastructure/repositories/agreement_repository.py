"""PostgreSQL implementation of AgreementRepository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    AgreementSignature,
    AgreementStatus,
    AgreementType,
    LoanAgreement,
)
from src.domain.interfaces import AgreementRepository
from src.infrastructure.database.models import (
    AgreementSignatureModel,
    LoanAgreementModel,
)


class PostgresAgreementRepository(AgreementRepository):
    """PostgreSQL-backed agreement repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, agreement: LoanAgreement) -> LoanAgreement:
        model = await self._session.get(LoanAgreementModel, str(agreement.id))
        if model is None:
            self._session.add(self._to_model(agreement))
        else:
            model.status = agreement.status.value
            model.pdf_url = agreement.pdf_url
            model.signed_at = agreement.signed_at
            model.lender_id = agreement.lender_id
            model.updated_at = agreement.updated_at

        await self._session.flush()
        return agreement

    async def save_in_savepoint(self, agreement: LoanAgreement) -> LoanAgreement:
        async with self._session.begin_nested():
            self._session.add(self._to_model(agreement))
        return agreement

    async def get_by_id(self, agreement_id: UUID) -> Optional[LoanAgreement]:
        model = await self._session.get(LoanAgreementModel, str(agreement_id))
        if model is None:
            return None
        return self._to_entity(model)

    async def list_for_user(self, user_id: str) -> List[LoanAgreement]:
        stmt = (
            select(LoanAgreementModel)
            .where(
                or_(
                    LoanAgreementModel.borrower_id == user_id,
                    LoanAgreementModel.lender_id == user_id,
                )
            )
            .order_by(LoanAgreementModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def add_signature(self, signature: AgreementSignature) -> AgreementSignature:
        self._session.add(
            AgreementSignatureModel(
                id=str(signature.id),
                agreement_id=str(signature.agreement_id),
                signer_id=signature.signer_id,
                signature_type=signature.signature_type.value,
                ip_address=signature.ip_address,
                user_agent=signature.user_agent,
                signed_at=signature.signed_at,
            )
        )
        await self._session.flush()
        return signature

    def _to_model(self, agreement: LoanAgreement) -> LoanAgreementModel:
        return LoanAgreementModel(
            id=str(agreement.id),
            loan_id=str(agreement.loan_id),
            borrower_id=agreement.borrower_id,
            lender_id=agreement.lender_id,
            agreement_type=agreement.agreement_type.value,
            agreement_data=agreement.agreement_data,
            status=agreement.status.value,
            pdf_url=agreement.pdf_url,
            signed_at=agreement.signed_at,
            created_at=agreement.created_at,
            updated_at=agreement.updated_at,
        )

    def _to_entity(self, model: LoanAgreementModel) -> LoanAgreement:
        return LoanAgreement(
            id=UUID(model.id),
            loan_id=UUID(model.loan_id),
            borrower_id=model.borrower_id,
            lender_id=model.lender_id,
            agreement_type=AgreementType(model.agreement_type),
            agreement_data=model.agreement_data or {},
            status=AgreementStatus(model.status),
            pdf_url=model.pdf_url,
            signed_at=model.signed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
