"""PostgreSQL implementation of VerificationRepository."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    DocumentType,
    DocumentVerification,
    VerificationStatus,
)
from src.domain.interfaces import VerificationRepository
from src.infrastructure.database.models import DocumentVerificationModel


class PostgresVerificationRepository(VerificationRepository):
    """PostgreSQL-backed document verification repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, verification: DocumentVerification) -> DocumentVerification:
        self._session.add(
            DocumentVerificationModel(
                id=str(verification.id),
                user_id=verification.user_id,
                document_type=verification.document_type.value,
                verification_status=verification.verification_status.value,
                confidence_score=verification.confidence_score,
                extracted_data=verification.extracted_data,
                verified_at=verification.verified_at,
            )
        )
        await self._session.flush()
        return verification

    async def list_for_user(self, user_id: str) -> List[DocumentVerification]:
        stmt = (
            select(DocumentVerificationModel)
            .where(DocumentVerificationModel.user_id == user_id)
            .order_by(DocumentVerificationModel.verified_at.desc())
        )
        result = await self._session.execute(stmt)

        return [
            DocumentVerification(
                id=UUID(model.id),
                user_id=model.user_id,
                document_type=DocumentType(model.document_type),
                verification_status=VerificationStatus(model.verification_status),
                confidence_score=model.confidence_score,
                extracted_data=model.extracted_data or {},
                verified_at=model.verified_at,
            )
            for model in result.scalars().all()
        ]
