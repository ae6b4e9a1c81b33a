"""Agreement service - listing and signing loan agreements."""

from typing import List
from uuid import UUID

import structlog

from src.application.dto import AgreementResponse, SignAgreementRequest
from src.domain.entities import AgreementSignature, AgreementStatus
from src.domain.exceptions import (
    AgreementNotFoundException,
    ForbiddenException,
    InvalidRequestException,
)
from src.domain.interfaces import AgreementRepository

logger = structlog.get_logger(__name__)

CLOSED_STATUSES = frozenset({AgreementStatus.COMPLETED, AgreementStatus.CANCELLED})


class AgreementService:
    """Application service for loan agreement use cases."""

    def __init__(self, agreement_repository: AgreementRepository):
        self._agreement_repo = agreement_repository

    async def list_agreements(self, user_id: str) -> List[AgreementResponse]:
        """Agreements where the user is the borrower or a lender."""
        agreements = await self._agreement_repo.list_for_user(user_id)
        return [AgreementResponse.from_entity(a) for a in agreements]

    async def sign_agreement(self, request: SignAgreementRequest) -> AgreementResponse:
        """
        Record the caller's signature on an agreement.

        Raises:
            AgreementNotFoundException: If the agreement doesn't exist
            ForbiddenException: If the caller isn't a party to it
            InvalidRequestException: If the agreement is already closed
        """
        try:
            agreement_id = UUID(request.agreement_id)
        except ValueError:
            raise AgreementNotFoundException(request.agreement_id)

        agreement = await self._agreement_repo.get_by_id(agreement_id)
        if agreement is None:
            raise AgreementNotFoundException(request.agreement_id)

        if not agreement.is_party(request.user_id):
            raise ForbiddenException("You are not a party to this agreement")

        if agreement.status in CLOSED_STATUSES:
            raise InvalidRequestException("Agreement can no longer be signed")

        signature_type = agreement.signature_type_for(request.user_id)
        await self._agreement_repo.add_signature(
            AgreementSignature(
                agreement_id=agreement.id,
                signer_id=request.user_id,
                signature_type=signature_type,
                ip_address=request.ip_address,
                user_agent=request.user_agent,
            )
        )

        agreement.mark_signed()
        await self._agreement_repo.save(agreement)

        logger.info(
            "agreement_signed",
            agreement_id=str(agreement.id),
            signer_id=request.user_id,
            signature_type=signature_type.value,
        )

        return AgreementResponse.from_entity(agreement)
