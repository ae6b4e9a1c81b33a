"""Verification service - AI document checks for identity and medical need."""

from typing import List, Tuple

import structlog

from src.application.dto import (
    VerificationResponse,
    VerificationSummary,
    VerifyDocumentRequest,
)
from src.core.metrics import record_verification
from src.domain.entities import (
    DocumentQuality,
    DocumentType,
    DocumentVerification,
    Profile,
    VerificationStatus,
)
from src.domain.exceptions import InvalidDocumentException
from src.domain.interfaces import ProfileRepository, VerificationRepository
from src.service.ai import AIAssistant

logger = structlog.get_logger(__name__)

POOR_QUALITY_BYTES = 100 * 1024
FAIR_QUALITY_BYTES = 500 * 1024


def assess_document_quality(size_bytes: int, mime_type: str) -> Tuple[DocumentQuality, List[str]]:
    """
    Judge upload quality from its size and type.

    Returns:
        The quality grade and suggestions for the user
    """
    suggestions = []
    quality = DocumentQuality.GOOD

    if size_bytes < POOR_QUALITY_BYTES:
        quality = DocumentQuality.POOR
        suggestions.append(
            "Image appears to be low resolution. Please upload a clearer image."
        )
    elif size_bytes < FAIR_QUALITY_BYTES:
        quality = DocumentQuality.FAIR
        suggestions.append(
            "Consider uploading a higher resolution image for better verification."
        )

    if mime_type.lower() == "application/pdf":
        suggestions.append(
            "PDF detected. Ensure the document is clearly visible and not password protected."
        )

    return quality, suggestions


class VerificationService:
    """Application service for document verification use cases."""

    def __init__(
        self,
        verification_repository: VerificationRepository,
        profile_repository: ProfileRepository,
        assistant: AIAssistant,
    ):
        self._verification_repo = verification_repository
        self._profile_repo = profile_repository
        self._assistant = assistant

    async def verify_document(
        self,
        request: VerifyDocumentRequest,
        profile: Profile,
    ) -> VerificationResponse:
        """
        Verify an uploaded document with the AI model.

        Only valid documents are stored. A valid government ID also marks
        the profile as identity verified.

        Raises:
            InvalidDocumentException: If the upload isn't decodable, is too
                large or has an unsupported format
        """
        try:
            content = request.decode()
        except ValueError as e:
            raise InvalidDocumentException(str(e))

        errors = request.validate(len(content))
        if errors:
            raise InvalidDocumentException("; ".join(errors))

        quality, suggestions = assess_document_quality(len(content), request.mime_type)

        log = logger.bind(
            user_id=profile.id,
            document_type=request.document_type.value,
            size_bytes=len(content),
        )

        result = await self._assistant.verify_document(
            request.document_type,
            request.encoded_data,
            request.mime_type.lower(),
        )
        record_verification(request.document_type.value, result.is_valid)

        if not result.is_valid:
            log.info("document_rejected", confidence=result.confidence)
            return VerificationResponse.from_result(result, quality, suggestions)

        verification = DocumentVerification(
            user_id=profile.id,
            document_type=request.document_type,
            confidence_score=result.confidence,
            extracted_data=dict(result.extracted_data),
            verification_status=VerificationStatus.VERIFIED,
        )
        await self._verification_repo.save(verification)

        if request.document_type == DocumentType.GOVERNMENT_ID:
            profile.mark_identity_verified()
            await self._profile_repo.save(profile)

        log.info(
            "document_verified",
            confidence=result.confidence,
            verification_id=str(verification.id),
        )

        return VerificationResponse.from_result(result, quality, suggestions, verification)

    async def list_verifications(self, user_id: str) -> List[VerificationSummary]:
        verifications = await self._verification_repo.list_for_user(user_id)
        return [VerificationSummary.from_entity(v) for v in verifications]
