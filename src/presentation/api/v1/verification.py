"""Document verification API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import VerifyDocumentRequest
from src.application.services import VerificationService
from src.core.dependencies import get_current_profile, get_verification_service
from src.domain.entities import Profile
from src.presentation.schemas import (
    ErrorResponseSchema,
    VerificationResponseSchema,
    VerificationSummarySchema,
    VerifyDocumentRequestSchema,
)

verification_router = APIRouter(
    prefix="/verifications",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid document"},
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@verification_router.post(
    "",
    response_model=VerificationResponseSchema,
    summary="Verify Document",
    description="""
    Check a government ID or medical prescription with the AI model.

    Valid documents are stored; a valid government ID also marks the
    caller's identity as verified.
    """,
)
async def verify_document(
    request: VerifyDocumentRequestSchema,
    profile: Annotated[Profile, Depends(get_current_profile)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerificationResponseSchema:
    dto = VerifyDocumentRequest(
        user_id=profile.id,
        document_type=request.document_type,
        image_data=request.image_data,
        mime_type=request.mime_type,
        file_name=request.file_name,
    )
    response = await verification_service.verify_document(dto, profile)
    return VerificationResponseSchema.model_validate(response)


@verification_router.get(
    "",
    response_model=list[VerificationSummarySchema],
    summary="List Verifications",
    description="The caller's stored document verifications, newest first.",
)
async def list_verifications(
    profile: Annotated[Profile, Depends(get_current_profile)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> list[VerificationSummarySchema]:
    verifications = await verification_service.list_verifications(profile.id)
    return [VerificationSummarySchema.model_validate(v) for v in verifications]
