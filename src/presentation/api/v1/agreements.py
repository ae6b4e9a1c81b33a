"""Loan agreement API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.application.dto import SignAgreementRequest
from src.application.services import AgreementService
from src.core.dependencies import get_agreement_service, get_current_profile
from src.domain.entities import Profile
from src.presentation.middleware import get_client_ip
from src.presentation.schemas import AgreementResponseSchema, ErrorResponseSchema

agreements_router = APIRouter(
    prefix="/agreements",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@agreements_router.get(
    "",
    response_model=list[AgreementResponseSchema],
    summary="List Agreements",
    description="Agreements where the caller is the borrower or a lender.",
)
async def list_agreements(
    profile: Annotated[Profile, Depends(get_current_profile)],
    agreement_service: Annotated[AgreementService, Depends(get_agreement_service)],
) -> list[AgreementResponseSchema]:
    agreements = await agreement_service.list_agreements(profile.id)
    return [AgreementResponseSchema.model_validate(a) for a in agreements]


@agreements_router.post(
    "/{agreement_id}/sign",
    response_model=AgreementResponseSchema,
    summary="Sign Agreement",
    description="Record the caller's signature with their IP address and user agent.",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Agreement can't be signed"},
        403: {"model": ErrorResponseSchema, "description": "Not a party to the agreement"},
        404: {"model": ErrorResponseSchema, "description": "Agreement not found"},
    },
)
async def sign_agreement(
    agreement_id: str,
    http_request: Request,
    profile: Annotated[Profile, Depends(get_current_profile)],
    agreement_service: Annotated[AgreementService, Depends(get_agreement_service)],
) -> AgreementResponseSchema:
    dto = SignAgreementRequest(
        user_id=profile.id,
        agreement_id=agreement_id,
        ip_address=get_client_ip(),
        user_agent=http_request.headers.get("user-agent"),
    )
    response = await agreement_service.sign_agreement(dto)
    return AgreementResponseSchema.model_validate(response)
