"""Profile API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.services import ProfileService
from src.core.dependencies import get_current_profile, get_profile_service
from src.domain.entities import Profile
from src.presentation.schemas import ErrorResponseSchema, ProfileResponseSchema

profile_router = APIRouter(
    prefix="/profile",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not authenticated"},
    },
)


@profile_router.get(
    "",
    response_model=ProfileResponseSchema,
    summary="Get Profile",
    description="The caller's profile with lending stats and verifications.",
)
async def get_profile(
    profile: Annotated[Profile, Depends(get_current_profile)],
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
) -> ProfileResponseSchema:
    response = await profile_service.get_profile(profile)
    return ProfileResponseSchema.model_validate(response)
