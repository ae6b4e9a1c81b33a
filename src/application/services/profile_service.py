"""Profile service - lazy profile creation and the profile view."""

from typing import Any, Optional

import structlog

from src.application.dto import ProfileResponse
from src.domain.entities import Profile
from src.domain.interfaces import ProfileRepository, VerificationRepository

logger = structlog.get_logger(__name__)


class ProfileService:
    """Application service for platform member profiles."""

    def __init__(
        self,
        profile_repository: ProfileRepository,
        verification_repository: VerificationRepository,
    ):
        self._profile_repo = profile_repository
        self._verification_repo = verification_repository

    async def ensure_profile(
        self,
        user_id: str,
        email: Optional[str],
        user_metadata: Optional[dict[str, Any]] = None,
    ) -> Profile:
        """
        Get the caller's profile, creating a default one on first use.

        Args:
            user_id: Auth provider user ID
            email: E-mail claim from the access token
            user_metadata: Metadata claim from the access token

        Returns:
            The stored profile
        """
        profile = await self._profile_repo.get_by_id(user_id)
        if profile is not None:
            return profile

        profile = Profile.from_auth_user(user_id, email, user_metadata)
        await self._profile_repo.save(profile)
        logger.info("profile_created", user_id=user_id)

        return profile

    async def get_profile(self, profile: Profile) -> ProfileResponse:
        stats = await self._profile_repo.get_stats(profile.id)
        verifications = await self._verification_repo.list_for_user(profile.id)
        return ProfileResponse.from_entity(profile, stats, verifications)
