"""Profile entity representing a platform member."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class Profile:
    """
    A borrower and/or lender on the platform.

    The ``id`` is the auth provider's user ID, so a profile can be created
    lazily the first time an authenticated user hits the API.
    """

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool = False
    identity_verified: bool = False
    identity_verified_at: Optional[datetime] = None
    language: str = "en"
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def mark_identity_verified(self) -> None:
        """Record a successful government ID verification."""
        now = datetime.utcnow()
        self.identity_verified = True
        self.identity_verified_at = now
        self.is_verified = True
        self.updated_at = now

    @classmethod
    def from_auth_user(
        cls,
        user_id: str,
        email: Optional[str],
        user_metadata: Optional[dict[str, Any]] = None,
    ) -> "Profile":
        """Build a default profile from auth token claims."""
        metadata = user_metadata or {}
        email = email or ""
        name = metadata.get("name") or (email.split("@")[0] if email else "") or "User"

        return cls(
            id=user_id,
            name=name,
            email=email,
            phone=metadata.get("phone"),
            avatar_url=metadata.get("avatar_url"),
        )


@dataclass(frozen=True)
class ProfileStats:
    """Lending track record used for risk assessment."""

    total_loans_taken: int = 0
    successful_repayments: int = 0
    total_loans_given: int = 0
    average_rating: float = 0.0
