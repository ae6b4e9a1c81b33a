"""Bearer token verification for Supabase-issued JWTs."""

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from src.core.config import settings
from src.domain.exceptions import AuthenticationException

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity claims taken from a verified access token."""

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)


def decode_access_token(token: str) -> AuthenticatedUser:
    """
    Verify an access token and return its identity claims.

    Raises:
        AuthenticationException: If the token is expired, tampered with or
            missing a subject, or if no signing secret is configured
    """
    if not settings.supabase_jwt_secret:
        logger.error("supabase_jwt_secret_not_configured")
        raise AuthenticationException("Authentication is not configured")

    try:
        claims = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.supabase_jwt_algorithm],
            audience=settings.supabase_jwt_audience,
        )
    except ExpiredSignatureError:
        raise AuthenticationException("Token has expired")
    except JWTError as e:
        logger.info("access_token_rejected", error=str(e))
        raise AuthenticationException("Invalid authentication token")

    user_id = claims.get("sub")
    if not user_id:
        raise AuthenticationException("Invalid authentication token")

    return AuthenticatedUser(
        id=user_id,
        email=claims.get("email"),
        user_metadata=claims.get("user_metadata") or {},
    )


async def get_current_user(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials],
        Depends(bearer_scheme),
    ],
) -> AuthenticatedUser:
    """FastAPI dependency resolving the caller from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException()

    return decode_access_token(credentials.credentials)
