"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from dossier_moderation.core.security import GUEST, AuthContext, decode_subject
from dossier_moderation.db.session import get_db
from dossier_moderation.models import Profile
from dossier_moderation.services.revalidation import Revalidator, get_revalidator
from dossier_moderation.services.safety import ContentSafetyChecker, get_safety_client

# Missing credentials mean a guest, so the scheme must not reject them.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> AuthContext:
    """Build the caller's identity from an optional bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if any
        db: Database session

    Returns:
        ``GUEST`` without a token, otherwise the profile's id and admin flag

    Raises:
        AuthenticationRequiredError: If the token is invalid
        HTTPException: If the token names an unknown profile
    """
    if credentials is None:
        return GUEST

    user_id = decode_subject(credentials.credentials)
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return AuthContext(user_id=profile.id, is_admin=profile.is_admin)


def get_safety_checker() -> ContentSafetyChecker:
    return get_safety_client()


def get_page_revalidator() -> Revalidator:
    return get_revalidator()


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]
SafetyCheckerDep = Annotated[ContentSafetyChecker, Depends(get_safety_checker)]
RevalidatorDep = Annotated[Revalidator, Depends(get_page_revalidator)]
