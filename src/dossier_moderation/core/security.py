"""Caller identity handling.

Identity is issued by an external provider as a signed JWT whose subject is the
profile id. Services never look identity up on their own; they receive an
``AuthContext`` built once per request.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from dossier_moderation.core.errors import AuthenticationRequiredError, UnauthorizedError
from dossier_moderation.core.settings import settings


@dataclass(frozen=True)
class AuthContext:
    """Who is calling: a profile id (``None`` for guests) and admin status."""

    user_id: str | None = None
    is_admin: bool = False

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @classmethod
    def guest(cls) -> AuthContext:
        return cls()


GUEST = AuthContext.guest()


def require_admin(auth: AuthContext, action: str = "perform this action") -> None:
    """Raise ``UnauthorizedError`` unless the caller is an admin."""
    if auth.is_guest or not auth.is_admin:
        raise UnauthorizedError(f"Only administrators can {action}")


def require_user(auth: AuthContext, action: str = "do this") -> str:
    """Return the caller's profile id or raise for guests."""
    if auth.user_id is None:
        raise AuthenticationRequiredError(f"You must be logged in to {action}")
    return auth.user_id


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT for a profile id (used by tests and local tooling)."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str:
    """Return the ``sub`` claim of a valid token.

    Raises:
        AuthenticationRequiredError: If the token is invalid or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise AuthenticationRequiredError("Could not validate credentials") from err
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationRequiredError("Could not validate credentials")
    return str(subject)
