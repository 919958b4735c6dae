"""Ban state and the ban gate applied to every content-creation path."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from dossier_moderation.core.errors import NotFoundError, UserBannedError
from dossier_moderation.db.time import utcnow
from dossier_moderation.models import Profile


@dataclass(frozen=True)
class BanUpdate:
    """The three ban columns, written together."""

    is_banned: bool
    banned_at: datetime | None = None
    ban_reason: str | None = None

    @classmethod
    def ban(cls, reason: str | None = None) -> BanUpdate:
        return cls(is_banned=True, banned_at=utcnow(), ban_reason=(reason or "").strip() or None)

    @classmethod
    def unban(cls) -> BanUpdate:
        return cls(is_banned=False)

    def apply(self, profile: Profile) -> None:
        profile.is_banned = self.is_banned
        profile.banned_at = self.banned_at
        profile.ban_reason = self.ban_reason


def get_profile(db: Session, user_id: str) -> Profile:
    """Return a profile or raise ``NotFoundError``."""
    profile = db.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def ensure_not_banned(db: Session, user_id: str | None) -> None:
    """Reject content from banned users. Guests carry no ban state."""
    if user_id is None:
        return
    if get_profile(db, user_id).is_banned:
        raise UserBannedError()
