"""Auto-flag classifier run before new content is persisted."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from dossier_moderation.core.errors import ContentRejectedError
from dossier_moderation.core.security import AuthContext
from dossier_moderation.models import BlacklistKeyword
from dossier_moderation.services.safety import ContentSafetyChecker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome for content that passed screening."""

    should_auto_flag: bool = False
    matched_keywords: list[str] = field(default_factory=list)


def find_blacklisted_keywords(db: Session, content: str) -> list[str]:
    """Return the active keywords contained in ``content`` (case-insensitive)."""
    lowered = content.lower()
    keywords = db.query(BlacklistKeyword.keyword).filter(BlacklistKeyword.is_active.is_(True))
    matches: list[str] = []
    for (keyword,) in keywords:
        needle = keyword.lower()
        if needle and needle in lowered and needle not in matches:
            matches.append(needle)
    return matches


class AutoFlagClassifier:
    """Screens content for guests via the safety service and for everyone via the blacklist.

    Authenticated members skip AI screening entirely. A rejected guest post is
    a hard failure (nothing is written); a blacklist hit is a soft failure
    (the content is written, flagged and archived).
    """

    def __init__(self, safety: ContentSafetyChecker) -> None:
        self.safety = safety

    async def classify(self, db: Session, auth: AuthContext, content: str) -> Classification:
        """Classify content about to be written.

        Raises:
            ContentRejectedError: If a guest's content fails the safety check.
        """
        if auth.is_guest:
            verdict = await self.safety.check_for_guest(content)
            if not verdict.is_safe:
                logger.info("Guest content rejected by safety check: %s", verdict.reason)
                raise ContentRejectedError(verdict.reason)
        else:
            logger.debug("Skipping AI screening for authenticated user %s", auth.user_id)

        matches = find_blacklisted_keywords(db, content)
        if matches:
            logger.info("Content matched blacklisted keywords: %s", ", ".join(matches))
        return Classification(should_auto_flag=bool(matches), matched_keywords=matches)
