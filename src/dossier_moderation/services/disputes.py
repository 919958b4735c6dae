"""Author appeals against archived comments."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dossier_moderation.core.errors import ForbiddenError, ValidationError
from dossier_moderation.core.security import AuthContext, require_user
from dossier_moderation.core.settings import settings
from dossier_moderation.db.time import utcnow
from dossier_moderation.models import ModerationQueueEntry
from dossier_moderation.models.moderation import QUEUE_STATUS_DISPUTED
from dossier_moderation.services.moderation import ModerationQueue
from dossier_moderation.services.revalidation import ADMIN_PATH, Revalidator, get_revalidator

logger = logging.getLogger(__name__)


class DisputeService:
    """Lets an author contest their own queued comment."""

    def __init__(self, revalidator: Revalidator | None = None) -> None:
        self.revalidator = revalidator or get_revalidator()

    def submit_dispute(
        self,
        db: Session,
        auth: AuthContext,
        queue_item_id: str,
        reason: str,
    ) -> ModerationQueueEntry:
        """Mark a queue entry as disputed.

        The comment stays hidden; an admin still has to restore or purge it.

        Raises:
            AuthenticationRequiredError: If the caller is a guest.
            NotFoundError: If the queue item does not exist.
            ForbiddenError: If the caller did not write the comment.
            ValidationError: If the trimmed reason is too short.
        """
        user_id = require_user(auth, "dispute a moderation decision")
        entry = ModerationQueue.require_entry(db, queue_item_id)
        if entry.author_id != user_id:
            raise ForbiddenError("You can only dispute your own comments")

        trimmed = (reason or "").strip()
        minimum = settings.dispute_reason_min_length
        if len(trimmed) < minimum:
            raise ValidationError(f"Dispute reason must be at least {minimum} characters")

        entry.status = QUEUE_STATUS_DISPUTED
        entry.dispute_reason = trimmed
        entry.disputed_at = utcnow()
        db.commit()
        db.refresh(entry)

        logger.info("User %s disputed queue item %s", user_id, queue_item_id)
        self.revalidator.revalidate(ADMIN_PATH)
        return entry
