"""Per-user flag ledger and the auto-hide threshold."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_moderation.core.errors import DuplicateFlagError, NotFoundError
from dossier_moderation.core.security import AuthContext, require_user
from dossier_moderation.core.settings import settings
from dossier_moderation.db.time import utcnow
from dossier_moderation.models import COMMENT_TYPE_DISCUSSION, ContentFlag
from dossier_moderation.services.bans import ensure_not_banned
from dossier_moderation.services.moderation import (
    Comment,
    ModerationQueue,
    comment_model,
)
from dossier_moderation.services.revalidation import (
    ADMIN_PATH,
    DISCUSSIONS_PATH,
    PRODUCTS_PATH,
    Revalidator,
    get_revalidator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagResult:
    """State of a comment after a flag was recorded."""

    content_id: str
    content_type: str
    flag_count: int
    archived: bool


def refresh_flag_count(db: Session, comment: Comment) -> int:
    """Recompute ``flag_count`` from the ledger in one statement.

    The count is ledger rows plus one for a blacklist auto-flag, so concurrent
    flags can never lose an increment.
    """
    model = type(comment)
    ledger_count = (
        select(func.count(ContentFlag.id))
        .where(
            ContentFlag.content_id == comment.id,
            ContentFlag.content_type == comment.comment_type,
        )
        .scalar_subquery()
    )
    db.execute(
        update(model)
        .where(model.id == comment.id)
        .values(
            flag_count=ledger_count + case((model.auto_flagged.is_(True), 1), else_=0),
            is_flagged=True,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    db.refresh(comment)
    return comment.flag_count


def has_flagged(db: Session, user_id: str, content_type: str, content_id: str) -> bool:
    """Return True if ``user_id`` already flagged this comment."""
    return (
        db.query(ContentFlag.id)
        .filter(
            ContentFlag.content_id == content_id,
            ContentFlag.content_type == content_type,
            ContentFlag.user_id == user_id,
        )
        .first()
        is not None
    )


class FlagLedger:
    """Records flags and archives comments that cross the threshold."""

    def __init__(self, revalidator: Revalidator | None = None) -> None:
        self.revalidator = revalidator or get_revalidator()

    def add_flag(
        self,
        db: Session,
        auth: AuthContext,
        content_type: str,
        content_id: str,
    ) -> FlagResult:
        """Record one user's flag against a comment.

        Raises:
            AuthenticationRequiredError: If the caller is a guest.
            UserBannedError: If the caller is banned.
            NotFoundError: If the comment does not exist.
            DuplicateFlagError: If the caller already flagged this comment.
        """
        user_id = require_user(auth, "flag content")
        ensure_not_banned(db, user_id)

        model = comment_model(content_type)
        comment = db.get(model, content_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        if has_flagged(db, user_id, content_type, content_id):
            raise DuplicateFlagError()

        db.add(ContentFlag(content_id=content_id, content_type=content_type, user_id=user_id))
        try:
            db.flush()
        except IntegrityError as err:
            # Lost the race to a concurrent flag from the same user.
            db.rollback()
            raise DuplicateFlagError() from err

        try:
            flag_count = refresh_flag_count(db, comment)
            # An already-queued comment keeps its snapshot count current.
            archived = (
                flag_count >= settings.auto_hide_threshold
                or ModerationQueue.find_entry(db, content_type, content_id) is not None
            )
            if archived:
                ModerationQueue.archive(db, comment)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(
            "User %s flagged %s comment %s (%d flag(s))",
            user_id,
            content_type,
            content_id,
            flag_count,
        )
        paths = [DISCUSSIONS_PATH if content_type == COMMENT_TYPE_DISCUSSION else PRODUCTS_PATH]
        if archived:
            paths.append(ADMIN_PATH)
        self.revalidator.revalidate(*paths)
        return FlagResult(
            content_id=content_id,
            content_type=content_type,
            flag_count=flag_count,
            archived=archived,
        )
