"""Moderation queue: archival of flagged comments and admin resolution."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_moderation.core.errors import NotFoundError, ValidationError
from dossier_moderation.core.security import AuthContext, require_admin
from dossier_moderation.core.settings import settings
from dossier_moderation.models import (
    COMMENT_MODELS,
    COMMENT_TYPE_DISCUSSION,
    ContentFlag,
    Discussion,
    DiscussionComment,
    ModerationQueueEntry,
    Product,
    ProductComment,
)
from dossier_moderation.models.audit import ACTION_PURGE, ACTION_RESTORE, TARGET_COMMENT
from dossier_moderation.models.moderation import QUEUE_STATUS_PENDING
from dossier_moderation.services.audit import AuditLog
from dossier_moderation.services.revalidation import (
    ADMIN_PATH,
    DISCUSSIONS_PATH,
    PRODUCTS_PATH,
    Revalidator,
    get_revalidator,
)

logger = logging.getLogger(__name__)

Comment = DiscussionComment | ProductComment


def comment_model(content_type: str) -> type[DiscussionComment] | type[ProductComment]:
    """Return the home table model for a comment type."""
    try:
        return COMMENT_MODELS[content_type]
    except KeyError as err:
        raise ValidationError(f"Unknown content type: {content_type}") from err


def context_model(content_type: str) -> type[Discussion] | type[Product]:
    """Return the parent context model (discussion or product) for a comment type."""
    comment_model(content_type)
    return Discussion if content_type == COMMENT_TYPE_DISCUSSION else Product


def get_comment(db: Session, content_type: str, content_id: str) -> Comment | None:
    """Load a comment from its home table."""
    return db.get(comment_model(content_type), content_id)


def clear_flags(db: Session, content_type: str, content_id: str) -> int:
    """Delete every ledger row for a comment and return how many went."""
    return (
        db.query(ContentFlag)
        .filter(
            ContentFlag.content_id == content_id,
            ContentFlag.content_type == content_type,
        )
        .delete(synchronize_session=False)
    )


def remove_comment(db: Session, comment: Comment) -> None:
    """Delete a comment from its home table, re-attaching its replies to its parent."""
    model = type(comment)
    db.query(model).filter(model.parent_id == comment.id).update(
        {model.parent_id: comment.parent_id},
        synchronize_session=False,
    )
    db.delete(comment)


def _content_preview(content: str) -> str:
    return content[: settings.audit_preview_length]


class ModerationQueue:
    """Archive of flagged comments awaiting review."""

    @staticmethod
    def find_entry(db: Session, content_type: str, content_id: str) -> ModerationQueueEntry | None:
        """Return the queue entry for a comment, if it is archived."""
        return (
            db.query(ModerationQueueEntry)
            .filter(
                ModerationQueueEntry.original_comment_id == content_id,
                ModerationQueueEntry.comment_type == content_type,
            )
            .first()
        )

    @staticmethod
    def archive(
        db: Session,
        comment: Comment,
        matched_keywords: list[str] | None = None,
    ) -> ModerationQueueEntry:
        """Mirror a comment into the queue and mark the original flagged.

        Idempotent per comment: an existing entry is returned with its
        ``flag_count`` brought up to date. The caller owns the transaction and
        commits once the surrounding work (flag insert, comment insert) is done.

        Args:
            db: Database session
            comment: Comment to archive; it stays in its home table
            matched_keywords: Blacklist keywords that triggered the archive, if any

        Returns:
            The queue entry for the comment.
        """
        comment.is_flagged = True
        existing = ModerationQueue.find_entry(db, comment.comment_type, comment.id)
        if existing is not None:
            existing.flag_count = comment.flag_count
            return existing

        entry = ModerationQueueEntry(
            original_comment_id=comment.id,
            comment_type=comment.comment_type,
            discussion_id=getattr(comment, "discussion_id", None),
            product_id=getattr(comment, "product_id", None),
            parent_id=comment.parent_id,
            author_id=comment.author_id,
            guest_name=comment.guest_name,
            content=comment.content,
            flag_count=comment.flag_count,
            matched_keywords=matched_keywords or None,
            original_created_at=comment.created_at,
            status=QUEUE_STATUS_PENDING,
        )
        try:
            with db.begin_nested():
                db.add(entry)
        except IntegrityError:
            # A concurrent request archived the same comment first.
            existing = ModerationQueue.find_entry(db, comment.comment_type, comment.id)
            if existing is None:
                raise
            comment.is_flagged = True
            existing.flag_count = comment.flag_count
            return existing

        logger.info(
            "Archived %s comment %s with %d flag(s)",
            comment.comment_type,
            comment.id,
            comment.flag_count,
        )
        return entry

    @staticmethod
    def get_entry(db: Session, entry_id: str, *, lock: bool = False) -> ModerationQueueEntry | None:
        """Return a queue entry, optionally locking it for resolution."""
        query = db.query(ModerationQueueEntry).filter(ModerationQueueEntry.id == entry_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def require_entry(db: Session, entry_id: str, *, lock: bool = False) -> ModerationQueueEntry:
        """Return a queue entry or raise ``NotFoundError``."""
        entry = ModerationQueue.get_entry(db, entry_id, lock=lock)
        if entry is None:
            raise NotFoundError("Queue item not found")
        return entry

    @staticmethod
    def list_queue(db: Session, auth: AuthContext) -> list[ModerationQueueEntry]:
        """Return every entry, worst offenders first. Admin only."""
        require_admin(auth, "view the moderation queue")
        return (
            db.query(ModerationQueueEntry)
            .order_by(
                ModerationQueueEntry.flag_count.desc(),
                ModerationQueueEntry.queued_at.desc(),
            )
            .all()
        )

    @staticmethod
    def list_for_user(db: Session, auth: AuthContext) -> list[ModerationQueueEntry]:
        """Return the caller's own queued comments; guests have none."""
        if auth.user_id is None:
            return []
        return (
            db.query(ModerationQueueEntry)
            .filter(ModerationQueueEntry.author_id == auth.user_id)
            .order_by(ModerationQueueEntry.queued_at.desc())
            .all()
        )


class ModerationService:
    """Admin resolution of queue entries: restore or purge."""

    def __init__(self, revalidator: Revalidator | None = None) -> None:
        self.revalidator = revalidator or get_revalidator()

    @staticmethod
    def _audit_metadata(entry: ModerationQueueEntry) -> dict[str, Any]:
        return {
            "comment_type": entry.comment_type,
            "flag_count": entry.flag_count,
            "content_preview": _content_preview(entry.content),
        }

    @staticmethod
    def _rebuild_from_snapshot(db: Session, entry: ModerationQueueEntry) -> Comment:
        model = comment_model(entry.comment_type)
        context_id = entry.discussion_id or entry.product_id
        if context_id is None or db.get(context_model(entry.comment_type), context_id) is None:
            raise NotFoundError("The discussion or product for this comment no longer exists")

        parent_id = entry.parent_id
        if parent_id is not None and db.get(model, parent_id) is None:
            parent_id = None

        comment = model(
            id=entry.original_comment_id,
            author_id=entry.author_id,
            guest_name=entry.guest_name,
            parent_id=parent_id,
            content=entry.content,
            flag_count=0,
            is_flagged=False,
            auto_flagged=False,
            created_at=entry.original_created_at,
            **{model.context_field: context_id},
        )
        db.add(comment)
        return comment

    def restore(
        self,
        db: Session,
        auth: AuthContext,
        queue_item_id: str,
        reason: str | None = None,
    ) -> Comment:
        """Put an archived comment back on display with its flags cleared.

        Archival leaves the original row in place, but it may have been removed
        since. Both states are handled: a surviving row is reset in place, a
        missing one is rebuilt from the snapshot under its original id.

        Raises:
            UnauthorizedError: If the caller is not an admin.
            NotFoundError: If the queue item (or the comment's discussion/product) is gone.
        """
        require_admin(auth, "restore comments")
        entry = ModerationQueue.require_entry(db, queue_item_id, lock=True)

        metadata = self._audit_metadata(entry)
        comment_id = entry.original_comment_id
        comment_type = entry.comment_type

        try:
            comment = get_comment(db, comment_type, comment_id)
            if comment is not None:
                comment.flag_count = 0
                comment.is_flagged = False
                comment.auto_flagged = False
                metadata["restored_via"] = "update"
            else:
                comment = self._rebuild_from_snapshot(db, entry)
                metadata["restored_via"] = "insert"

            clear_flags(db, comment_type, comment_id)
            db.delete(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(
            "Restored %s comment %s from queue item %s (%s)",
            comment_type,
            comment_id,
            queue_item_id,
            metadata["restored_via"],
        )
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_RESTORE,
            target_type=TARGET_COMMENT,
            target_id=comment_id,
            reason=reason,
            metadata=metadata,
        )
        self.revalidator.revalidate(ADMIN_PATH, DISCUSSIONS_PATH, PRODUCTS_PATH)
        return comment

    def purge(
        self,
        db: Session,
        auth: AuthContext,
        queue_item_id: str,
        reason: str | None = None,
    ) -> bool:
        """Permanently remove an archived comment.

        The queue entry goes, and so does the flagged original with its ledger
        rows; replies are re-attached to the purged comment's parent. Since
        archival leaves the original in its home table, purge does touch that
        table: it deletes the row there. It never writes a row back.

        Returns:
            True if something was purged, False if the queue item was already gone.

        Raises:
            UnauthorizedError: If the caller is not an admin.
        """
        require_admin(auth, "purge comments")
        entry = ModerationQueue.get_entry(db, queue_item_id, lock=True)
        if entry is None:
            logger.info("Queue item %s already resolved; nothing to purge", queue_item_id)
            return False

        metadata = self._audit_metadata(entry)
        comment_id = entry.original_comment_id
        comment_type = entry.comment_type

        try:
            comment = get_comment(db, comment_type, comment_id)
            if comment is not None:
                remove_comment(db, comment)
            metadata["original_removed"] = comment is not None

            clear_flags(db, comment_type, comment_id)
            db.delete(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info("Purged %s comment %s (queue item %s)", comment_type, comment_id, queue_item_id)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_PURGE,
            target_type=TARGET_COMMENT,
            target_id=comment_id,
            reason=reason,
            metadata=metadata,
        )
        self.revalidator.revalidate(ADMIN_PATH, DISCUSSIONS_PATH, PRODUCTS_PATH)
        return True
