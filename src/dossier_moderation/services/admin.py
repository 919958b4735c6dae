"""Admin tooling: keyword blacklist, bans and flagged content outside the queue."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_moderation.core.errors import NotFoundError, ValidationError
from dossier_moderation.core.security import AuthContext, require_admin
from dossier_moderation.db.time import as_utc
from dossier_moderation.models import (
    COMMENT_TYPE_DISCUSSION,
    BlacklistKeyword,
    ContentFlag,
    Discussion,
    DiscussionComment,
    ModerationQueueEntry,
    Profile,
    ProductComment,
)
from dossier_moderation.models.audit import (
    ACTION_ADD_BLACKLIST,
    ACTION_BAN,
    ACTION_CLEAR_FLAGS,
    ACTION_DELETE,
    ACTION_REMOVE_BLACKLIST,
    ACTION_UNBAN,
    TARGET_DISCUSSION,
    TARGET_DISCUSSION_COMMENT,
    TARGET_KEYWORD,
    TARGET_PRODUCT_COMMENT,
    TARGET_USER,
)
from dossier_moderation.services.audit import AuditLog
from dossier_moderation.services.bans import BanUpdate, get_profile
from dossier_moderation.services.moderation import ModerationQueue, clear_flags, remove_comment
from dossier_moderation.services.revalidation import (
    ADMIN_PATH,
    DISCUSSIONS_PATH,
    PRODUCTS_PATH,
    Revalidator,
    get_revalidator,
)

logger = logging.getLogger(__name__)

FLAGGED_DISCUSSION = TARGET_DISCUSSION
FLAGGED_DISCUSSION_COMMENT = TARGET_DISCUSSION_COMMENT
FLAGGED_PRODUCT_COMMENT = TARGET_PRODUCT_COMMENT

FLAGGED_MODELS: dict[str, type[Discussion] | type[DiscussionComment] | type[ProductComment]] = {
    FLAGGED_DISCUSSION: Discussion,
    FLAGGED_DISCUSSION_COMMENT: DiscussionComment,
    FLAGGED_PRODUCT_COMMENT: ProductComment,
}

PREVIEW_LENGTH = 200

Flaggable = Discussion | DiscussionComment | ProductComment


@dataclass(frozen=True)
class FlaggedContent:
    """One row of the flagged-content overview."""

    id: str
    content_type: str
    author_id: str | None
    preview: str
    flag_count: int
    is_flagged: bool
    created_at: datetime

    @classmethod
    def from_row(cls, row: Flaggable, content_type: str) -> FlaggedContent:
        return cls(
            id=row.id,
            content_type=content_type,
            author_id=row.author_id,
            preview=row.content[:PREVIEW_LENGTH],
            flag_count=row.flag_count,
            is_flagged=row.is_flagged,
            created_at=row.created_at,
        )


def get_flaggable(db: Session, content_type: str, content_id: str) -> Flaggable:
    """Load a discussion or comment by its flagged-content type.

    Raises:
        ValidationError: If ``content_type`` is not a flaggable type.
        NotFoundError: If the row does not exist.
    """
    try:
        model = FLAGGED_MODELS[content_type]
    except KeyError as err:
        raise ValidationError(f"Unknown content type: {content_type}") from err
    row = db.get(model, content_id)
    if row is None:
        raise NotFoundError("Content not found")
    return row


def _page_path(content_type: str) -> str:
    return PRODUCTS_PATH if content_type == FLAGGED_PRODUCT_COMMENT else DISCUSSIONS_PATH


class AdminService:
    """Admin-only operations outside the moderation queue."""

    def __init__(self, revalidator: Revalidator | None = None) -> None:
        self.revalidator = revalidator or get_revalidator()

    def add_keyword(
        self,
        db: Session,
        auth: AuthContext,
        keyword: str,
        reason: str | None = None,
    ) -> BlacklistKeyword:
        """Add a keyword to the blacklist, stored trimmed and lower-cased."""
        require_admin(auth, "manage the keyword blacklist")
        normalized = (keyword or "").strip().lower()
        if not normalized:
            raise ValidationError("Keyword must not be empty")

        row = BlacklistKeyword(
            keyword=normalized,
            reason=(reason or "").strip() or None,
            created_by=auth.user_id,
            is_active=True,
        )
        db.add(row)
        db.commit()
        db.refresh(row)

        logger.info("Admin %s blacklisted keyword %r", auth.user_id, normalized)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_ADD_BLACKLIST,
            target_type=TARGET_KEYWORD,
            target_id=row.id,
            reason=row.reason,
            metadata={"keyword": normalized},
        )
        self.revalidator.revalidate(ADMIN_PATH)
        return row

    def remove_keyword(self, db: Session, auth: AuthContext, keyword_id: str) -> BlacklistKeyword:
        """Deactivate a blacklist keyword. The row is kept for the audit trail."""
        require_admin(auth, "manage the keyword blacklist")
        row = db.get(BlacklistKeyword, keyword_id)
        if row is None:
            raise NotFoundError("Keyword not found")

        keyword = row.keyword
        row.is_active = False
        db.commit()

        logger.info("Admin %s removed keyword %r", auth.user_id, keyword)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_REMOVE_BLACKLIST,
            target_type=TARGET_KEYWORD,
            target_id=keyword_id,
            metadata={"keyword": keyword},
        )
        self.revalidator.revalidate(ADMIN_PATH)
        return row

    @staticmethod
    def list_keywords(db: Session, auth: AuthContext) -> list[BlacklistKeyword]:
        require_admin(auth, "view the keyword blacklist")
        return (
            db.query(BlacklistKeyword)
            .filter(BlacklistKeyword.is_active.is_(True))
            .order_by(BlacklistKeyword.created_at.desc())
            .all()
        )

    def toggle_ban(
        self,
        db: Session,
        auth: AuthContext,
        user_id: str,
        ban: bool,
        reason: str | None = None,
    ) -> Profile:
        """Ban or unban a user.

        Args:
            db: Database session
            auth: Caller; must be an admin
            user_id: Profile to update
            ban: True to ban, False to lift the ban
            reason: Stored on the profile when banning

        Returns:
            The updated profile.

        Raises:
            UnauthorizedError: If the caller is not an admin.
            NotFoundError: If the profile does not exist.
        """
        require_admin(auth, "ban users")
        profile = get_profile(db, user_id)

        update = BanUpdate.ban(reason) if ban else BanUpdate.unban()
        update.apply(profile)
        db.commit()
        db.refresh(profile)

        logger.info("Admin %s %s user %s", auth.user_id, "banned" if ban else "unbanned", user_id)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_BAN if ban else ACTION_UNBAN,
            target_type=TARGET_USER,
            target_id=user_id,
            reason=update.ban_reason if ban else (reason or None),
            metadata={"username": profile.username},
        )
        self.revalidator.revalidate(ADMIN_PATH)
        return profile

    @staticmethod
    def list_users(db: Session, auth: AuthContext, limit: int = 100) -> list[Profile]:
        require_admin(auth, "list users")
        return db.query(Profile).order_by(Profile.created_at.desc()).limit(limit).all()

    @staticmethod
    def list_flagged_content(db: Session, auth: AuthContext, limit: int = 20) -> list[FlaggedContent]:
        """Return flagged discussions and comments, most flagged first. Admin only."""
        require_admin(auth, "view flagged content")

        items: list[FlaggedContent] = []
        for label, model in FLAGGED_MODELS.items():
            rows = (
                db.query(model)
                .filter(or_(model.is_flagged.is_(True), model.flag_count > 0))
                .order_by(model.flag_count.desc(), model.created_at.desc())
                .limit(limit)
                .all()
            )
            items.extend(FlaggedContent.from_row(row, label) for row in rows)

        items.sort(key=lambda item: (item.flag_count, as_utc(item.created_at)), reverse=True)
        return items[:limit]

    def clear_flags(
        self,
        db: Session,
        auth: AuthContext,
        content_type: str,
        content_id: str,
        reason: str | None = None,
    ) -> FlaggedContent:
        """Clear every flag on a discussion or comment and keep it on display.

        Comments also lose their ledger rows and, if they were archived, their
        queue entry.

        Raises:
            UnauthorizedError: If the caller is not an admin.
            ValidationError: If ``content_type`` is unknown.
            NotFoundError: If the content does not exist.
        """
        require_admin(auth, "clear flags")
        row = get_flaggable(db, content_type, content_id)
        metadata: dict[str, Any] = {
            "flag_count": row.flag_count,
            "content_preview": row.content[:PREVIEW_LENGTH],
        }

        try:
            row.flag_count = 0
            row.is_flagged = False
            if not isinstance(row, Discussion):
                row.auto_flagged = False
                metadata["flags_removed"] = clear_flags(db, row.comment_type, row.id)
                entry = ModerationQueue.find_entry(db, row.comment_type, row.id)
                if entry is not None:
                    db.delete(entry)
                metadata["dequeued"] = entry is not None
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(row)

        logger.info("Admin %s cleared flags on %s %s", auth.user_id, content_type, content_id)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_CLEAR_FLAGS,
            target_type=content_type,
            target_id=content_id,
            reason=reason,
            metadata=metadata,
        )
        self.revalidator.revalidate(ADMIN_PATH, _page_path(content_type))
        return FlaggedContent.from_row(row, content_type)

    def delete_content(
        self,
        db: Session,
        auth: AuthContext,
        content_type: str,
        content_id: str,
        reason: str | None = None,
    ) -> None:
        """Hard-delete a discussion or comment.

        A deleted comment's replies move up to its parent. A deleted discussion
        takes its comments with it, along with their flags and queue entries.

        Raises:
            UnauthorizedError: If the caller is not an admin.
            ValidationError: If ``content_type`` is unknown.
            NotFoundError: If the content does not exist.
        """
        require_admin(auth, "delete content")
        row = get_flaggable(db, content_type, content_id)
        metadata: dict[str, Any] = {
            "flag_count": row.flag_count,
            "content_preview": row.content[:PREVIEW_LENGTH],
        }

        try:
            if isinstance(row, Discussion):
                metadata["comments_removed"] = self._delete_discussion_comments(db, row.id)
                db.delete(row)
            else:
                clear_flags(db, row.comment_type, row.id)
                entry = ModerationQueue.find_entry(db, row.comment_type, row.id)
                if entry is not None:
                    db.delete(entry)
                remove_comment(db, row)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info("Admin %s deleted %s %s", auth.user_id, content_type, content_id)
        AuditLog.record(
            db,
            admin_id=auth.user_id,
            action_type=ACTION_DELETE,
            target_type=content_type,
            target_id=content_id,
            reason=reason,
            metadata=metadata,
        )
        self.revalidator.revalidate(ADMIN_PATH, _page_path(content_type))

    @staticmethod
    def _delete_discussion_comments(db: Session, discussion_id: str) -> int:
        comments = db.query(DiscussionComment).filter(
            DiscussionComment.discussion_id == discussion_id
        )
        comment_ids = [comment_id for (comment_id,) in comments.with_entities(DiscussionComment.id)]
        if comment_ids:
            db.query(ContentFlag).filter(
                ContentFlag.content_type == COMMENT_TYPE_DISCUSSION,
                ContentFlag.content_id.in_(comment_ids),
            ).delete(synchronize_session=False)
            # Replies point at siblings; unlink them so the bulk delete has no dangling parents.
            comments.update({DiscussionComment.parent_id: None}, synchronize_session=False)
            comments.delete(synchronize_session=False)
        db.query(ModerationQueueEntry).filter(
            ModerationQueueEntry.comment_type == COMMENT_TYPE_DISCUSSION,
            ModerationQueueEntry.discussion_id == discussion_id,
        ).delete(synchronize_session=False)
        return len(comment_ids)
