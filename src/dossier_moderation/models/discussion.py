"""SQLAlchemy models for discussions and their comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import COMMENT_TYPE_DISCUSSION, CommentMixin, new_uuid


class Discussion(Base):
    """Community discussion thread."""

    __tablename__ = "discussions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    reference_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    flag_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class DiscussionComment(CommentMixin, Base):
    """Comment posted on a discussion."""

    __tablename__ = "discussion_comments"

    comment_type = COMMENT_TYPE_DISCUSSION
    context_field = "discussion_id"

    discussion_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("discussions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
