"""Models tracking archived content awaiting admin review."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import new_uuid

QUEUE_STATUS_PENDING = "pending"
QUEUE_STATUS_DISPUTED = "disputed"


class ModerationQueueEntry(Base):
    """Snapshot of a flagged comment taken when it was archived.

    The snapshot holds everything needed to rebuild the comment in its home
    table, so a restore works whether or not the original row still exists.
    """

    __tablename__ = "moderation_queue"
    __table_args__ = (
        # One snapshot per archived comment at a time.
        UniqueConstraint(
            "original_comment_id", "comment_type", name="uq_moderation_queue_original"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    original_comment_id: Mapped[str] = mapped_column(String(36), nullable=False)
    comment_type: Mapped[str] = mapped_column(String(16), nullable=False)

    # Parent context; exactly one is set depending on comment_type.
    discussion_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    product_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    parent_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    author_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    guest_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    flag_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matched_keywords: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    original_created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    queued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=QUEUE_STATUS_PENDING
    )
    dispute_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    disputed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
