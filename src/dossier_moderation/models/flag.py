"""Ledger of community flags on comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import new_uuid


class ContentFlag(Base):
    """One flag raised by one user on one comment.

    The unique constraint closes the race between "already flagged?" and the
    insert; a comment's ``flag_count`` is always derived from these rows.
    """

    __tablename__ = "content_flags"
    __table_args__ = (
        UniqueConstraint(
            "content_id", "content_type", "user_id", name="uq_content_flags_content_user"
        ),
        Index("ix_content_flags_content", "content_id", "content_type"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    content_id: Mapped[str] = mapped_column(String(36), nullable=False)
    # "discussion" or "product"; the ledger spans both comment tables.
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)
    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profiles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
