"""Shared columns for the two comment tables.

Discussion comments and product comments are moderated identically; the mixin
keeps their shape in lockstep so the queue snapshot can rebuild either one.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from dossier_moderation.db.time import utcnow

COMMENT_TYPE_DISCUSSION = "discussion"
COMMENT_TYPE_PRODUCT = "product"
COMMENT_TYPES = (COMMENT_TYPE_DISCUSSION, COMMENT_TYPE_PRODUCT)


def new_uuid() -> str:
    """Return a random UUID4 as a string primary key."""
    return str(uuid.uuid4())


class CommentMixin:
    """Columns common to every moderated comment."""

    # Set by subclasses: content type tag and the name of the parent context column.
    comment_type = ""
    context_field = ""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    # Guests have no author id and carry a display name instead.
    guest_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    flag_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Set when the keyword blacklist flagged the row at creation; counts as one flag.
    auto_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @declared_attr
    def author_id(cls) -> Mapped[str | None]:
        return mapped_column(Text, ForeignKey("profiles.id"), nullable=True, index=True)

    @declared_attr
    def parent_id(cls) -> Mapped[str | None]:
        # Threading: replies point at a comment in the same table.
        return mapped_column(
            String(36),
            ForeignKey(f"{cls.__tablename__}.id"),
            nullable=True,
        )

    @property
    def context_id(self) -> str:
        """Identifier of the discussion or product this comment belongs to."""
        return getattr(self, self.context_field)
