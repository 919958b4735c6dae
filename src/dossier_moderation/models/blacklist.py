"""Keyword blacklist used by the auto-flag classifier."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import new_uuid


class BlacklistKeyword(Base):
    """Lower-cased keyword that auto-flags any content containing it.

    Rows are deactivated rather than deleted so audit entries stay coherent.
    """

    __tablename__ = "keyword_blacklist"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    keyword: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
