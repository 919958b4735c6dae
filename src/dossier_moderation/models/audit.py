"""Append-only audit trail of administrative actions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import new_uuid

ACTION_RESTORE = "restore"
ACTION_PURGE = "purge"
ACTION_CLEAR_FLAGS = "clear_flags"
ACTION_DELETE = "delete"
ACTION_ADD_BLACKLIST = "add_blacklist"
ACTION_REMOVE_BLACKLIST = "remove_blacklist"
ACTION_BAN = "ban"
ACTION_UNBAN = "unban"

TARGET_COMMENT = "comment"
TARGET_DISCUSSION = "discussion"
TARGET_DISCUSSION_COMMENT = "discussion_comment"
TARGET_PRODUCT_COMMENT = "product_comment"
TARGET_KEYWORD = "keyword"
TARGET_USER = "user"


class AdminAction(Base):
    """One administrative mutation. Rows are never updated or deleted."""

    __tablename__ = "admin_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    admin_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    action_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    target_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_id: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Column is named "metadata"; the attribute avoids DeclarativeBase.metadata.
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
