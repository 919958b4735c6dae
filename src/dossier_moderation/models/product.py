"""SQLAlchemy models for product dossiers and their comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dossier_moderation.db.session import Base
from dossier_moderation.db.time import utcnow

from .comment import COMMENT_TYPE_PRODUCT, CommentMixin, new_uuid


class Product(Base):
    """Product dossier. Only the fields moderation needs are mapped here."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ProductComment(CommentMixin, Base):
    """Comment posted on a product dossier."""

    __tablename__ = "product_comments"

    comment_type = COMMENT_TYPE_PRODUCT
    context_field = "product_id"

    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
