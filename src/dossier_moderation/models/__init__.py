"""SQLAlchemy models for the moderation engine."""

from .audit import AdminAction
from .blacklist import BlacklistKeyword
from .comment import COMMENT_TYPE_DISCUSSION, COMMENT_TYPE_PRODUCT, COMMENT_TYPES
from .discussion import Discussion, DiscussionComment
from .flag import ContentFlag
from .moderation import ModerationQueueEntry
from .product import Product, ProductComment
from .profile import Profile

# Home table for each comment type.
COMMENT_MODELS: dict[str, type[DiscussionComment] | type[ProductComment]] = {
    COMMENT_TYPE_DISCUSSION: DiscussionComment,
    COMMENT_TYPE_PRODUCT: ProductComment,
}

__all__ = [
    "AdminAction",
    "BlacklistKeyword",
    "COMMENT_MODELS", "COMMENT_TYPES", "COMMENT_TYPE_DISCUSSION", "COMMENT_TYPE_PRODUCT",
    "ContentFlag",
    "Discussion", "DiscussionComment",
    "ModerationQueueEntry",
    "Product", "ProductComment",
    "Profile",
]
