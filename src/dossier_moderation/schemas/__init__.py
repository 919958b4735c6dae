"""Pydantic schemas for the moderation API."""

from .admin import (
    AdminActionResponse,
    BanRequest,
    BlacklistKeywordCreate,
    BlacklistKeywordResponse,
    ProfileResponse,
)
from .content import (
    CommentCreate,
    CommentResponse,
    DiscussionCreate,
    DiscussionResponse,
    FlagCreate,
    FlagResponse,
)
from .moderation import (
    DisputeCreate,
    FlaggedContentItem,
    QueueEntryResponse,
    ResolutionRequest,
)

__all__ = [
    "AdminActionResponse", "BanRequest", "BlacklistKeywordCreate", "BlacklistKeywordResponse",
    "ProfileResponse",
    "CommentCreate", "CommentResponse", "DiscussionCreate", "DiscussionResponse",
    "FlagCreate", "FlagResponse",
    "DisputeCreate", "FlaggedContentItem", "QueueEntryResponse", "ResolutionRequest",
]
