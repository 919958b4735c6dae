"""Content-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for posting a comment on a discussion or product."""

    content: str = Field(..., description="Comment body; trimmed before validation")
    parent_id: str | None = Field(None, description="Comment being replied to")
    guest_name: str | None = Field(None, description="Display name for guest posts")


class CommentResponse(BaseModel):
    """Schema for a comment returned by the API."""

    id: str
    comment_type: str
    context_id: str
    author_id: str | None
    guest_name: str | None
    parent_id: str | None
    content: str
    flag_count: int
    is_flagged: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscussionCreate(BaseModel):
    """Schema for starting a discussion."""

    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    reference_url: str | None = None


class DiscussionResponse(BaseModel):
    """Schema for a discussion returned by the API."""

    id: str
    title: str
    slug: str
    author_id: str
    tags: list[str]
    reference_url: str | None
    flag_count: int
    is_flagged: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FlagCreate(BaseModel):
    """Schema for flagging a comment."""

    content_type: Literal["discussion", "product"]
    content_id: str


class FlagResponse(BaseModel):
    """Result of a flag: the new count and whether the comment was archived."""

    content_id: str
    content_type: str
    flag_count: int
    archived: bool
