"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QueueEntryResponse(BaseModel):
    """Schema for a moderation queue entry returned by the API."""

    id: str
    original_comment_id: str
    comment_type: str
    discussion_id: str | None
    product_id: str | None
    parent_id: str | None
    author_id: str | None
    guest_name: str | None
    content: str
    flag_count: int
    matched_keywords: list[str] | None = None
    original_created_at: datetime
    queued_at: datetime
    status: str
    dispute_reason: str | None

    model_config = ConfigDict(from_attributes=True)


class ResolutionRequest(BaseModel):
    """Optional admin note attached to a restore or purge."""

    reason: str | None = Field(None, description="Why the admin resolved the item this way")


class DisputeCreate(BaseModel):
    """Schema for an author contesting their queued comment."""

    reason: str = Field(..., description="Why the content should be restored")


class FlaggedContentItem(BaseModel):
    """Row of the admin overview of flagged content across tables."""

    id: str
    content_type: str
    author_id: str | None
    preview: str
    flag_count: int
    is_flagged: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
