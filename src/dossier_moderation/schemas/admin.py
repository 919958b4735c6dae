"""Admin-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlacklistKeywordCreate(BaseModel):
    """Schema for adding a blacklist keyword."""

    keyword: str = Field(..., description="Keyword; stored lower-cased and trimmed")
    reason: str | None = None


class BlacklistKeywordResponse(BaseModel):
    """Schema for a blacklist keyword returned by the API."""

    id: str
    keyword: str
    reason: str | None
    created_by: str | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BanRequest(BaseModel):
    """Schema for banning or unbanning a user."""

    ban: bool
    reason: str | None = None


class ProfileResponse(BaseModel):
    """Profile summary with ban state for the admin user list."""

    id: str
    username: str | None
    full_name: str | None
    is_admin: bool
    is_banned: bool
    banned_at: datetime | None
    ban_reason: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminActionResponse(BaseModel):
    """Audit log entry returned by the API."""

    id: str
    admin_id: str
    action_type: str
    target_type: str
    target_id: str
    reason: str | None
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
