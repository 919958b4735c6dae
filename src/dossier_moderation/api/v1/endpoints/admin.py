"""Admin endpoints: keyword blacklist, bans and the audit log."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from dossier_moderation.api.v1.dependencies import AuthDep, RevalidatorDep, SessionDep
from dossier_moderation.models import AdminAction, BlacklistKeyword, Profile
from dossier_moderation.schemas.admin import (
    AdminActionResponse,
    BanRequest,
    BlacklistKeywordCreate,
    BlacklistKeywordResponse,
    ProfileResponse,
)
from dossier_moderation.services.admin import AdminService
from dossier_moderation.services.audit import AuditLog

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/blacklist", response_model=list[BlacklistKeywordResponse])
async def list_blacklist(auth: AuthDep, db: SessionDep) -> list[BlacklistKeyword]:
    return AdminService.list_keywords(db, auth)


@router.post(
    "/blacklist",
    response_model=BlacklistKeywordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_blacklist_keyword(
    payload: BlacklistKeywordCreate,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> BlacklistKeyword:
    """Add a keyword that auto-flags any content containing it."""
    return AdminService(revalidator).add_keyword(db, auth, payload.keyword, payload.reason)


@router.delete("/blacklist/{keyword_id}", response_model=BlacklistKeywordResponse)
async def remove_blacklist_keyword(
    keyword_id: str,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> BlacklistKeyword:
    """Deactivate a blacklist keyword."""
    return AdminService(revalidator).remove_keyword(db, auth, keyword_id)


@router.get("/users", response_model=list[ProfileResponse])
async def list_users(
    auth: AuthDep,
    db: SessionDep,
    limit: int = Query(100, ge=1, le=500),
) -> list[Profile]:
    return AdminService.list_users(db, auth, limit=limit)


@router.post("/users/{user_id}/ban", response_model=ProfileResponse)
async def set_user_ban(
    user_id: str,
    payload: BanRequest,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> Profile:
    """Ban or unban a user."""
    return AdminService(revalidator).toggle_ban(db, auth, user_id, payload.ban, payload.reason)


@router.get("/audit", response_model=list[AdminActionResponse])
async def list_admin_actions(
    auth: AuthDep,
    db: SessionDep,
    limit: int = Query(100, ge=1, le=500),
    action_type: str | None = Query(None),
) -> list[AdminAction]:
    """Browse the admin audit log, newest first."""
    return AuditLog.list_actions(db, auth, limit=limit, action_type=action_type)
