"""Moderation queue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from dossier_moderation.api.v1.dependencies import AuthDep, RevalidatorDep, SessionDep
from dossier_moderation.models import ModerationQueueEntry
from dossier_moderation.schemas.content import CommentResponse
from dossier_moderation.schemas.moderation import (
    DisputeCreate,
    FlaggedContentItem,
    QueueEntryResponse,
    ResolutionRequest,
)
from dossier_moderation.services.admin import AdminService, FlaggedContent
from dossier_moderation.services.disputes import DisputeService
from dossier_moderation.services.moderation import Comment, ModerationQueue, ModerationService

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/queue", response_model=list[QueueEntryResponse])
async def get_moderation_queue(auth: AuthDep, db: SessionDep) -> list[ModerationQueueEntry]:
    """List archived comments, most flagged first. Admin only."""
    return ModerationQueue.list_queue(db, auth)


@router.get("/mine", response_model=list[QueueEntryResponse])
async def get_my_flagged_comments(auth: AuthDep, db: SessionDep) -> list[ModerationQueueEntry]:
    """List the caller's own archived comments."""
    return ModerationQueue.list_for_user(db, auth)


@router.post("/queue/{queue_item_id}/restore", response_model=CommentResponse)
async def restore_comment(
    queue_item_id: str,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
    payload: ResolutionRequest | None = None,
) -> Comment:
    """Restore an archived comment with its flags cleared."""
    reason = payload.reason if payload else None
    return ModerationService(revalidator).restore(db, auth, queue_item_id, reason)


@router.post("/queue/{queue_item_id}/purge")
async def purge_comment(
    queue_item_id: str,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
    payload: ResolutionRequest | None = None,
) -> dict[str, bool]:
    """Permanently delete an archived comment."""
    reason = payload.reason if payload else None
    purged = ModerationService(revalidator).purge(db, auth, queue_item_id, reason)
    return {"purged": purged}


@router.post("/queue/{queue_item_id}/dispute", response_model=QueueEntryResponse)
async def dispute_decision(
    queue_item_id: str,
    payload: DisputeCreate,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ModerationQueueEntry:
    """Contest the archival of your own comment."""
    return DisputeService(revalidator).submit_dispute(db, auth, queue_item_id, payload.reason)


@router.get("/flagged", response_model=list[FlaggedContentItem])
async def get_flagged_content(
    auth: AuthDep,
    db: SessionDep,
    limit: int = Query(20, ge=1, le=100),
) -> list[FlaggedContent]:
    """Overview of flagged discussions and comments. Admin only."""
    return AdminService.list_flagged_content(db, auth, limit=limit)


@router.post("/flagged/{content_type}/{content_id}/clear", response_model=FlaggedContentItem)
async def clear_content_flags(
    content_type: str,
    content_id: str,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
    payload: ResolutionRequest | None = None,
) -> FlaggedContent:
    """Clear the flags on a discussion or comment and keep it on display. Admin only."""
    reason = payload.reason if payload else None
    return AdminService(revalidator).clear_flags(db, auth, content_type, content_id, reason)


@router.delete("/flagged/{content_type}/{content_id}")
async def delete_flagged_content(
    content_type: str,
    content_id: str,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
    reason: str | None = Query(None, description="Why the content was removed"),
) -> dict[str, bool]:
    """Permanently delete a discussion or comment. Admin only."""
    AdminService(revalidator).delete_content(db, auth, content_type, content_id, reason)
    return {"deleted": True}
