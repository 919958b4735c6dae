"""Flagging endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from dossier_moderation.api.v1.dependencies import AuthDep, RevalidatorDep, SessionDep
from dossier_moderation.schemas.content import FlagCreate, FlagResponse
from dossier_moderation.services.flags import FlagLedger

router = APIRouter(prefix="/flags", tags=["flags"])


@router.post("", response_model=FlagResponse, status_code=status.HTTP_201_CREATED)
async def flag_comment(
    payload: FlagCreate,
    auth: AuthDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> FlagResponse:
    """Flag a comment. Each user may flag a given comment once."""
    result = FlagLedger(revalidator).add_flag(db, auth, payload.content_type, payload.content_id)
    return FlagResponse(
        content_id=result.content_id,
        content_type=result.content_type,
        flag_count=result.flag_count,
        archived=result.archived,
    )
