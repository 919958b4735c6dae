"""Content creation endpoints: discussions and comments."""

from __future__ import annotations

from fastapi import APIRouter, status

from dossier_moderation.api.v1.dependencies import (
    AuthDep,
    RevalidatorDep,
    SafetyCheckerDep,
    SessionDep,
)
from dossier_moderation.models import COMMENT_TYPE_DISCUSSION, COMMENT_TYPE_PRODUCT, Discussion
from dossier_moderation.schemas.content import (
    CommentCreate,
    CommentResponse,
    DiscussionCreate,
    DiscussionResponse,
)
from dossier_moderation.services.classifier import AutoFlagClassifier
from dossier_moderation.services.content import ContentService
from dossier_moderation.services.moderation import Comment

router = APIRouter(tags=["content"])


def _content_service(safety: SafetyCheckerDep, revalidator: RevalidatorDep) -> ContentService:
    return ContentService(AutoFlagClassifier(safety), revalidator)


@router.post(
    "/discussions",
    response_model=DiscussionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_discussion(
    payload: DiscussionCreate,
    auth: AuthDep,
    db: SessionDep,
    safety: SafetyCheckerDep,
    revalidator: RevalidatorDep,
) -> Discussion:
    """Start a new discussion."""
    return await _content_service(safety, revalidator).create_discussion(
        db,
        auth,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        reference_url=payload.reference_url,
    )


@router.post(
    "/discussions/{discussion_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_discussion(
    discussion_id: str,
    payload: CommentCreate,
    auth: AuthDep,
    db: SessionDep,
    safety: SafetyCheckerDep,
    revalidator: RevalidatorDep,
) -> Comment:
    """Post a comment on a discussion. Guests may post with a display name."""
    return await _content_service(safety, revalidator).create_comment(
        db,
        auth,
        COMMENT_TYPE_DISCUSSION,
        discussion_id,
        payload.content,
        parent_id=payload.parent_id,
        guest_name=payload.guest_name,
    )


@router.post(
    "/products/{product_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_product(
    product_id: str,
    payload: CommentCreate,
    auth: AuthDep,
    db: SessionDep,
    safety: SafetyCheckerDep,
    revalidator: RevalidatorDep,
) -> Comment:
    """Post a comment on a product dossier."""
    return await _content_service(safety, revalidator).create_comment(
        db,
        auth,
        COMMENT_TYPE_PRODUCT,
        product_id,
        payload.content,
        parent_id=payload.parent_id,
        guest_name=payload.guest_name,
    )
