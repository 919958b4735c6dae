"""Content creation: comments and discussions pass through the moderation gate."""

from __future__ import annotations

import logging
import re
import time

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_moderation.core.errors import NotFoundError, ValidationError
from dossier_moderation.core.security import AuthContext, require_user
from dossier_moderation.core.settings import settings
from dossier_moderation.models import COMMENT_TYPE_DISCUSSION, Discussion
from dossier_moderation.services.bans import ensure_not_banned
from dossier_moderation.services.classifier import AutoFlagClassifier
from dossier_moderation.services.moderation import (
    Comment,
    ModerationQueue,
    comment_model,
    context_model,
)
from dossier_moderation.services.revalidation import (
    ADMIN_PATH,
    DISCUSSIONS_PATH,
    PRODUCTS_PATH,
    Revalidator,
    get_revalidator,
)

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(AnyHttpUrl)
_slug_strip = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lower-case, hyphen-separated form of a title, suffixed with a ms timestamp."""
    base = _slug_strip.sub("-", title.lower()).strip("-") or "discussion"
    return f"{base}-{int(time.time() * 1000)}"


def validate_comment_body(content: str) -> str:
    body = (content or "").strip()
    if len(body) < settings.comment_min_length:
        raise ValidationError(
            f"Comment must be at least {settings.comment_min_length} characters"
        )
    if len(body) > settings.comment_max_length:
        raise ValidationError(
            f"Comment must be at most {settings.comment_max_length} characters"
        )
    return body


def validate_guest_name(guest_name: str | None) -> str:
    name = (guest_name or "").strip()
    if not name:
        raise ValidationError("Guest comments need a display name")
    if len(name) > settings.guest_name_max_length:
        raise ValidationError(
            f"Guest name must be at most {settings.guest_name_max_length} characters"
        )
    return name


def validate_reference_url(reference_url: str | None) -> str | None:
    url = (reference_url or "").strip()
    if not url:
        return None
    try:
        _http_url.validate_python(url)
    except PydanticValidationError as err:
        raise ValidationError("Reference URL must be an absolute http(s) URL") from err
    return url


def validate_tags(tags: list[str] | None) -> list[str]:
    cleaned = [tag.strip() for tag in tags or [] if tag and tag.strip()]
    if len(cleaned) > settings.discussion_max_tags:
        raise ValidationError(f"At most {settings.discussion_max_tags} tags are allowed")
    return cleaned


class ContentService:
    """Creates comments and discussions behind the ban gate and the classifier."""

    def __init__(
        self,
        classifier: AutoFlagClassifier,
        revalidator: Revalidator | None = None,
    ) -> None:
        self.classifier = classifier
        self.revalidator = revalidator or get_revalidator()

    async def create_comment(
        self,
        db: Session,
        auth: AuthContext,
        content_type: str,
        context_id: str,
        content: str,
        *,
        parent_id: str | None = None,
        guest_name: str | None = None,
    ) -> Comment:
        """Post a comment on a discussion or product.

        Guests are screened by the safety service and rejected outright when
        it objects. Any author whose text hits the keyword blacklist gets the
        comment written, flagged and archived in one transaction.

        Raises:
            UserBannedError: If the author is banned.
            ValidationError: On bad length, missing guest name or a foreign parent.
            NotFoundError: If the discussion or product does not exist.
            ContentRejectedError: If a guest's content fails the safety check.
        """
        model = comment_model(content_type)
        ensure_not_banned(db, auth.user_id)

        body = validate_comment_body(content)
        author_guest_name = validate_guest_name(guest_name) if auth.is_guest else None

        if db.get(context_model(content_type), context_id) is None:
            raise NotFoundError(f"{content_type.capitalize()} not found")
        if parent_id is not None:
            parent = db.get(model, parent_id)
            if parent is None or parent.context_id != context_id:
                raise ValidationError("Parent comment does not belong to this thread")

        classification = await self.classifier.classify(db, auth, body)

        comment = model(
            content=body,
            author_id=auth.user_id,
            guest_name=author_guest_name,
            parent_id=parent_id,
            **{model.context_field: context_id},
        )
        if classification.should_auto_flag:
            comment.flag_count = 1
            comment.is_flagged = True
            comment.auto_flagged = True

        db.add(comment)
        try:
            db.flush()
            if classification.should_auto_flag:
                ModerationQueue.archive(
                    db, comment, matched_keywords=classification.matched_keywords
                )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(comment)

        logger.info(
            "Created %s comment %s on %s%s",
            content_type,
            comment.id,
            context_id,
            " (auto-flagged)" if classification.should_auto_flag else "",
        )
        paths = [DISCUSSIONS_PATH if content_type == COMMENT_TYPE_DISCUSSION else PRODUCTS_PATH]
        if classification.should_auto_flag:
            paths.append(ADMIN_PATH)
        self.revalidator.revalidate(*paths)
        return comment

    async def create_discussion(
        self,
        db: Session,
        auth: AuthContext,
        title: str,
        content: str,
        tags: list[str] | None = None,
        reference_url: str | None = None,
    ) -> Discussion:
        """Start a discussion. Blacklist hits flag it in place."""
        user_id = require_user(auth, "start a discussion")
        ensure_not_banned(db, user_id)

        clean_title = (title or "").strip()
        if not (
            settings.discussion_title_min_length
            <= len(clean_title)
            <= settings.discussion_title_max_length
        ):
            raise ValidationError(
                f"Title must be between {settings.discussion_title_min_length} and "
                f"{settings.discussion_title_max_length} characters"
            )
        body = (content or "").strip()
        if len(body) < settings.discussion_body_min_length:
            raise ValidationError(
                f"Discussion must be at least {settings.discussion_body_min_length} characters"
            )
        clean_tags = validate_tags(tags)
        url = validate_reference_url(reference_url)

        classification = await self.classifier.classify(db, auth, f"{clean_title}\n{body}")

        discussion = Discussion(
            title=clean_title,
            slug=slugify(clean_title),
            content=body,
            author_id=user_id,
            tags=clean_tags,
            reference_url=url,
            flag_count=1 if classification.should_auto_flag else 0,
            is_flagged=classification.should_auto_flag,
        )
        db.add(discussion)
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(discussion)

        logger.info("User %s started discussion %s", user_id, discussion.id)
        paths = [DISCUSSIONS_PATH]
        if classification.should_auto_flag:
            paths.append(ADMIN_PATH)
        self.revalidator.revalidate(*paths)
        return discussion
