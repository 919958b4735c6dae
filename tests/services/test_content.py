# mypy: ignore-errors
"""Tests for content creation behind the ban gate and the classifier."""

import pytest

from dossier_moderation.core.errors import (
    AuthenticationRequiredError,
    ContentRejectedError,
    NotFoundError,
    UserBannedError,
    ValidationError,
)
from dossier_moderation.core.security import GUEST
from dossier_moderation.models import (
    Discussion,
    DiscussionComment,
    ModerationQueueEntry,
    ProductComment,
)
from dossier_moderation.services.admin import AdminService
from dossier_moderation.services.classifier import AutoFlagClassifier
from dossier_moderation.services.content import ContentService, slugify
from dossier_moderation.services.safety import SafetyVerdict


@pytest.fixture()
def content_service(safety_checker, revalidator):
    return ContentService(AutoFlagClassifier(safety_checker), revalidator)


@pytest.mark.asyncio
async def test_member_comment_skips_ai_screening(content_service, db_session, member_auth, discussion, safety_checker) -> None:
    comment = await content_service.create_comment(
        db_session, member_auth, "discussion", discussion.id, "  Works fine for me.  "
    )

    assert comment.content == "Works fine for me."
    assert comment.author_id == member_auth.user_id
    assert comment.is_flagged is False
    assert safety_checker.calls == []


@pytest.mark.asyncio
async def test_guest_comment_is_screened(content_service, db_session, product, safety_checker) -> None:
    comment = await content_service.create_comment(
        db_session, GUEST, "product", product.id, "Great value.", guest_name=" Robin "
    )

    assert isinstance(comment, ProductComment)
    assert comment.author_id is None
    assert comment.guest_name == "Robin"
    assert safety_checker.calls == [("guest", "Great value.")]


@pytest.mark.asyncio
async def test_unsafe_guest_comment_creates_nothing(content_service, db_session, discussion, safety_checker) -> None:
    safety_checker.verdict = SafetyVerdict(False, "harassment")

    with pytest.raises(ContentRejectedError) as exc_info:
        await content_service.create_comment(
            db_session, GUEST, "discussion", discussion.id, "You are all idiots", guest_name="Troll"
        )

    assert exc_info.value.public_message == "Content not allowed: harassment"
    assert db_session.query(DiscussionComment).count() == 0
    assert db_session.query(ModerationQueueEntry).count() == 0


@pytest.mark.asyncio
async def test_guest_needs_display_name(content_service, db_session, discussion, safety_checker) -> None:
    with pytest.raises(ValidationError):
        await content_service.create_comment(db_session, GUEST, "discussion", discussion.id, "Hello there")
    assert safety_checker.calls == []


@pytest.mark.asyncio
async def test_blacklisted_member_comment_is_created_and_archived(
    content_service, db_session, member_auth, discussion, blacklisted, revalidator
) -> None:
    comment = await content_service.create_comment(
        db_session, member_auth, "discussion", discussion.id, "Visit SPAMWORD dot com"
    )

    assert comment.flag_count == 1
    assert comment.is_flagged is True
    assert comment.auto_flagged is True
    entry = db_session.query(ModerationQueueEntry).one()
    assert entry.original_comment_id == comment.id
    assert entry.matched_keywords == ["spamword"]
    assert entry.status == "pending"
    assert "/admin" in revalidator.paths


@pytest.mark.asyncio
async def test_comment_length_limits(content_service, db_session, member_auth, discussion) -> None:
    with pytest.raises(ValidationError):
        await content_service.create_comment(db_session, member_auth, "discussion", discussion.id, " hi ")
    with pytest.raises(ValidationError):
        await content_service.create_comment(
            db_session, member_auth, "discussion", discussion.id, "x" * 2001
        )


@pytest.mark.asyncio
async def test_reply_must_stay_in_thread(content_service, db_session, member_auth, discussion, member) -> None:
    other = Discussion(
        title="Another thread",
        slug="another-thread-1",
        content="A different discussion body entirely.",
        author_id=member.id,
        tags=[],
    )
    db_session.add(other)
    db_session.commit()
    parent = await content_service.create_comment(
        db_session, member_auth, "discussion", other.id, "Parent elsewhere"
    )

    with pytest.raises(ValidationError):
        await content_service.create_comment(
            db_session, member_auth, "discussion", discussion.id, "Reply", parent_id=parent.id
        )


@pytest.mark.asyncio
async def test_comment_on_missing_context(content_service, db_session, member_auth) -> None:
    with pytest.raises(NotFoundError):
        await content_service.create_comment(db_session, member_auth, "product", "missing", "Hello")


@pytest.mark.asyncio
async def test_ban_gate_blocks_and_releases(content_service, db_session, admin_auth, member_auth, discussion, revalidator) -> None:
    admin_service = AdminService(revalidator)
    admin_service.toggle_ban(db_session, admin_auth, member_auth.user_id, True, "spam")

    with pytest.raises(UserBannedError):
        await content_service.create_comment(
            db_session, member_auth, "discussion", discussion.id, "Let me back in"
        )
    with pytest.raises(UserBannedError):
        await content_service.create_discussion(
            db_session, member_auth, "Banned thread", "This body is long enough to pass."
        )

    admin_service.toggle_ban(db_session, admin_auth, member_auth.user_id, False)
    comment = await content_service.create_comment(
        db_session, member_auth, "discussion", discussion.id, "Thanks for unbanning me"
    )
    assert comment.id is not None


@pytest.mark.asyncio
async def test_create_discussion(content_service, db_session, member_auth) -> None:
    row = await content_service.create_discussion(
        db_session,
        member_auth,
        "Router overheating",
        "Mine gets very hot after an hour of streaming.",
        tags=["hardware", " ", "heat"],
        reference_url="https://example.com/thread",
    )

    assert row.tags == ["hardware", "heat"]
    assert row.slug.startswith("router-overheating-")
    assert row.is_flagged is False
    assert row.reference_url == "https://example.com/thread"


@pytest.mark.asyncio
async def test_blacklisted_discussion_is_flagged_in_place(content_service, db_session, member_auth, blacklisted) -> None:
    row = await content_service.create_discussion(
        db_session, member_auth, "Cheap spamword deals", "Follow the link for the best deals ever."
    )

    assert row.is_flagged is True
    assert row.flag_count == 1
    assert db_session.query(ModerationQueueEntry).count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("title", "body", "tags", "url"),
    [
        ("Hey", "A body that is long enough to pass.", [], None),
        ("A good title", "Too short", [], None),
        ("A good title", "A body that is long enough to pass.", ["a", "b", "c", "d", "e", "f"], None),
        ("A good title", "A body that is long enough to pass.", [], "ftp://example.com/file"),
        ("A good title", "A body that is long enough to pass.", [], "not a url"),
    ],
)
async def test_discussion_validation(content_service, db_session, member_auth, title, body, tags, url) -> None:
    with pytest.raises(ValidationError):
        await content_service.create_discussion(db_session, member_auth, title, body, tags, url)
    assert db_session.query(Discussion).count() == 0


@pytest.mark.asyncio
async def test_guests_cannot_start_discussions(content_service, db_session) -> None:
    with pytest.raises(AuthenticationRequiredError):
        await content_service.create_discussion(
            db_session, GUEST, "Guest thread", "Guests are not allowed to do this."
        )


def test_slugify_normalizes_title() -> None:
    slug = slugify("  Hello, World! 2024 ")
    base, _, stamp = slug.rpartition("-")
    assert base == "hello-world-2024"
    assert stamp.isdigit()
