# mypy: ignore-errors
"""Tests for the blacklist, bans and flagged content outside the queue."""

import pytest

from dossier_moderation.core.errors import NotFoundError, UnauthorizedError, ValidationError
from dossier_moderation.models import (
    AdminAction,
    BlacklistKeyword,
    ContentFlag,
    Discussion,
    DiscussionComment,
    ModerationQueueEntry,
    Profile,
)
from dossier_moderation.services.admin import AdminService
from dossier_moderation.services.bans import BanUpdate
from dossier_moderation.services.moderation import ModerationQueue


@pytest.fixture()
def admin_service(revalidator):
    return AdminService(revalidator)


def test_add_keyword_normalizes_and_audits(admin_service, db_session, admin_auth) -> None:
    row = admin_service.add_keyword(db_session, admin_auth, "  SpamWord ", "link farms")

    assert row.keyword == "spamword"
    assert row.is_active is True
    assert row.created_by == admin_auth.user_id
    action = db_session.query(AdminAction).one()
    assert action.action_type == "add_blacklist"
    assert action.target_type == "keyword"
    assert action.metadata_ == {"keyword": "spamword"}


def test_add_keyword_always_inserts(admin_service, db_session, admin_auth) -> None:
    admin_service.add_keyword(db_session, admin_auth, "scam")
    admin_service.add_keyword(db_session, admin_auth, "SCAM")

    assert db_session.query(BlacklistKeyword).count() == 2


def test_empty_keyword_is_rejected(admin_service, db_session, admin_auth) -> None:
    with pytest.raises(ValidationError):
        admin_service.add_keyword(db_session, admin_auth, "   ")
    assert db_session.query(AdminAction).count() == 0


def test_blacklist_requires_admin(admin_service, db_session, member_auth) -> None:
    with pytest.raises(UnauthorizedError):
        admin_service.add_keyword(db_session, member_auth, "scam")
    with pytest.raises(UnauthorizedError):
        AdminService.list_keywords(db_session, member_auth)


def test_remove_keyword_deactivates(admin_service, db_session, admin_auth, blacklisted) -> None:
    admin_service.remove_keyword(db_session, admin_auth, blacklisted.id)

    db_session.refresh(blacklisted)
    assert blacklisted.is_active is False
    assert AdminService.list_keywords(db_session, admin_auth) == []
    action = db_session.query(AdminAction).one()
    assert action.action_type == "remove_blacklist"
    assert action.metadata_ == {"keyword": "spamword"}


def test_remove_unknown_keyword(admin_service, db_session, admin_auth) -> None:
    with pytest.raises(NotFoundError):
        admin_service.remove_keyword(db_session, admin_auth, "missing")


def test_ban_and_unban(admin_service, db_session, admin_auth, member) -> None:
    banned = admin_service.toggle_ban(db_session, admin_auth, member.id, True, "  spamming  ")

    assert banned.is_banned is True
    assert banned.banned_at is not None
    assert banned.ban_reason == "spamming"

    unbanned = admin_service.toggle_ban(db_session, admin_auth, member.id, False)

    assert unbanned.is_banned is False
    assert unbanned.banned_at is None
    assert unbanned.ban_reason is None
    actions = sorted(a.action_type for a in db_session.query(AdminAction))
    assert actions == ["ban", "unban"]


def test_ban_unknown_user(admin_service, db_session, admin_auth) -> None:
    with pytest.raises(NotFoundError):
        admin_service.toggle_ban(db_session, admin_auth, "ghost", True)


def test_ban_requires_admin(admin_service, db_session, member_auth, other_members) -> None:
    with pytest.raises(UnauthorizedError):
        admin_service.toggle_ban(db_session, member_auth, other_members[0].id, True)
    assert db_session.get(Profile, other_members[0].id).is_banned is False


def test_ban_update_writes_every_ban_column() -> None:
    profile = Profile(id="p", is_banned=True, ban_reason="old")

    BanUpdate.unban().apply(profile)

    assert (profile.is_banned, profile.banned_at, profile.ban_reason) == (False, None, None)


def test_list_users(db_session, admin_auth, member) -> None:
    ids = {p.id for p in AdminService.list_users(db_session, admin_auth)}
    assert {member.id, admin_auth.user_id} <= ids


def test_flagged_content_overview(db_session, admin_auth, discussion_comment, product_comment, discussion) -> None:
    discussion_comment.flag_count = 2
    discussion_comment.is_flagged = True
    product_comment.flag_count = 4
    product_comment.is_flagged = True
    db_session.commit()

    items = AdminService.list_flagged_content(db_session, admin_auth)

    assert [(i.content_type, i.flag_count) for i in items] == [
        ("product_comment", 4),
        ("discussion_comment", 2),
    ]
    assert all(item.id != discussion.id for item in items)


def test_flagged_content_requires_admin(db_session, member_auth) -> None:
    with pytest.raises(UnauthorizedError):
        AdminService.list_flagged_content(db_session, member_auth)


def _flag(db_session, comment, profiles) -> None:
    for profile in profiles:
        db_session.add(ContentFlag(content_id=comment.id, content_type=comment.comment_type, user_id=profile.id))
    comment.flag_count = len(profiles)
    comment.is_flagged = True
    db_session.commit()


def test_clear_flags_on_discussion(admin_service, db_session, admin_auth, discussion, revalidator) -> None:
    discussion.flag_count = 1
    discussion.is_flagged = True
    db_session.commit()

    item = admin_service.clear_flags(db_session, admin_auth, "discussion", discussion.id, "not spam")

    assert (item.content_type, item.flag_count, item.is_flagged) == ("discussion", 0, False)
    db_session.refresh(discussion)
    assert (discussion.flag_count, discussion.is_flagged) == (0, False)
    assert AdminService.list_flagged_content(db_session, admin_auth) == []

    action = db_session.query(AdminAction).one()
    assert action.action_type == "clear_flags"
    assert action.target_type == "discussion"
    assert action.target_id == discussion.id
    assert action.reason == "not spam"
    assert action.metadata_["flag_count"] == 1
    assert revalidator.paths == ["/admin", "/discussions"]


def test_clear_flags_on_comment_resets_ledger_and_queue(
    admin_service, db_session, admin_auth, discussion_comment, other_members
) -> None:
    _flag(db_session, discussion_comment, other_members[:3])
    ModerationQueue.archive(db_session, discussion_comment)
    db_session.commit()

    admin_service.clear_flags(db_session, admin_auth, "discussion_comment", discussion_comment.id)

    db_session.refresh(discussion_comment)
    assert (discussion_comment.flag_count, discussion_comment.is_flagged) == (0, False)
    assert db_session.query(ContentFlag).count() == 0
    assert db_session.query(ModerationQueueEntry).count() == 0
    action = db_session.query(AdminAction).one()
    assert action.metadata_["flags_removed"] == 3
    assert action.metadata_["dequeued"] is True


def test_clear_flags_on_product_comment_below_threshold(
    admin_service, db_session, admin_auth, product_comment, other_members, revalidator
) -> None:
    _flag(db_session, product_comment, other_members[:1])

    admin_service.clear_flags(db_session, admin_auth, "product_comment", product_comment.id)

    db_session.refresh(product_comment)
    assert product_comment.flag_count == 0
    assert db_session.query(ContentFlag).count() == 0
    assert "/products" in revalidator.paths


def test_delete_comment_reparents_replies(
    admin_service, db_session, admin_auth, discussion_comment, member, other_members
) -> None:
    reply = DiscussionComment(
        discussion_id=discussion_comment.discussion_id,
        author_id=member.id,
        parent_id=discussion_comment.id,
        content="Same here.",
    )
    db_session.add(reply)
    db_session.commit()
    _flag(db_session, discussion_comment, other_members[:2])
    comment_id = discussion_comment.id

    admin_service.delete_content(db_session, admin_auth, "discussion_comment", comment_id, "abusive")

    assert db_session.query(DiscussionComment).filter_by(id=comment_id).count() == 0
    db_session.refresh(reply)
    assert reply.parent_id is None
    assert db_session.query(ContentFlag).count() == 0
    action = db_session.query(AdminAction).one()
    assert (action.action_type, action.target_type, action.target_id) == (
        "delete",
        "discussion_comment",
        comment_id,
    )


def test_delete_discussion_removes_its_comments(
    admin_service, db_session, admin_auth, discussion, discussion_comment, other_members
) -> None:
    _flag(db_session, discussion_comment, other_members[:3])
    ModerationQueue.archive(db_session, discussion_comment)
    discussion.is_flagged = True
    discussion.flag_count = 1
    db_session.commit()
    discussion_id = discussion.id

    admin_service.delete_content(db_session, admin_auth, "discussion", discussion_id)

    assert db_session.query(Discussion).filter_by(id=discussion_id).count() == 0
    assert db_session.query(DiscussionComment).count() == 0
    assert db_session.query(ContentFlag).count() == 0
    assert db_session.query(ModerationQueueEntry).count() == 0
    action = db_session.query(AdminAction).one()
    assert action.metadata_["comments_removed"] == 1


def test_flagged_content_actions_validate_target(admin_service, db_session, admin_auth, member_auth, discussion) -> None:
    with pytest.raises(UnauthorizedError):
        admin_service.clear_flags(db_session, member_auth, "discussion", discussion.id)
    with pytest.raises(UnauthorizedError):
        admin_service.delete_content(db_session, member_auth, "discussion", discussion.id)
    with pytest.raises(ValidationError):
        admin_service.clear_flags(db_session, admin_auth, "product", discussion.id)
    with pytest.raises(NotFoundError):
        admin_service.delete_content(db_session, admin_auth, "discussion_comment", "missing")

    assert db_session.query(AdminAction).count() == 0
