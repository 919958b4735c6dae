# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from dossier_moderation.api.v1 import dependencies as api_dependencies
from dossier_moderation.core.security import AuthContext, create_access_token
from dossier_moderation.db.session import Base
from dossier_moderation.db.session import get_db as app_get_session
from dossier_moderation.main import app as fastapi_app
from dossier_moderation.models import (
    BlacklistKeyword,
    Discussion,
    DiscussionComment,
    Product,
    ProductComment,
    Profile,
)
from dossier_moderation.services.revalidation import Revalidator
from dossier_moderation.services.safety import SafetyVerdict

TEST_DB_URL = "sqlite://"

_SLUG_COUNTER = count(1)


class FakeSafetyChecker:
    """Safety checker that answers from a fixed verdict and records calls."""

    def __init__(self, verdict: SafetyVerdict | None = None) -> None:
        self.verdict = verdict or SafetyVerdict(True)
        self.calls: list[tuple[str, str]] = []

    async def check(self, content: str) -> SafetyVerdict:
        self.calls.append(("member", content))
        return self.verdict

    async def check_for_guest(self, content: str) -> SafetyVerdict:
        self.calls.append(("guest", content))
        return self.verdict


class RecordingRevalidator(Revalidator):
    """Revalidator that remembers paths instead of calling a webhook."""

    def __init__(self) -> None:
        super().__init__(webhook_url="")
        self.paths: list[str] = []

    def revalidate(self, *paths: str) -> None:
        self.paths.extend(paths)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def safety_checker() -> FakeSafetyChecker:
    return FakeSafetyChecker()


@pytest.fixture()
def revalidator() -> RecordingRevalidator:
    return RecordingRevalidator()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    safety_checker: FakeSafetyChecker,
    revalidator: RecordingRevalidator,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[api_dependencies.get_safety_checker] = lambda: safety_checker
    app.dependency_overrides[api_dependencies.get_page_revalidator] = lambda: revalidator
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_profile(db: Session, user_id: str, *, is_admin: bool = False) -> Profile:
    profile = Profile(id=user_id, username=user_id, full_name=user_id.title(), is_admin=is_admin)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture()
def member(db_session: Session) -> Profile:
    """A regular signed-in member."""
    return _make_profile(db_session, "member-1")


@pytest.fixture()
def other_members(db_session: Session) -> list[Profile]:
    """Five more members, enough to cross the flag threshold."""
    return [_make_profile(db_session, f"member-{i}") for i in range(2, 7)]


@pytest.fixture()
def admin(db_session: Session) -> Profile:
    return _make_profile(db_session, "admin-1", is_admin=True)


@pytest.fixture()
def member_auth(member: Profile) -> AuthContext:
    return AuthContext(user_id=member.id)


@pytest.fixture()
def admin_auth(admin: Profile) -> AuthContext:
    return AuthContext(user_id=admin.id, is_admin=True)


@pytest.fixture()
def member_headers(member: Profile) -> dict[str, str]:
    """Return authorization headers for the member."""
    return {"Authorization": f"Bearer {create_access_token(member.id)}"}


@pytest.fixture()
def admin_headers(admin: Profile) -> dict[str, str]:
    """Return authorization headers for the admin."""
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}


@pytest.fixture()
def discussion(db_session: Session, member: Profile) -> Discussion:
    """A discussion thread owned by the member."""
    n = next(_SLUG_COUNTER)
    row = Discussion(
        title="Is the new firmware safe?",
        slug=f"is-the-new-firmware-safe-{n}",
        content="Opening post with enough words to be a discussion.",
        author_id=member.id,
        tags=["firmware"],
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def product(db_session: Session) -> Product:
    n = next(_SLUG_COUNTER)
    row = Product(title="Acme Router X1", slug=f"acme-router-x1-{n}")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def discussion_comment(db_session: Session, discussion: Discussion, member: Profile) -> DiscussionComment:
    """A comment by the member on the discussion."""
    row = DiscussionComment(
        discussion_id=discussion.id,
        author_id=member.id,
        content="I think the update bricked my device.",
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def product_comment(db_session: Session, product: Product, member: Profile) -> ProductComment:
    row = ProductComment(
        product_id=product.id,
        author_id=member.id,
        content="Battery life is worse than advertised.",
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def blacklisted(db_session: Session, admin: Profile) -> BlacklistKeyword:
    """An active blacklist keyword."""
    row = BlacklistKeyword(keyword="spamword", reason="spam", created_by=admin.id)
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row
