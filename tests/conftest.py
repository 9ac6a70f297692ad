# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator, Sequence
from datetime import UTC, datetime
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("ADMIN_EMAILS", "ops@example.com")

from rogha.api.v1.dependencies import get_notifier_dep
from rogha.core.security import create_access_token
from rogha.db.session import Base
from rogha.db.session import get_db as app_get_session
from rogha.main import app as fastapi_app
from rogha.models import AudienceType, Friendship, FriendshipStatus, Post, PostStatus, User
from rogha.services import posts as post_service
from rogha.services.friendships import canonical_pair

TEST_DB_URL = "sqlite://"
CRON_SECRET = os.environ["CRON_SECRET"]
ADMIN_EMAIL = os.environ["ADMIN_EMAILS"].split(",")[0]

# Wednesday of the week that starts Monday 2026-03-02 00:00 America/Los_Angeles.
SUBMIT_NOW = datetime(2026, 3, 4, 18, 0, tzinfo=UTC)
PUBLISH_NOW = datetime(2026, 3, 9, 7, 0, tzinfo=UTC)

_USER_COUNTER = count(1)


class RecordingNotifier:
    """Submission notifier that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []

    def notify_submission(self, post_id: str, recipient_ids: Sequence[str]) -> None:
        self.calls.append((post_id, list(recipient_ids)))

    @property
    def recipients(self) -> list[str]:
        return [user_id for _, batch in self.calls for user_id in batch]


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN; take over so SAVEPOINT and ROLLBACK behave.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # pragma: no cover
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    notifier: RecordingNotifier,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notifier_dep] = lambda: notifier
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_notifier_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with unique e-mails."""

    def _make(
        display_name: str | None = None,
        email: str | None = None,
        user_id: str | None = None,
    ) -> User:
        n = next(_USER_COUNTER)
        user = User(
            display_name=display_name or f"User {n}",
            email=email or f"user{n}@example.com",
        )
        if user_id is not None:
            user.id = user_id
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("Alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("Bob")


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user("Carol")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("Operator", email=ADMIN_EMAIL)


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def befriend(db_session: Session) -> Callable[[User, User], Friendship]:
    """Return a helper that stores an ACCEPTED edge between two users."""

    def _befriend(first: User, second: User) -> Friendship:
        a_id, b_id = canonical_pair(first.id, second.id)
        row = Friendship(
            a_id=a_id,
            b_id=b_id,
            requester_id=first.id,
            status=FriendshipStatus.ACCEPTED,
            accepted_at=SUBMIT_NOW,
        )
        db_session.add(row)
        db_session.commit()
        return row

    return _befriend


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory for drafts, optionally submitted at ``SUBMIT_NOW``."""

    def _make(
        author: User,
        *,
        title: str = "A week in the garden",
        audience_type: AudienceType = AudienceType.FRIENDS,
        circle_id: str | None = None,
        submit: bool = False,
        now: datetime = SUBMIT_NOW,
        notifier: Any = None,
    ) -> Post:
        post = post_service.create_post(
            db_session,
            author.id,
            title=title,
            content={"blocks": [{"type": "paragraph", "text": title}]},
            audience_type=audience_type,
            circle_id=circle_id,
        )
        if submit:
            result = post_service.update_post(
                db_session,
                post.id,
                author.id,
                {"status": PostStatus.SUBMITTED},
                post.version,
                now=now,
                notifier=notifier or RecordingNotifier(),
            )
            assert result.ok
            db_session.refresh(post)
        return post

    return _make
