# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import nullcontext
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REALTIME_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_BACKEND", "sql")

from talent_connect.api.v1.dependencies import get_change_feed, get_session_factory
from talent_connect.core.security import create_access_token
from talent_connect.db.session import Base
from talent_connect.db.session import get_db as app_get_session
from talent_connect.main import app as fastapi_app
from talent_connect.models import Conversation, Job, Profile
from talent_connect.models.moderation import STATUS_APPROVED
from talent_connect.services.conversations import ConversationRegistry
from talent_connect.services.realtime import ChangeFeed

TEST_DB_URL = "sqlite://"

_PROFILE_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let SQLAlchemy emit it.
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits inside the code under test only release savepoints.
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def feed() -> ChangeFeed:
    """A fresh change feed per test so subscriptions never leak between tests."""
    return ChangeFeed()


@pytest.fixture()
def session_factory(db_session: Session) -> Callable[[], nullcontext[Session]]:
    """Session factory for realtime sessions that reuses the test session."""
    return lambda: nullcontext(db_session)


@pytest.fixture(autouse=True)
def override_session_dependency(
    app: FastAPI,
    db_session: Session,
    feed: ChangeFeed,
    session_factory: Callable[[], nullcontext[Session]],
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_change_feed] = lambda: feed
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_change_feed, None)
        app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    def _make_profile(full_name: str | None = None, **fields) -> Profile:
        number = next(_PROFILE_COUNTER)
        profile = Profile(
            id=fields.pop("id", f"user-{number:04d}"),
            full_name=full_name or f"User {number}",
            email=fields.pop("email", f"user{number}@example.com"),
            **fields,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make_profile


@pytest.fixture()
def alice(make_profile) -> Profile:
    return make_profile("Alice", id="alice", role="employer")


@pytest.fixture()
def bob(make_profile) -> Profile:
    return make_profile("Bob", id="bob", role="freelancer")


@pytest.fixture()
def carol(make_profile) -> Profile:
    return make_profile("Carol", id="carol", role="freelancer")


@pytest.fixture()
def admin(make_profile) -> Profile:
    return make_profile("Admin", id="admin", is_admin=True)


def bearer(profile_id: str, **claims) -> dict[str, str]:
    token = create_access_token(profile_id, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers() -> Callable[..., dict[str, str]]:
    """Mint provider-style bearer headers for any subject."""
    return bearer


@pytest.fixture()
def alice_headers(alice: Profile) -> dict[str, str]:
    return bearer(alice.id)


@pytest.fixture()
def bob_headers(bob: Profile) -> dict[str, str]:
    return bearer(bob.id)


@pytest.fixture()
def admin_headers(admin: Profile) -> dict[str, str]:
    return bearer(admin.id)


@pytest.fixture()
def conversation(db_session: Session, feed: ChangeFeed, alice: Profile, bob: Profile) -> Conversation:
    return ConversationRegistry(db_session, feed).get_or_create(alice.id, bob.id)


@pytest.fixture()
def approved_job(db_session: Session, alice: Profile) -> Job:
    job = Job(
        creator_id=alice.id,
        title="Landing page redesign",
        description="Refresh our marketing site.",
        category="design",
        status=STATUS_APPROVED,
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job
