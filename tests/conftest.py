# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from itertools import count
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from viet_kconnect.core.security import create_access_token
from viet_kconnect.db.session import Base
from viet_kconnect.db.session import get_db as app_get_session
from viet_kconnect.db.time import utcnow
from viet_kconnect.main import app as fastapi_app
from viet_kconnect.models import Answer, Category, Comment, Post, User

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


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
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
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


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for persisted members."""

    def _make_user(**overrides: Any) -> User:
        number = next(_USER_COUNTER)
        values: dict[str, Any] = {
            "email": f"member{number}@example.com",
            "name": f"Member {number}",
            "display_name": f"member{number}",
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        db_session.flush()
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session, make_user: Callable[..., User]) -> Callable[..., Post]:
    """Factory for persisted posts with strictly increasing ``created_at``."""
    base = utcnow() - timedelta(days=1)
    clock = count(1)

    def _make_post(author: User | None = None, **overrides: Any) -> Post:
        if author is None:
            author = make_user()
        created_at: datetime = overrides.pop(
            "created_at",
            base + timedelta(minutes=next(clock)),
        )
        values: dict[str, Any] = {
            "author_id": author.id,
            "type": "question",
            "title": "Post title",
            "content": "<p>Post body</p>",
            "category": "visa",
            "created_at": created_at,
            "updated_at": created_at,
        }
        values.update(overrides)
        post = Post(**values)
        db_session.add(post)
        db_session.flush()
        return post

    return _make_post


@pytest.fixture()
def make_answer(db_session: Session) -> Callable[..., Answer]:
    def _make_answer(post: Post, author: User, **overrides: Any) -> Answer:
        answer = Answer(post_id=post.id, author_id=author.id, content="Answer", **overrides)
        db_session.add(answer)
        db_session.flush()
        return answer

    return _make_answer


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make_comment(post: Post, author: User, **overrides: Any) -> Comment:
        comment = Comment(post_id=post.id, author_id=author.id, content="Comment", **overrides)
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make_comment


@pytest.fixture()
def make_category(db_session: Session) -> Callable[..., Category]:
    def _make_category(slug: str, parent: Category | None = None) -> Category:
        category = Category(
            name=slug.title(),
            slug=slug,
            parent_id=parent.id if parent is not None else None,
        )
        db_session.add(category)
        db_session.flush()
        return category

    return _make_category


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary signed-in member."""
    return make_user(name="Test User")


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}
