# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from splajompy_api.core.security import create_access_token  # noqa: E402
from splajompy_api.db.session import Base  # noqa: E402
from splajompy_api.db.session import get_sessionmaker as app_get_sessionmaker  # noqa: E402
from splajompy_api.main import app as fastapi_app  # noqa: E402
from splajompy_api.models import Post, User  # noqa: E402


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Return the SQLite file backing one test."""
    return tmp_path / "splajompy-test.db"


@pytest.fixture()
def engine(db_path: Path) -> Generator[Engine, None, None]:
    """Synchronous engine used to build the schema and seed rows."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session for arranging test data; commit before calling the API."""
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture()
def async_sessionmaker_for_test(
    engine: Engine,
    db_path: Path,
) -> async_sessionmaker[AsyncSession]:
    """Async session factory over the same file.

    NullPool keeps connections from outliving the event loop that opened them.
    """
    async_engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(async_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def app(async_sessionmaker_for_test: async_sessionmaker[AsyncSession]) -> Iterator[FastAPI]:
    fastapi_app.dependency_overrides[app_get_sessionmaker] = lambda: async_sessionmaker_for_test
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.pop(app_get_sessionmaker, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users."""

    def _make_user(username: str, **fields: Any) -> User:
        user = User(username=username, email=f"{username}@example.test", **fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory that persists posts."""

    def _make_post(
        author: User,
        text: str = "hello",
        *,
        created_at: datetime | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> Post:
        post = Post(user_id=author.user_id, text=text, facets=[], attributes=attributes)
        if created_at is not None:
            post.created_at = created_at
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


def auth_headers_for(user: User, app_version: str | None = None) -> dict[str, str]:
    """Build bearer headers, optionally declaring a client version."""
    headers = {"Authorization": f"Bearer {create_access_token(user.user_id)}"}
    if app_version is not None:
        headers["X-App-Version"] = app_version
    return headers


@pytest.fixture()
def headers_for() -> Callable[..., dict[str, str]]:
    """Expose the header builder to tests."""
    return auth_headers_for


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("alice", name="Alice", bio="hello from alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a secondary test user."""
    return make_user("bob", name="Bob")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return bearer headers for the primary test user."""
    return auth_headers_for(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return bearer headers for the secondary test user."""
    return auth_headers_for(other_user)
