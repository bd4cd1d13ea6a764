"""
pytest configuration file

This file contains shared fixtures for all tests. The environment is
switched to ``test`` before the application is imported, so the engine
binds to a shared in-memory SQLite database and Redis is FakeRedis.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = ""
os.environ["REDIS_TYPE"] = "in_memory"
os.environ["DEBUG"] = "false"

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from learnpath.db import Base, SessionLocal, engine, transaction  # noqa: E402
from learnpath.db import redis_cache as redis_cache_module  # noqa: E402
from learnpath.db.redis_cache import RedisCache  # noqa: E402
from learnpath.models.enums import ContentType, UserRole  # noqa: E402
from learnpath.repositories import content_repositories, user_repository  # noqa: E402
from learnpath.services.identity import Identity  # noqa: E402

API = "/api/v1"


@pytest.fixture(autouse=True)
def fresh_database():
    """Empty schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fake_redis_client(monkeypatch):
    """
    Replace the process-wide cache with one on a private FakeServer.

    Each test starts with an empty identity cache.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    monkeypatch.setattr(redis_cache_module, "_redis_cache", RedisCache(client=client))
    yield client
    client.close()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_identity(db_session: Session):
    """Factory creating a stored user and returning its identity."""
    counter = {"n": 0}

    def _make(name: str = "user", role: UserRole = UserRole.user) -> Identity:
        counter["n"] += 1
        with transaction(db_session):
            user = user_repository.create_user(
                db_session,
                name=name,
                email=f"{name.lower()}{counter['n']}@example.com",
                hashed_password="not-a-real-hash",
                role=role.value,
            )
        return Identity(id=user.id, role=role)

    return _make


@pytest.fixture
def make_content(db_session: Session):
    """Factory creating a content record of the given type and returning its id."""

    def _make(content_type: ContentType = ContentType.Link, title: str = "Intro") -> str:
        fields = {"title": title}
        if content_type in (ContentType.Link, ContentType.Video):
            fields["url"] = f"https://example.com/{title.lower()}"
        with transaction(db_session):
            record = content_repositories[content_type].create_content(db_session, fields)
        return record.id

    return _make


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from learnpath.main import app

    return TestClient(app)


@pytest.fixture
def register(client):
    """Factory registering through the API; returns ``{"headers", "user"}``."""

    def _register(name: str, email: str | None = None, password: str = "secret123") -> dict:
        email = email or f"{name.lower()}@example.com"
        response = client.post(f"{API}/auth/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "headers": {"Authorization": f"Bearer {data['token']['access_token']}"},
            "user": data["user"],
        }

    return _register
