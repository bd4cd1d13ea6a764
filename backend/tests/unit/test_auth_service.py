"""Tests for the authentication service and the identity cache."""

import pytest
from sqlalchemy.orm import Session

from learnpath.db.models import User, Workspace
from learnpath.db.redis_cache import RedisCache, RedisKeyPrefix
from learnpath.errors import Conflict, Unauthenticated
from learnpath.models.enums import UserRole
from learnpath.repositories import user_repository
from learnpath.services import auth_service


class TestTokens:
    def test_round_trip(self):
        token = auth_service.create_access_token({"sub": "user_abc"})
        assert auth_service.verify_token(token) == "user_abc"

    def test_garbage_token(self):
        assert auth_service.verify_token("not.a.jwt") is None

    def test_password_hash(self):
        hashed = auth_service.get_password_hash("secret123")

        assert hashed != "secret123"
        assert auth_service.verify_password("secret123", hashed)
        assert not auth_service.verify_password("wrong", hashed)


class TestRegisterAndLogin:
    def test_register_creates_default_workspace(self, db_session: Session):
        user = auth_service.register_user(db_session, "Ada", "ada@example.com", "secret123")

        workspace = db_session.get(Workspace, user.workspaces[0])
        assert workspace.name == "Ada's Workspace"
        assert workspace.owner_id == user.id

    def test_duplicate_email(self, db_session: Session):
        auth_service.register_user(db_session, "Ada", "ada@example.com", "secret123")

        with pytest.raises(Conflict):
            auth_service.register_user(db_session, "Ada Again", "ADA@example.com", "secret456")

    def test_email_taken_after_lookup_is_a_conflict(self, db_session: Session, monkeypatch):
        """The unique constraint still reports a conflict when the lookup missed the other account."""
        auth_service.register_user(db_session, "Ada", "ada@example.com", "secret123")
        monkeypatch.setattr(user_repository, "get_by_email", lambda db, email: None)

        with pytest.raises(Conflict):
            auth_service.register_user(db_session, "Ada Again", "ada@example.com", "secret456")

        assert db_session.query(User).count() == 1
        assert db_session.query(Workspace).count() == 1

    def test_login(self, db_session: Session):
        user = auth_service.register_user(db_session, "Ada", "ada@example.com", "secret123")

        logged_in, token = auth_service.login(db_session, "ada@example.com", "secret123")

        assert logged_in.id == user.id
        assert auth_service.verify_token(token) == user.id
        with pytest.raises(Unauthenticated):
            auth_service.login(db_session, "ada@example.com", "wrong-password")


class TestIdentityCache:
    def test_identity_is_cached(self, db_session: Session, make_identity, fake_redis_client):
        identity = make_identity("Cached", role=UserRole.admin)

        resolved = auth_service.get_identity_from_cache(db_session, identity.id)

        assert resolved == identity
        assert fake_redis_client.exists(RedisKeyPrefix.identity_key(identity.id))

        auth_service.invalidate_identity(identity.id)
        assert not fake_redis_client.exists(RedisKeyPrefix.identity_key(identity.id))

    def test_unknown_user(self, db_session: Session):
        assert auth_service.get_identity_from_cache(db_session, "user_missing") is None


class TestRedisCache:
    def test_json_values_and_ttl(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)

        assert cache.set("learnpath:test", {"id": "x", "n": 1}, expire_seconds=60) is True
        assert cache.get("learnpath:test") == {"id": "x", "n": 1}
        assert 0 < fake_redis_client.ttl("learnpath:test") <= 60
        assert cache.delete("learnpath:test") is True
        assert cache.get("learnpath:test") is None
