"""
Tests for registration, login and token handling.
"""

import sqlite3
import threading

import pytest

from chronify.models import LoginRequest, RegisterRequest
from chronify.services.auth import AuthService
from chronify.services.errors import AuthenticationError, ConflictError


def _register(**overrides) -> RegisterRequest:
    data = {"username": "linus", "email": "linus@example.com", "password": "penguins!"}
    data.update(overrides)
    return RegisterRequest(**data)


def _user_count(db_path: str) -> int:
    with sqlite3.connect(db_path) as conn:
        return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]


class TestRegister:
    """Tests for UserService.register."""

    @pytest.mark.asyncio
    async def test_register(self, user_service):
        user = await user_service.register(_register())

        assert user.username == "linus"
        assert not hasattr(user, "password_hash")
        stored = await user_service.get_user_by_email("linus@example.com")
        assert stored.password_hash != "penguins!"

    @pytest.mark.asyncio
    async def test_short_password(self, user_service, db_path):
        with pytest.raises(ValueError, match="at least 8"):
            await user_service.register(_register(password="1234567"))
        assert _user_count(db_path) == 0

    @pytest.mark.asyncio
    async def test_short_username(self, user_service, db_path):
        with pytest.raises(ValueError, match="at least 3"):
            await user_service.register(_register(username="li"))
        assert _user_count(db_path) == 0

    @pytest.mark.asyncio
    async def test_invalid_email(self, user_service):
        for email in ("plainaddress", "1user@example.com", "user@exa_mple.com", "user@"):
            with pytest.raises(ValueError, match="Invalid email format"):
                await user_service.register(_register(email=email))

    @pytest.mark.asyncio
    async def test_missing_fields(self, user_service):
        with pytest.raises(ValueError, match="required"):
            await user_service.register(_register(username=""))

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_service):
        await user_service.register(_register())

        with pytest.raises(ConflictError, match="Email already exists"):
            await user_service.register(_register(username="someone-else"))

    @pytest.mark.asyncio
    async def test_duplicate_username(self, user_service):
        await user_service.register(_register())

        with pytest.raises(ConflictError, match="Username already exists"):
            await user_service.register(_register(email="other@example.com"))

    @pytest.mark.asyncio
    async def test_hashing_runs_off_the_event_loop(self, user_service, monkeypatch):
        loop_thread = threading.get_ident()
        hashing_threads = []
        original = user_service.auth.hash_password

        def recording_hash(password):
            hashing_threads.append(threading.get_ident())
            return original(password)

        monkeypatch.setattr(user_service.auth, "hash_password", recording_hash)

        await user_service.register(_register())

        assert len(hashing_threads) == 1
        assert hashing_threads[0] != loop_thread


class TestLogin:
    """Tests for UserService.login."""

    @pytest.mark.asyncio
    async def test_login_issues_token_for_user(self, user_service, auth, owner):
        result = await user_service.login(LoginRequest(email="ada@example.com", password="analytical-engine"))

        assert result.user.id == owner.id
        assert auth.decode_access_token(result.token) == owner.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, user_service, owner):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await user_service.login(LoginRequest(email="ada@example.com", password="difference-engine"))

    @pytest.mark.asyncio
    async def test_unknown_email_fails_the_same_way(self, user_service):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await user_service.login(LoginRequest(email="nobody@example.com", password="whatever123"))

    @pytest.mark.asyncio
    async def test_login_validation(self, user_service):
        with pytest.raises(ValueError):
            await user_service.login(LoginRequest(email="", password="x"))
        with pytest.raises(ValueError, match="Invalid email format"):
            await user_service.login(LoginRequest(email="nope", password="x"))

    @pytest.mark.asyncio
    async def test_verification_runs_off_the_event_loop(self, user_service, owner, monkeypatch):
        loop_thread = threading.get_ident()
        verifying_threads = []
        original = user_service.auth.verify_password

        def recording_verify(password, password_hash):
            verifying_threads.append(threading.get_ident())
            return original(password, password_hash)

        monkeypatch.setattr(user_service.auth, "verify_password", recording_verify)

        await user_service.login(LoginRequest(email="ada@example.com", password="analytical-engine"))

        assert len(verifying_threads) == 1
        assert verifying_threads[0] != loop_thread


class TestAuthService:
    """Tests for AuthService tokens and hashes."""

    def test_password_round_trip(self, auth):
        hashed = auth.hash_password("s3cret-pass")

        assert auth.verify_password("s3cret-pass", hashed)
        assert not auth.verify_password("wrong-pass", hashed)

    def test_garbage_hash_does_not_verify(self, auth):
        assert auth.verify_password("anything", "not-a-hash") is False

    def test_token_signed_with_other_secret(self, auth):
        forged = AuthService(secret_key="another-secret").create_access_token("user-1")

        with pytest.raises(AuthenticationError):
            auth.decode_access_token(forged)

    def test_expired_token(self):
        issuer = AuthService(secret_key="test-secret", expire_minutes=-1)

        with pytest.raises(AuthenticationError):
            issuer.decode_access_token(issuer.create_access_token("user-1"))

    def test_malformed_token(self, auth):
        with pytest.raises(AuthenticationError):
            auth.decode_access_token("not.a.jwt")
