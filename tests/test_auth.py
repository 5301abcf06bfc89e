from datetime import timedelta

import jwt
import pytest

from app.models.user import Role
from app.schemas.auth import TokenPayload
from app.core.security import is_authorized
from app.services import auth_service


def auth_header(username, role):
    token = auth_service.create_access_token(subject=username, role=role.value)
    return {"Authorization": f"Bearer {token}"}


class TestAuthorizationDecision:

    def test_missing_claims_denied(self):
        assert is_authorized(None) is False
        assert is_authorized(None, Role.ADMIN) is False

    def test_role_checked(self):
        admin = TokenPayload(sub="root", exp=0, role=Role.ADMIN)
        user = TokenPayload(sub="bob", exp=0, role=Role.USER)

        assert is_authorized(admin, Role.ADMIN)
        assert not is_authorized(user, Role.ADMIN)
        assert is_authorized(user)


class TestTokens:

    def test_roundtrip(self):
        token = auth_service.create_access_token(subject="alice", role="user")
        claims = auth_service.decode_access_token(token)

        assert claims["sub"] == "alice"
        assert claims["role"] == "user"

    def test_expired_token_rejected(self):
        token = auth_service.create_access_token(subject="alice", role="user", expires_delta=timedelta(minutes=-5))
        with pytest.raises(jwt.ExpiredSignatureError):
            auth_service.decode_access_token(token)

    def test_password_hashing(self):
        hashed = auth_service.get_password_hash("s3cret")

        assert hashed != "s3cret"
        assert auth_service.verify_password("s3cret", hashed)
        assert not auth_service.verify_password("wrong", hashed)
        assert not auth_service.verify_password("s3cret", "not-a-hash")


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_login(self, client, session):
        await auth_service.create_user(session, "alice", "s3cret")

        r = await client.post("/api/v1/auth/login", json={"username": "alice", "password": "s3cret"})
        assert r.status_code == 200
        body = r.json()
        assert body["token_type"] == "bearer"
        assert body["role"] == "user"
        assert auth_service.decode_access_token(body["access_token"])["sub"] == "alice"

    @pytest.mark.asyncio
    async def test_login_bad_password(self, client, session):
        await auth_service.create_user(session, "alice", "s3cret")

        r = await client.post("/api/v1/auth/login", json={"username": "alice", "password": "nope"})
        assert r.status_code == 401
        assert r.json()["error"] == "Incorrect username or password"

    @pytest.mark.asyncio
    async def test_register_requires_token(self, client):
        r = await client.post("/api/v1/auth/register", json={"username": "bob", "password": "pw"})
        assert r.status_code == 401
        assert r.json()["kind"] == "HTTPError"

    @pytest.mark.asyncio
    async def test_register_invalid_token(self, client):
        r = await client.post(
            "/api/v1/auth/register",
            json={"username": "bob", "password": "pw"},
            headers={"Authorization": "Bearer garbage"},
        )
        assert r.status_code == 401

    @pytest.mark.asyncio
    async def test_register_forbidden_for_users(self, client):
        r = await client.post(
            "/api/v1/auth/register",
            json={"username": "bob", "password": "pw"},
            headers=auth_header("alice", Role.USER),
        )
        assert r.status_code == 403

    @pytest.mark.asyncio
    async def test_register_by_admin(self, client, session):
        await auth_service.create_user(session, "root", "pw", Role.ADMIN)
        headers = auth_header("root", Role.ADMIN)

        r = await client.post("/api/v1/auth/register", json={"username": "bob", "password": "pw"}, headers=headers)
        assert r.status_code == 201
        assert r.json()["username"] == "bob"
        assert r.json()["role"] == "user"

        dup = await client.post("/api/v1/auth/register", json={"username": "bob", "password": "pw"}, headers=headers)
        assert dup.status_code == 400
        assert dup.json() == {"error": "User already exists", "kind": "ValidationError"}


class TestInitialAdmin:

    @pytest.mark.asyncio
    async def test_created_once(self, session, monkeypatch):
        monkeypatch.setattr(auth_service.settings, "INITIAL_ADMIN_USERNAME", "root")
        monkeypatch.setattr(auth_service.settings, "INITIAL_ADMIN_PASSWORD", "pw")

        first = await auth_service.ensure_initial_admin(session)
        second = await auth_service.ensure_initial_admin(session)

        assert first.role == Role.ADMIN
        assert first.id == second.id

    @pytest.mark.asyncio
    async def test_skipped_when_unset(self, session, monkeypatch):
        monkeypatch.setattr(auth_service.settings, "INITIAL_ADMIN_USERNAME", None)

        assert await auth_service.ensure_initial_admin(session) is None
