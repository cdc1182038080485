"""Tests for authentication endpoints: register, login, refresh, logout, me."""

import uuid

from httpx import AsyncClient

from zamora.auth.jwt import create_token_pair, decode_token
from zamora.models.user import User

TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# POST /api/auth/register
# ---------------------------------------------------------------------------


class TestRegister:
    """Tests for user registration."""

    async def test_register_success(self, client: AsyncClient) -> None:
        unique = uuid.uuid4().hex[:8]
        response = await client.post(
            "/api/auth/register",
            json={
                "email": f"newuser-{unique}@test.com",
                "password": "securepass123",
                "first_name": "Chanda",
                "last_name": "Mwale",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == f"newuser-{unique}@test.com"
        assert data["user"]["first_name"] == "Chanda"
        assert data["user"]["role"] == "user"
        assert data["user"]["is_active"] is True
        assert data["tokens"]["token_type"] == "bearer"
        assert decode_token(data["tokens"]["access_token"])["type"] == "access"
        assert "zamora_session" in response.cookies

    async def test_email_is_lowercased(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"email": "Mixed.Case@Test.com", "password": "securepass123", "first_name": "M"},
        )
        assert response.json()["user"]["email"] == "mixed.case@test.com"

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        payload = {"email": f"dup-{uuid.uuid4().hex[:8]}@test.com", "password": "securepass123", "first_name": "A"}

        assert (await client.post("/api/auth/register", json=payload)).status_code == 201

        response = await client.post("/api/auth/register", json=payload)
        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered", "code": "EMAIL_TAKEN"}

    async def test_register_short_password(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"email": "short@test.com", "password": "short", "first_name": "S"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "password" in body["details"]

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "securepass123", "first_name": "B"},
        )
        assert response.status_code == 400

    async def test_register_missing_first_name(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"email": "noname@test.com", "password": "securepass123"},
        )
        assert response.status_code == 400
        assert "first_name" in response.json()["details"]


# ---------------------------------------------------------------------------
# POST /api/auth/login
# ---------------------------------------------------------------------------


class TestLogin:
    """Tests for email/password login."""

    async def test_login_success(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(test_user.id)
        assert decode_token(data["tokens"]["access_token"])["sub"] == str(test_user.id)

    async def test_login_sets_session_cookie(self, client: AsyncClient, test_user: User) -> None:
        await client.post("/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})

        # No Authorization header: the cookie alone authenticates
        response = await client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    async def test_login_wrong_password(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/auth/login", json={"email": test_user.email, "password": "wrongpass"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"

    async def test_login_unknown_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/auth/login", json={"email": "ghost@test.com", "password": TEST_PASSWORD})
        assert response.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, make_user) -> None:
        user = await make_user("cashier", is_active=False)
        response = await client.post("/api/auth/login", json={"email": user.email, "password": TEST_PASSWORD})
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# POST /api/auth/refresh, POST /api/auth/logout, GET /api/auth/me
# ---------------------------------------------------------------------------


class TestRefresh:
    async def test_refresh_success(self, client: AsyncClient, test_user: User) -> None:
        tokens = create_token_pair(str(test_user.id))
        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert decode_token(response.json()["access_token"])["type"] == "access"

    async def test_access_token_cannot_refresh(self, client: AsyncClient, test_user: User) -> None:
        tokens = create_token_pair(str(test_user.id))
        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token type"

    async def test_garbage_refresh_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/auth/refresh", json={"refresh_token": "garbage"})
        assert response.status_code == 401

    async def test_refresh_for_unknown_user(self, client: AsyncClient) -> None:
        tokens = create_token_pair(str(uuid.uuid4()))
        response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 401


class TestLogout:
    async def test_logout_clears_cookie(self, client: AsyncClient, test_user: User) -> None:
        await client.post("/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})

        response = await client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}

        assert (await client.get("/api/auth/me")).status_code == 401


class TestMe:
    async def test_me_returns_profile(self, client: AsyncClient, owner: User, owner_headers) -> None:
        response = await client.get("/api/auth/me", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "owner"
        assert data["first_name"] == "Olivia"
        assert "hashed_password" not in data
