"""Tests for auth dependencies: get_current_user edge cases."""

import uuid
from datetime import timedelta

from httpx import AsyncClient

from zamora.auth.jwt import create_access_token, create_token_pair
from zamora.models.user import User


class TestGetCurrentUser:
    """Test get_current_user dependency via the /me endpoint."""

    async def test_missing_credentials_rejected(self, client: AsyncClient):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized: no session", "code": "AUTHENTICATION_ERROR"}

    async def test_expired_token_rejected(self, client: AsyncClient, test_user: User):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-1))
        headers = {"Authorization": f"Bearer {token}"}
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        headers = {"Authorization": "Bearer not.a.valid.jwt"}
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, test_user: User):
        tokens = create_token_pair(str(test_user.id))
        headers = {"Authorization": f"Bearer {tokens['refresh_token']}"}
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_non_uuid_subject_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": "not-a-uuid"})
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_nonexistent_user_id_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4())})
        headers = {"Authorization": f"Bearer {token}"}
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_inactive_user_forbidden(self, client: AsyncClient, make_user, auth_for):
        user = await make_user("waiter", is_active=False)
        response = await client.get("/api/auth/me", headers=auth_for(user))
        assert response.status_code == 403
        assert response.json()["code"] == "AUTHORIZATION_ERROR"

    async def test_session_cookie_accepted(self, client: AsyncClient, test_user: User):
        tokens = create_token_pair(str(test_user.id))
        client.cookies.set("zamora_session", tokens["access_token"])

        response = await client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json()["id"] == str(test_user.id)


class TestRequireAdmin:
    async def test_staff_role_forbidden(self, client: AsyncClient, make_user, auth_for):
        waiter = await make_user("waiter")
        response = await client.get("/api/admin/users", headers=auth_for(waiter))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden: admin access required"

    async def test_admin_allowed(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/admin/users", headers=admin_headers)
        assert response.status_code == 200
