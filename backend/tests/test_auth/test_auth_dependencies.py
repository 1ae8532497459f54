"""Tests for auth dependencies through protected endpoints."""

import uuid
from datetime import timedelta

from httpx import AsyncClient

from estatehub.auth.credentials import hash_password
from estatehub.auth.jwt import ROLE_ADMIN, ROLE_USER, create_access_token, create_token_pair
from estatehub.models.user import AdminUser, PlatformUser


class TestGetCurrentPrincipal:
    """Token handling via the /me endpoint."""

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHENTICATED"

    async def test_expired_token_rejected(self, client: AsyncClient, test_owner: PlatformUser):
        token = create_access_token(
            {"sub": str(test_owner.id), "role": ROLE_USER}, expires_delta=timedelta(seconds=-1)
        )
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.valid.jwt"})
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, test_owner: PlatformUser):
        tokens = create_token_pair(str(test_owner.id), ROLE_USER)
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
        assert response.status_code == 401

    async def test_token_without_role_rejected(self, client: AsyncClient, test_owner: PlatformUser):
        token = create_access_token({"sub": str(test_owner.id)})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_user_id_with_admin_role_rejected(self, client: AsyncClient, test_owner: PlatformUser):
        token = create_access_token({"sub": str(test_owner.id), "role": ROLE_ADMIN})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_nonexistent_account_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4()), "role": ROLE_USER})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_inactive_account_forbidden(self, client: AsyncClient, session_factory):
        async with session_factory() as session:
            user = PlatformUser(
                email=f"inactive-{uuid.uuid4().hex[:8]}@estatehub.in",
                hashed_password=hash_password("testpass"),
                is_active=False,
            )
            session.add(user)
            await session.commit()

        token = create_access_token({"sub": str(user.id), "role": ROLE_USER})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403


class TestRoleGuards:
    async def test_user_token_on_admin_route(self, client: AsyncClient, owner_headers: dict):
        response = await client.get("/api/v1/admin/properties", headers=owner_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == {"message": "Admin access required", "code": "FORBIDDEN"}

    async def test_admin_token_on_user_route(self, client: AsyncClient, admin_headers: dict):
        response = await client.get("/api/v1/notifications", headers=admin_headers)
        assert response.status_code == 403

    async def test_admin_token_on_admin_route(self, client: AsyncClient, admin_headers: dict, test_admin: AdminUser):
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(test_admin.id)
        assert response.json()["role"] == "ADMIN"

    async def test_bad_token_on_optional_route_is_anonymous(self, client: AsyncClient):
        response = await client.get("/api/v1/properties/map", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 200
