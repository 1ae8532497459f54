"""Tests for the saved-properties endpoints."""

import uuid

from httpx import AsyncClient


class TestSavedPropertiesApi:
    async def test_save_list_and_remove(
        self, client: AsyncClient, buyer_headers: dict, make_property, test_admin
    ) -> None:
        prop = await make_property(creator=test_admin, approval_status="APPROVED")

        saved = await client.post(
            f"/api/v1/saved-properties/{prop.id}", json={"category": "shortlist"}, headers=buyer_headers
        )
        assert saved.status_code == 201
        assert saved.json()["category"] == "shortlist"

        listing = await client.get("/api/v1/saved-properties", headers=buyer_headers)
        assert listing.json()["total"] == 1
        assert listing.json()["data"][0]["propertyId"] == str(prop.id)

        removed = await client.delete(f"/api/v1/saved-properties/{prop.id}", headers=buyer_headers)
        assert removed.status_code == 200

        again = await client.delete(f"/api/v1/saved-properties/{prop.id}", headers=buyer_headers)
        assert again.status_code == 404

    async def test_save_without_body(self, client: AsyncClient, buyer_headers: dict, make_property, test_admin) -> None:
        prop = await make_property(creator=test_admin, approval_status="APPROVED")
        response = await client.post(f"/api/v1/saved-properties/{prop.id}", headers=buyer_headers)
        assert response.status_code == 201
        assert response.json()["category"] == "general"

    async def test_save_unknown_property(self, client: AsyncClient, buyer_headers: dict) -> None:
        response = await client.post(f"/api/v1/saved-properties/{uuid.uuid4()}", headers=buyer_headers)
        assert response.status_code == 404

    async def test_requires_user(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/saved-properties")
        assert response.status_code == 401
