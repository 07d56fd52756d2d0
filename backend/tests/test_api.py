"""
Tests for app-level routes, the current-user endpoint and request validation
"""
import pytest
from httpx import AsyncClient


class TestAppRoutes:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["app"] == "InfluencerDB"


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_header(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/users/me")

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "staff"
        assert data["email"] == "staff@example.com"
        assert data["id"] == str(staff_user.id)


class TestInfluencerRequestValidation:

    @pytest.mark.asyncio
    async def test_invalid_platform_filter(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/influencers", params={"platforms": "instagram,myspace"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid platform: myspace"

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/influencers", params={"status": "archived"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_sort_field(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/influencers", params={"sortField": "name"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid sort field: name"

    @pytest.mark.asyncio
    async def test_invalid_sort_direction(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/influencers", params={"sortDirection": "sideways"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_page_size_bounds(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.get("/api/v1/influencers", params={"pageSize": 1000})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_staff_cannot_create(self, client: AsyncClient, as_user, staff_user):
        as_user(staff_user)

        response = await client.post("/api/v1/influencers", json={"name": "A", "platform": "youtube"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_platform(self, client: AsyncClient, as_user, admin_user):
        as_user(admin_user)

        response = await client.post("/api/v1/influencers", json={"name": "A", "platform": "myspace"})

        assert response.status_code == 422
