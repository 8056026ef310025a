"""Integration tests for login, token verification and route guards."""

import pytest
from httpx import AsyncClient

from tests.integration.conftest import ADMIN_PASSWORD, SeedData


@pytest.mark.integration
class TestAdminLogin:
    async def test_valid_credentials(self, client: AsyncClient, seed: SeedData) -> None:
        response = await client.post(
            "/api/admin/login",
            json={"username": "admin", "password": ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Admin login successful"
        assert body["data"]["admin"] == {"id": seed.admin_id, "username": "admin"}
        assert body["data"]["token"]

    @pytest.mark.parametrize(
        ("username", "password"),
        [("admin", "wrong-password"), ("nobody", ADMIN_PASSWORD)],
    )
    async def test_invalid_credentials_share_one_message(
        self, client: AsyncClient, seed: SeedData, username: str, password: str
    ) -> None:
        response = await client.post(
            "/api/admin/login", json={"username": username, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


@pytest.mark.integration
class TestCitizenLogin:
    async def test_known_customer_id(self, client: AsyncClient, seed: SeedData) -> None:
        response = await client.post(
            "/api/citizen/login", json={"customer_id": "CID001001"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Citizen login successful"
        citizen = body["data"]["citizen"]
        assert citizen["id"] == seed.john_id
        assert citizen["district"]["name"] == "Central District"

    async def test_unknown_customer_id(
        self, client: AsyncClient, seed: SeedData
    ) -> None:
        response = await client.post(
            "/api/citizen/login", json={"customer_id": "CID999999"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid Customer ID"


@pytest.mark.integration
class TestTokenVerification:
    async def test_login_token_resolves_to_citizen(
        self, client: AsyncClient, seed: SeedData
    ) -> None:
        login = await client.post(
            "/api/citizen/login", json={"customer_id": "CID001002"}
        )
        token = login.json()["data"]["token"]

        response = await client.post("/api/auth/verify", json={"token": token})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "citizen"
        assert data["user"]["customer_id"] == "CID001002"

    async def test_admin_token(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        token = admin_headers["Authorization"].removeprefix("Bearer ")

        response = await client.post("/api/auth/verify", json={"token": token})

        assert response.json()["data"]["type"] == "admin"

    async def test_garbage_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/auth/verify", json={"token": "not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token"


@pytest.mark.integration
class TestRouteGuards:
    async def test_missing_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/district")

        assert response.status_code == 401
        assert response.json()["error"] == "No token provided"

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/district", headers={"Authorization": "Bearer invalid"}
        )

        assert response.status_code == 401

    async def test_citizen_on_admin_route(
        self, client: AsyncClient, john_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/district", headers=john_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"

    async def test_admin_on_citizen_route(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/api/payment/online",
            json={"tax_record_id": seed.current_record_id},
            headers=admin_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Citizen access required"

    async def test_citizen_reads_only_own_records(
        self,
        client: AsyncClient,
        seed: SeedData,
        jane_headers: dict[str, str],
    ) -> None:
        response = await client.get(
            f"/api/citizen/{seed.john_id}/tax", headers=jane_headers
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Access denied"
