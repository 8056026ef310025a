"""Integration tests for the application shell: probes, headers and errors."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestServiceEndpoints:
    """Test the endpoints outside of ``/api``."""

    async def test_root_endpoint(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Nagarkar municipal tax service"}

    async def test_health_endpoint(self, client: AsyncClient) -> None:
        """Test the probe answers even when the database is unreachable."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ("healthy", "degraded")
        assert "database" in data

    async def test_info_endpoint(self, client: AsyncClient) -> None:
        response = await client.get("/info")

        assert response.status_code == 200
        data = response.json()
        assert data["app_name"] == "Nagarkar"
        assert data["environment"] == "development"
        assert "version" in data

    async def test_openapi_lists_api_routes(self, client: AsyncClient) -> None:
        response = await client.get("/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/admin/login" in paths
        assert "/api/penalty/{citizen_id}" in paths


@pytest.mark.integration
class TestMiddleware:
    """Test the headers added by the middleware stack."""

    async def test_correlation_id_is_echoed(self, client: AsyncClient) -> None:
        correlation_id = "0b6f9a52-6f4c-4c55-9b3e-2f2f0f5f6d11"

        response = await client.get("/", headers={"X-Correlation-ID": correlation_id})

        assert response.headers["X-Correlation-ID"] == correlation_id

    async def test_correlation_id_is_generated(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.headers["X-Correlation-ID"]

    async def test_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert "Strict-Transport-Security" not in response.headers

    async def test_api_responses_are_not_cached(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/district", headers=admin_headers)

        assert response.headers["Cache-Control"] == "no-store"


@pytest.mark.integration
class TestErrorResponses:
    """Test the shape of error responses."""

    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "NOT_FOUND"
        assert data["correlation_id"] == response.headers["X-Correlation-ID"]
        assert data["service_info"]["name"] == "Nagarkar"

    async def test_invalid_body_is_bad_request(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/tax",
            json={"citizen_id": 1, "tax_year": 1800, "amount": -5},
            headers=admin_headers,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        errors = data["details"]["validation_errors"]
        assert "tax_year" in errors
        assert "amount" in errors
        assert "due_date" in errors

    async def test_application_error_carries_context(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/tax/9999", headers=admin_headers)

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "No tax records found for this citizen"
        assert data["details"] == {"citizen_id": 9999}
        assert data["severity"] == "LOW"
        assert data["request_id"].startswith("req-")
        assert data["debug_info"]["exception_type"] == "NotFoundError"
