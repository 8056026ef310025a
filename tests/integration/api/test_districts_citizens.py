"""Integration tests for district and citizen administration."""

import re

import pytest
import pytest_check as check
from httpx import AsyncClient

from tests.integration.conftest import SeedData


@pytest.mark.integration
class TestDistricts:
    async def test_list_with_citizen_counts(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/district", headers=admin_headers)

        assert response.status_code == 200
        listing = {
            row["district"]["name"]: row["citizen_count"]
            for row in response.json()["data"]
        }
        assert listing == {"Central District": 1, "North District": 1}

    async def test_create(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/district", json={"name": "  South District "}, headers=admin_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "District created successfully"
        assert body["data"]["name"] == "South District"

    async def test_duplicate_name(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/district", json={"name": "Central District"}, headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"


@pytest.mark.integration
class TestCitizens:
    async def test_register_generates_customer_id(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/citizen",
            json={
                "name": "Asha Patil",
                "ward_no": "Ward-7",
                "district_id": seed.north_id,
                "city": "Pune",
                "state": "Maharashtra",
                "contact_no": "9876500000",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Citizen registered successfully"
        citizen = body["data"]
        check.is_true(re.fullmatch(r"CID\d{9}", citizen["customer_id"]))
        check.equal(
            citizen["district"], {"id": seed.north_id, "name": "North District"}
        )
        check.is_none(citizen["email"])

    async def test_register_in_unknown_district(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/citizen",
            json={
                "name": "Asha Patil",
                "ward_no": "Ward-7",
                "district_id": 9999,
                "city": "Pune",
                "state": "Maharashtra",
                "contact_no": "9876500000",
            },
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "District not found"

    async def test_list_with_counts(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/citizen", headers=admin_headers)

        assert response.status_code == 200
        rows = {row["citizen"]["id"]: row for row in response.json()["data"]}
        assert rows[seed.john_id]["tax_records_count"] == 2
        assert rows[seed.jane_id]["tax_records_count"] == 0
        assert rows[seed.john_id]["payments_count"] == 0

    @pytest.mark.parametrize("search", ["jane", "CID001002", "9876543211"])
    async def test_search(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        search: str,
    ) -> None:
        response = await client.get(
            "/api/citizen", params={"search": search}, headers=admin_headers
        )

        ids = [row["citizen"]["id"] for row in response.json()["data"]]
        assert ids == [seed.jane_id]

    async def test_filter_by_district(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            "/api/citizen",
            params={"district_id": seed.central_id},
            headers=admin_headers,
        )

        ids = [row["citizen"]["id"] for row in response.json()["data"]]
        assert ids == [seed.john_id]


@pytest.mark.integration
class TestTaxDetails:
    async def test_citizen_sees_own_details(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            f"/api/citizen/{seed.john_id}/tax", headers=john_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        summary = data["tax_summary"]
        check.equal(summary["total_tax_amount"], 9000.0)
        check.equal(summary["total_pending_amount"], 9000.0)
        check.equal(summary["pending_records"], 2)
        check.equal(summary["paid_records"], 0)

        records = {r["id"]: r for r in data["tax_records"]}
        overdue = records[seed.overdue_record_id]
        check.is_true(overdue["is_overdue"])
        check.equal(overdue["days_overdue"], 20)
        check.is_none(overdue["last_payment"])
        check.is_false(records[seed.current_record_id]["is_overdue"])

    async def test_records_latest_year_first(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            f"/api/citizen/{seed.john_id}/tax", headers=admin_headers
        )

        ids = [r["id"] for r in response.json()["data"]["tax_records"]]
        assert ids == [seed.current_record_id, seed.overdue_record_id]

    async def test_unknown_citizen(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/citizen/9999/tax", headers=admin_headers)

        assert response.status_code == 404
