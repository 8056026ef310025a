"""Integration tests for the tax report and the analytics dashboards."""

import pytest
import pytest_check as check
from httpx import AsyncClient

from nagarkar.services.common import local_today
from tests.integration.conftest import SeedData


async def pay_current_record(
    client: AsyncClient, seed: SeedData, headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/payment",
        json={
            "tax_record_id": seed.current_record_id,
            "method": "OFFLINE",
            "amount": 5000,
        },
        headers=headers,
    )
    assert response.status_code == 201


@pytest.mark.integration
class TestTaxReport:
    async def test_summary(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        await pay_current_record(client, seed, admin_headers)

        response = await client.get("/api/report", headers=admin_headers)

        assert response.status_code == 200
        summary = response.json()["data"]["summary"]
        assert summary == {
            "total_records": 2,
            "paid_records": 1,
            "unpaid_records": 1,
            "overdue_records": 0,
            "total_amount": 9000.0,
            "collected_amount": 5000.0,
            "pending_amount": 4000.0,
            "total_penalties": 0.0,
            "collection_rate": "50.00",
        }

    async def test_rows_carry_payment_and_overdue_days(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        await pay_current_record(client, seed, admin_headers)

        response = await client.get("/api/report", headers=admin_headers)

        rows = {row["id"]: row for row in response.json()["data"]["records"]}
        paid = rows[seed.current_record_id]
        overdue = rows[seed.overdue_record_id]
        check.equal(paid["payment_info"]["method"], "OFFLINE")
        check.equal(paid["days_overdue"], 0)
        check.is_none(overdue["payment_info"])
        check.equal(overdue["days_overdue"], 20)
        check.equal(overdue["citizen"]["district"]["name"], "Central District")

    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            ({"status": "PAID"}, 1),
            ({"status": "PENDING"}, 1),
            ({"search": "john"}, 2),
            ({"search": "jane"}, 0),
            ({"tax_year": local_today().year}, 1),
        ],
    )
    async def test_filters(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        params: dict[str, object],
        expected: int,
    ) -> None:
        await pay_current_record(client, seed, admin_headers)

        response = await client.get("/api/report", params=params, headers=admin_headers)

        assert response.json()["data"]["summary"]["total_records"] == expected

    async def test_district_filter(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            "/api/report", params={"district_id": seed.north_id}, headers=admin_headers
        )

        summary = response.json()["data"]["summary"]
        assert summary["total_records"] == 0
        assert summary["collection_rate"] == "0.00"

    async def test_unknown_status_is_rejected(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            "/api/report", params={"status": "LOST"}, headers=admin_headers
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestAdminAnalytics:
    async def test_overview(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        await pay_current_record(client, seed, admin_headers)

        response = await client.get("/api/analytics/admin", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["year"] == local_today().year
        overview = data["overview"]
        check.equal(overview["total_citizens"], 2)
        check.equal(overview["total_districts"], 2)
        check.equal(overview["total_tax_records"], 1)
        check.equal(overview["total_payments"], 1)
        check.equal(overview["tax_collected"], 5000.0)
        check.equal(overview["collection_rate"], 100)
        check.equal(
            data["payment_methods"],
            [{"method": "OFFLINE", "amount": 5000.0, "count": 1}],
        )
        check.equal(len(data["recent_payments"]), 1)

    async def test_citizen_token_is_rejected(
        self, client: AsyncClient, john_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/analytics/admin", headers=john_headers)

        assert response.status_code == 403


@pytest.mark.integration
class TestCitizenAnalytics:
    async def test_own_dashboard(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        john_headers: dict[str, str],
    ) -> None:
        await pay_current_record(client, seed, admin_headers)

        response = await client.get(
            f"/api/analytics/citizen/{seed.john_id}", headers=john_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        check.equal(data["citizen"]["customer_id"], "CID001001")
        check.equal(data["overview"]["total_tax_paid"], 5000.0)
        check.equal(data["overview"]["total_pending_tax"], 4000.0)
        check.equal(data["overview"]["total_payments"], 1)
        check.equal(
            [point["year"] for point in data["tax_trend"]],
            [local_today().year - 1, local_today().year],
        )
        check.equal(
            data["payment_history"],
            [{"year": local_today().year, "amount": 5000.0, "count": 1}],
        )

    async def test_other_citizen(
        self, client: AsyncClient, seed: SeedData, jane_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            f"/api/analytics/citizen/{seed.john_id}", headers=jane_headers
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized access"

    async def test_admin_token_is_rejected(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            f"/api/analytics/citizen/{seed.john_id}", headers=admin_headers
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Citizen access required"
