"""Integration tests for counter and online payments, receipts and history."""

import pytest
import pytest_check as check
from httpx import AsyncClient

from tests.integration.conftest import SeedData

WEBHOOK_HEADERS = {"X-Webhook-Signature": "mock_webhook_signature"}


async def add_manual_penalty(
    client: AsyncClient, headers: dict[str, str], tax_record_id: int
) -> dict:
    response = await client.post(
        "/api/penalty", json={"tax_record_ids": [tax_record_id]}, headers=headers
    )
    assert response.status_code == 201
    return response.json()["data"][0]


async def open_session(
    client: AsyncClient, headers: dict[str, str], tax_record_id: int
) -> dict:
    response = await client.post(
        "/api/payment/online", json={"tax_record_id": tax_record_id}, headers=headers
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.integration
class TestDirectPayment:
    async def test_pay_exact_amount(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.current_record_id,
                "method": "OFFLINE",
                "amount": 5000,
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Payment processed successfully"
        payment = body["data"]["payment"]
        check.equal(payment["status"], "COMPLETED")
        check.equal(payment["method"], "OFFLINE")
        check.equal(payment["tax_record"]["status"], "PAID")
        check.is_true(payment["receipt_number"].startswith("RCP"))
        check.equal(
            body["data"]["breakdown"],
            {"tax_amount": 5000.0, "penalty_amount": 0.0, "total_amount": 5000.0},
        )

    async def test_amount_mismatch_reports_expected_amount(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        await add_manual_penalty(client, admin_headers, seed.overdue_record_id)

        response = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.overdue_record_id,
                "method": "OFFLINE",
                "amount": 4000,
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "AMOUNT_MISMATCH"
        assert data["details"]["expected_amount"] == 4080.0
        assert data["details"]["breakdown"] == {
            "tax_amount": 4000.0,
            "penalty_amount": 80.0,
            "total_amount": 4080.0,
        }

    async def test_payment_settles_active_penalties(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        penalty = await add_manual_penalty(
            client, admin_headers, seed.overdue_record_id
        )

        response = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.overdue_record_id,
                "method": "OFFLINE",
                "amount": 4080,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201

        penalties = await client.get(
            f"/api/penalty/{seed.john_id}", headers=admin_headers
        )
        by_id = {p["id"]: p for p in penalties.json()["data"]["penalties"]}
        assert by_id[penalty["id"]]["status"] == "PAID"
        assert by_id[penalty["id"]]["paid_date"] is not None

    async def test_paid_record_cannot_be_paid_again(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        payload = {
            "tax_record_id": seed.current_record_id,
            "method": "OFFLINE",
            "amount": 5000,
        }
        first = await client.post("/api/payment", json=payload, headers=admin_headers)
        assert first.status_code == 201

        second = await client.post("/api/payment", json=payload, headers=admin_headers)

        assert second.status_code == 409
        assert second.json()["error"] == "Tax already paid"

    async def test_citizen_cannot_pay_for_others(
        self, client: AsyncClient, seed: SeedData, jane_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.current_record_id,
                "method": "ONLINE",
                "amount": 5000,
            },
            headers=jane_headers,
        )

        assert response.status_code == 403

    async def test_unknown_tax_record(
        self, client: AsyncClient, seed: SeedData, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/payment",
            json={"tax_record_id": 9999, "method": "OFFLINE", "amount": 10},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Tax record not found"


@pytest.mark.integration
class TestOnlinePayment:
    async def test_open_session(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)

        check.equal(data["payment"]["status"], "PENDING")
        check.equal(data["payment"]["method"], "ONLINE")
        check.equal(data["payment"]["amount"], 5000.0)
        session_id = data["session"]["session_id"]
        check.equal(data["payment"]["gateway_session_id"], session_id)
        check.is_true(
            data["session"]["payment_url"].startswith("https://mock-gateway.com/pay/")
        )
        check.equal(data["breakdown"]["total_amount"], 5000.0)

    async def test_session_for_another_citizens_record(
        self, client: AsyncClient, seed: SeedData, jane_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/payment/online",
            json={"tax_record_id": seed.current_record_id},
            headers=jane_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized access to tax record"

    async def test_verify_by_session_id(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)
        session_id = data["session"]["session_id"]

        response = await client.post(
            "/api/payment/verify", json={"session_id": session_id}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Payment verified and completed successfully"
        assert body["data"]["already_verified"] is False
        assert body["data"]["payment"]["status"] == "COMPLETED"
        assert body["data"]["payment"]["tax_record"]["status"] == "PAID"

    async def test_verify_twice(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)
        payment_id = data["payment"]["id"]
        await client.post("/api/payment/verify", json={"payment_id": payment_id})

        response = await client.post(
            "/api/payment/verify", json={"payment_id": payment_id}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Payment already verified"
        assert response.json()["data"]["already_verified"] is True

    async def test_verify_requires_a_reference(self, client: AsyncClient) -> None:
        response = await client.post("/api/payment/verify", json={})

        assert response.status_code == 400

    async def test_verify_unknown_payment(
        self, client: AsyncClient, seed: SeedData
    ) -> None:
        response = await client.post(
            "/api/payment/verify", json={"session_id": "mock_session_missing"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Payment record not found"


@pytest.mark.integration
class TestWebhook:
    async def test_completed_event_settles_payment(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)

        response = await client.post(
            "/api/payment/webhook",
            json={
                "event": "payment.completed",
                "data": {
                    "session_id": data["session"]["session_id"],
                    "payment_id": "mock_pay_1",
                    "transaction_id": "mock_txn_1",
                },
            },
            headers=WEBHOOK_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"applied": True}

        details = await client.get(
            f"/api/citizen/{seed.john_id}/tax", headers=john_headers
        )
        statuses = {r["id"]: r["status"] for r in details.json()["data"]["tax_records"]}
        assert statuses[seed.current_record_id] == "PAID"

    @pytest.mark.parametrize("event", ["payment.failed", "payment.expired"])
    async def test_unsuccessful_events_leave_tax_unpaid(
        self,
        client: AsyncClient,
        seed: SeedData,
        john_headers: dict[str, str],
        event: str,
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)

        response = await client.post(
            "/api/payment/webhook",
            json={
                "event": event,
                "data": {"session_id": data["session"]["session_id"]},
            },
            headers=WEBHOOK_HEADERS,
        )

        assert response.json()["data"] == {"applied": True}
        details = await client.get(
            f"/api/citizen/{seed.john_id}/tax", headers=john_headers
        )
        statuses = {r["id"]: r["status"] for r in details.json()["data"]["tax_records"]}
        assert statuses[seed.current_record_id] == "PENDING"

    async def test_settled_payment_is_not_changed_again(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)
        payload = {
            "event": "payment.completed",
            "data": {"session_id": data["session"]["session_id"]},
        }
        await client.post("/api/payment/webhook", json=payload, headers=WEBHOOK_HEADERS)

        response = await client.post(
            "/api/payment/webhook", json=payload, headers=WEBHOOK_HEADERS
        )

        assert response.json()["data"] == {"applied": False}

    async def test_unknown_event_is_acknowledged(
        self, client: AsyncClient, seed: SeedData
    ) -> None:
        response = await client.post(
            "/api/payment/webhook",
            json={"event": "payment.refunded", "data": {}},
            headers=WEBHOOK_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"applied": False}

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"X-Webhook-Signature": "forged"},
            {"X-Webhook-Signature": b"mock_webhook_signatur\xe9"},
        ],
        ids=["missing", "wrong", "non_ascii"],
    )
    async def test_signature_is_required(
        self, client: AsyncClient, seed: SeedData, headers: dict[str, str | bytes]
    ) -> None:
        response = await client.post(
            "/api/payment/webhook",
            json={"event": "payment.completed", "data": {}},
            headers=headers,
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid webhook signature"


@pytest.mark.integration
class TestHistoryAndReceipts:
    async def test_no_history(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            f"/api/payment/{seed.john_id}", headers=john_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "No payment history found"

    async def test_history_totals_count_completed_payments(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        john_headers: dict[str, str],
    ) -> None:
        await open_session(client, john_headers, seed.current_record_id)
        await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.overdue_record_id,
                "method": "OFFLINE",
                "amount": 4000,
            },
            headers=admin_headers,
        )

        response = await client.get(
            f"/api/payment/{seed.john_id}", headers=john_headers
        )

        assert response.status_code == 200
        summary = response.json()["data"]["payment_summary"]
        assert summary == {
            "total_payments": 2,
            "total_amount": 4000.0,
            "online_payments": 1,
            "offline_payments": 1,
        }

    async def test_receipt_lists_paid_penalties(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        john_headers: dict[str, str],
    ) -> None:
        await add_manual_penalty(client, admin_headers, seed.overdue_record_id)
        paid = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.overdue_record_id,
                "method": "OFFLINE",
                "amount": 4080,
            },
            headers=admin_headers,
        )
        payment_id = paid.json()["data"]["payment"]["id"]

        response = await client.get(f"/api/receipt/{payment_id}", headers=john_headers)

        assert response.status_code == 200
        receipt = response.json()["data"]
        check.equal(receipt["citizen"]["customer_id"], "CID001001")
        check.equal(receipt["tax_record"]["id"], seed.overdue_record_id)
        check.equal(
            receipt["breakdown"],
            {"tax_amount": 4000.0, "penalty_amount": 80.0, "total_amount": 4080.0},
        )
        check.equal([p["status"] for p in receipt["penalties"]], ["PAID"])

    async def test_pending_payment_has_no_receipt(
        self, client: AsyncClient, seed: SeedData, john_headers: dict[str, str]
    ) -> None:
        data = await open_session(client, john_headers, seed.current_record_id)

        response = await client.get(
            f"/api/receipt/{data['payment']['id']}", headers=john_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Receipt not found"

    async def test_receipt_of_another_citizen(
        self,
        client: AsyncClient,
        seed: SeedData,
        admin_headers: dict[str, str],
        jane_headers: dict[str, str],
    ) -> None:
        paid = await client.post(
            "/api/payment",
            json={
                "tax_record_id": seed.current_record_id,
                "method": "OFFLINE",
                "amount": 5000,
            },
            headers=admin_headers,
        )
        payment_id = paid.json()["data"]["payment"]["id"]

        response = await client.get(f"/api/receipt/{payment_id}", headers=jane_headers)

        assert response.status_code == 403
