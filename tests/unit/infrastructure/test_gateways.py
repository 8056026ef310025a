"""Unit tests for the mock SMS and payment gateway clients."""

import random
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
import pytest_check as check

from nagarkar.core.config import GatewayConfig
from nagarkar.infrastructure.gateways import (
    MockPaymentGateway,
    MockSmsClient,
    PaymentRequest,
    SmsClient,
)

REQUEST = PaymentRequest(
    amount=Decimal(5100),
    currency="INR",
    description="Property tax 2024 - CID001001",
    customer_name="John Doe",
    customer_phone="9876543210",
)


@pytest.mark.unit
class TestMockSmsClient:
    async def test_send_succeeds(self) -> None:
        client = MockSmsClient(success_rate=1.0, rng=random.Random(1))

        result = await client.send("9876543210", "hello")

        check.is_true(result.success)
        check.is_true(result.message_id.startswith("mock_msg_"))
        check.is_none(result.error)

    async def test_send_fails(self) -> None:
        client = MockSmsClient(success_rate=0.0)

        result = await client.send("9876543210", "hello")

        check.is_false(result.success)
        check.equal(result.error, "Failed to deliver SMS")

    def test_from_config(self) -> None:
        client = MockSmsClient.from_config(
            GatewayConfig(sms_success_rate=0.5, sms_latency_ms=0)
        )
        assert (client.success_rate, client.latency_ms) == (0.5, 0)


@pytest.mark.unit
class TestMessages:
    def test_reminder(self) -> None:
        assert SmsClient.reminder_message(
            "John Doe", Decimal(5000), date(2024, 12, 31)
        ) == (
            "Dear John Doe, your tax payment of ₹5000 is due on 2024-12-31. "
            "Please pay to avoid penalties. - Municipality"
        )

    def test_overdue(self) -> None:
        assert SmsClient.overdue_message("John Doe", Decimal(5000), Decimal(100)) == (
            "Dear John Doe, your tax payment of ₹5000 is overdue. Penalty of ₹100 "
            "has been added. Total: ₹5100. - Municipality"
        )

    def test_penalty(self) -> None:
        assert SmsClient.penalty_message("John Doe", Decimal("100.50")) == (
            "Dear John Doe, a penalty of ₹100.5 has been added to your account for "
            "late payment. Please clear your dues immediately. - Municipality"
        )


@pytest.mark.unit
class TestMockPaymentGateway:
    async def test_create_session(self) -> None:
        gateway = MockPaymentGateway(
            base_url="https://pay.example/", session_minutes=30
        )

        session = await gateway.create_session(REQUEST)

        check.is_true(session.session_id.startswith("mock_session_"))
        check.equal(
            session.payment_url, f"https://pay.example/pay/{session.session_id}"
        )
        check.greater(session.expires_at, datetime.now(UTC))

    async def test_process_success(self) -> None:
        result = await MockPaymentGateway(process_success_rate=1.0).process(REQUEST)

        check.is_true(result.success)
        check.equal(result.status, "completed")
        check.equal(result.gateway_response["amount"], "5100")

    async def test_process_declined(self) -> None:
        result = await MockPaymentGateway(process_success_rate=0.0).process(REQUEST)

        check.is_false(result.success)
        check.equal(result.error, "Payment declined by bank")

    async def test_verify(self) -> None:
        ok = await MockPaymentGateway(verify_success_rate=1.0).verify("pay_1")
        failed = await MockPaymentGateway(verify_success_rate=0.0).verify("pay_1")

        check.equal((ok.success, ok.payment_id), (True, "pay_1"))
        check.equal((failed.success, failed.status), (False, "failed"))

    @pytest.mark.parametrize(
        ("signature", "expected"),
        [
            ("mock_webhook_signature", True),
            ("forged", False),
            ("mock_webhook_signatur\xe9", False),
            (None, False),
        ],
    )
    def test_webhook_signature(self, signature: str | None, expected: bool) -> None:
        assert MockPaymentGateway().verify_webhook_signature(signature) is expected
