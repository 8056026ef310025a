"""Online payment gateway client.

The flow is session based: the service creates a hosted payment session,
the citizen pays on the gateway's page, and the payment is settled either
when the client asks for verification or when the gateway calls the webhook.
"""

import hmac
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Any, Literal

from loguru import logger

from nagarkar.core.config import GatewayConfig, get_settings
from nagarkar.infrastructure.gateways._mock import mock_identifier, simulate_latency


@dataclass(frozen=True)
class PaymentRequest:
    """What the gateway needs to charge a citizen."""

    amount: Decimal
    currency: str
    description: str
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentSession:
    """A hosted payment page the citizen is redirected to."""

    session_id: str
    payment_url: str
    expires_at: datetime


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of processing or verifying a payment."""

    success: bool
    status: Literal["pending", "completed", "failed"]
    payment_id: str | None = None
    transaction_id: str | None = None
    error: str | None = None
    gateway_response: dict[str, Any] | None = None


class PaymentGatewayClient(ABC):
    """Abstract payment gateway."""

    @abstractmethod
    async def create_session(self, request: PaymentRequest) -> PaymentSession:
        """Open a hosted payment session for ``request``."""

    @abstractmethod
    async def process(self, request: PaymentRequest) -> PaymentResult:
        """Charge the customer directly."""

    @abstractmethod
    async def verify(self, payment_id: str) -> PaymentResult:
        """Ask the gateway whether ``payment_id`` was paid."""

    @abstractmethod
    def verify_webhook_signature(self, signature: str | None) -> bool:
        """Check the signature sent with a webhook call."""


class MockPaymentGateway(PaymentGatewayClient):
    """Gateway that accepts everything at configured success rates.

    Args:
        base_url: Base URL of the hosted payment pages.
        webhook_secret: Value expected in the webhook signature header.
        session_minutes: Lifetime of a payment session.
        process_success_rate: Probability that ``process`` succeeds.
        verify_success_rate: Probability that ``verify`` succeeds.
        latency_ms: Simulated API latency.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        base_url: str = "https://mock-gateway.com",
        webhook_secret: str = "mock_webhook_signature",
        session_minutes: int = 30,
        process_success_rate: float = 0.9,
        verify_success_rate: float = 0.95,
        latency_ms: int = 0,
        rng: random.Random | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_minutes = session_minutes
        self.process_success_rate = process_success_rate
        self.verify_success_rate = verify_success_rate
        self.latency_ms = latency_ms
        self._webhook_secret = webhook_secret
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: GatewayConfig) -> "MockPaymentGateway":
        return cls(
            base_url=config.payment_base_url,
            webhook_secret=config.webhook_secret,
            session_minutes=config.payment_session_minutes,
            process_success_rate=config.payment_success_rate,
            verify_success_rate=config.payment_verify_success_rate,
            latency_ms=config.payment_latency_ms,
        )

    async def create_session(self, request: PaymentRequest) -> PaymentSession:
        logger.info(
            "Creating payment session for {} {}", request.amount, request.currency
        )
        await simulate_latency(self.latency_ms)

        session_id = mock_identifier("mock_session", self._rng)
        return PaymentSession(
            session_id=session_id,
            payment_url=f"{self.base_url}/pay/{session_id}",
            expires_at=datetime.now(UTC) + timedelta(minutes=self.session_minutes),
        )

    async def process(self, request: PaymentRequest) -> PaymentResult:
        logger.info("Processing payment for {} {}", request.amount, request.currency)
        await simulate_latency(self.latency_ms)

        if self._rng.random() >= self.process_success_rate:
            return PaymentResult(
                success=False, status="failed", error="Payment declined by bank"
            )

        return PaymentResult(
            success=True,
            status="completed",
            payment_id=mock_identifier("mock_pay", self._rng),
            transaction_id=mock_identifier("mock_txn", self._rng),
            gateway_response={
                "amount": str(request.amount),
                "currency": request.currency,
                "method": "card",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    async def verify(self, payment_id: str) -> PaymentResult:
        logger.info("Verifying payment {}", payment_id)
        await simulate_latency(self.latency_ms)

        if self._rng.random() >= self.verify_success_rate:
            return PaymentResult(
                success=False,
                status="failed",
                payment_id=payment_id,
                error="Payment verification failed",
            )

        return PaymentResult(
            success=True,
            status="completed",
            payment_id=payment_id,
            gateway_response={
                "verified": True,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    def verify_webhook_signature(self, signature: str | None) -> bool:
        if not signature:
            return False
        return hmac.compare_digest(
            signature.encode(), self._webhook_secret.encode()
        )


@lru_cache
def get_payment_gateway() -> PaymentGatewayClient:
    """Get the process-wide payment gateway client."""
    return MockPaymentGateway.from_config(get_settings().gateway_config)
