"""SMS delivery client and the reminder message templates."""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import lru_cache

from loguru import logger

from nagarkar.core.config import GatewayConfig, get_settings
from nagarkar.core.constants import CURRENCY_SYMBOL
from nagarkar.domain.penalties import format_amount
from nagarkar.infrastructure.gateways._mock import mock_identifier, simulate_latency


@dataclass(frozen=True)
class SmsResult:
    """Outcome of a single SMS submission."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class SmsClient(ABC):
    """Sends text messages and renders the standard reminder texts."""

    @abstractmethod
    async def send(self, to: str, message: str) -> SmsResult:
        """Send ``message`` to the phone number ``to``."""

    @staticmethod
    def reminder_message(name: str, tax_amount: Decimal, due_date: date) -> str:
        return (
            f"Dear {name}, your tax payment of {CURRENCY_SYMBOL}"
            f"{format_amount(tax_amount)} is due on {due_date.isoformat()}. "
            "Please pay to avoid penalties. - Municipality"
        )

    @staticmethod
    def overdue_message(name: str, tax_amount: Decimal, penalty_amount: Decimal) -> str:
        total = tax_amount + penalty_amount
        return (
            f"Dear {name}, your tax payment of {CURRENCY_SYMBOL}"
            f"{format_amount(tax_amount)} is overdue. Penalty of {CURRENCY_SYMBOL}"
            f"{format_amount(penalty_amount)} has been added. Total: "
            f"{CURRENCY_SYMBOL}{format_amount(total)}. - Municipality"
        )

    @staticmethod
    def penalty_message(name: str, penalty_amount: Decimal) -> str:
        return (
            f"Dear {name}, a penalty of {CURRENCY_SYMBOL}"
            f"{format_amount(penalty_amount)} has been added to your account for "
            "late payment. Please clear your dues immediately. - Municipality"
        )


class MockSmsClient(SmsClient):
    """SMS client that delivers nothing and succeeds at a configured rate.

    Args:
        success_rate: Probability in ``[0, 1]`` that a send succeeds.
        latency_ms: Simulated API latency.
        from_number: Sender number reported in the logs.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        success_rate: float = 0.9,
        latency_ms: int = 0,
        from_number: str = "+91-MUNICIPAL",
        rng: random.Random | None = None,
    ) -> None:
        self.success_rate = success_rate
        self.latency_ms = latency_ms
        self.from_number = from_number
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: GatewayConfig) -> "MockSmsClient":
        return cls(
            success_rate=config.sms_success_rate,
            latency_ms=config.sms_latency_ms,
            from_number=config.sms_from_number,
        )

    async def send(self, to: str, message: str) -> SmsResult:
        logger.info(
            "Sending SMS to {} from {}", to, self.from_number, length=len(message)
        )
        await simulate_latency(self.latency_ms)

        if self._rng.random() < self.success_rate:
            return SmsResult(
                success=True, message_id=mock_identifier("mock_msg", self._rng)
            )

        logger.warning("SMS delivery to {} failed", to)
        return SmsResult(success=False, error="Failed to deliver SMS")


@lru_cache
def get_sms_client() -> SmsClient:
    """Get the process-wide SMS client."""
    return MockSmsClient.from_config(get_settings().gateway_config)
