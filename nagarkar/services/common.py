"""Derived values shared by several services."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from nagarkar.core.config import get_settings
from nagarkar.domain.enums import PenaltyStatus, TaxStatus
from nagarkar.domain.penalties import days_between
from nagarkar.infrastructure.database.models import Penalty, TaxRecord

ZERO = Decimal(0)


def utcnow() -> datetime:
    return datetime.now(UTC)


def local_today() -> date:
    """Today in the municipality's timezone, which also drives the job schedule."""
    return datetime.now(ZoneInfo(get_settings().scheduler_config.timezone)).date()


def sum_amounts(items: list[Penalty] | list[TaxRecord]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def active_penalties(tax_record: TaxRecord) -> list[Penalty]:
    """ACTIVE penalties of a record whose ``penalties`` are loaded."""
    return [p for p in tax_record.penalties if p.status == PenaltyStatus.ACTIVE]


def is_overdue(tax_record: TaxRecord, today: date) -> bool:
    if tax_record.status == TaxStatus.OVERDUE:
        return True
    return tax_record.status == TaxStatus.PENDING and today > tax_record.due_date


def days_overdue(tax_record: TaxRecord, today: date) -> int:
    if not is_overdue(tax_record, today):
        return 0
    return max(days_between(tax_record.due_date, today), 0)


@dataclass(frozen=True)
class AmountBreakdown:
    """What a citizen owes on one tax record."""

    tax_amount: Decimal
    penalty_amount: Decimal
    total_amount: Decimal

    @classmethod
    def for_record(cls, tax_record: TaxRecord) -> "AmountBreakdown":
        penalty_amount = sum_amounts(active_penalties(tax_record))
        return cls(
            tax_amount=tax_record.amount,
            penalty_amount=penalty_amount,
            total_amount=tax_record.amount + penalty_amount,
        )

    def as_context(self) -> dict[str, float]:
        return {
            "tax_amount": float(self.tax_amount),
            "penalty_amount": float(self.penalty_amount),
            "total_amount": float(self.total_amount),
        }
