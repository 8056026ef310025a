"""Late payment penalty rules and their evaluation.

A rule applies once the number of days a tax record is overdue exceeds the
rule's grace period. When several rules apply, the configured selection
policy decides which one is charged:

- ``FIRST_MATCH``: the first applicable rule in list order. This is the
  policy the municipality has always used; it is not necessarily the most
  specific rule.
- ``HIGHEST_GRACE``: the applicable rule with the largest grace period,
  earliest in list order on ties.

Amounts are computed with ``Decimal`` and the charged penalty is rounded to
whole rupees, half up.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from threading import Lock

from pydantic import BaseModel, Field, field_validator

from nagarkar.core.constants import CURRENCY_SYMBOL

DAYS_PER_MONTH = 30
SECONDS_PER_DAY = 86_400


class PenaltyType(StrEnum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


class RuleSelection(StrEnum):
    FIRST_MATCH = "first_match"
    HIGHEST_GRACE = "highest_grace"


class PenaltyRule(BaseModel):
    """A configurable penalty rule.

    ``escalating`` only affects FIXED rules: the value is charged once for
    every started 30 day period past the grace period.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: PenaltyType
    value: Decimal = Field(ge=0)
    grace_period_days: int = Field(ge=0)
    max_penalty: Decimal | None = Field(default=None, ge=0)
    escalating: bool = False
    description: str = ""

    @field_validator("id", "name", mode="after")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        return v


class PenaltyCalculation(BaseModel):
    """Result of evaluating the rules for one tax record."""

    penalty_amount: Decimal
    days_overdue: int
    applied_rule: PenaltyRule
    calculation: str


def format_amount(value: Decimal) -> str:
    """Render an amount without trailing zeros, e.g. ``100`` or ``12.5``."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return format(value.normalize(), "f")


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days from ``start`` to ``end``, rounded down.

    Two datetimes are compared to the second; otherwise both values are
    reduced to calendar dates.
    """
    if isinstance(start, datetime) and isinstance(end, datetime):
        return math.floor((end - start).total_seconds() / SECONDS_PER_DAY)
    start_day = start.date() if isinstance(start, datetime) else start
    end_day = end.date() if isinstance(end, datetime) else end
    return (end_day - start_day).days


def _round_rupees(value: Decimal) -> Decimal:
    return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def _charge(
    rule: PenaltyRule, tax_amount: Decimal, days_overdue: int
) -> tuple[Decimal, str]:
    value = format_amount(rule.value)

    if rule.type is PenaltyType.FIXED:
        if rule.escalating:
            months = math.ceil((days_overdue - rule.grace_period_days) / DAYS_PER_MONTH)
            amount = rule.value * months
            return amount, (
                f"{CURRENCY_SYMBOL}{value} × {months} months = "
                f"{CURRENCY_SYMBOL}{format_amount(amount)}"
            )
        return rule.value, f"Fixed penalty: {CURRENCY_SYMBOL}{value}"

    raw = tax_amount * rule.value / 100
    base = (
        f"{value}% of {CURRENCY_SYMBOL}{format_amount(tax_amount)} = "
        f"{CURRENCY_SYMBOL}{format_amount(raw)}"
    )
    if rule.max_penalty and raw > rule.max_penalty:
        return rule.max_penalty, (
            f"{base}, capped at {CURRENCY_SYMBOL}{format_amount(rule.max_penalty)}"
        )
    return raw, base


class PenaltyCalculator:
    """Evaluates penalty rules against tax records.

    The rule list is replaced atomically by ``update_rules`` so a request
    never observes a half-updated list.

    Args:
        rules: Ordered penalty rules.
        selection: Policy used when more than one rule applies.
    """

    def __init__(
        self,
        rules: Iterable[PenaltyRule],
        selection: RuleSelection = RuleSelection.FIRST_MATCH,
    ) -> None:
        self._rules: tuple[PenaltyRule, ...] = tuple(rules)
        self._lock = Lock()
        self.selection = selection

    def get_rules(self) -> list[PenaltyRule]:
        """Return a copy of the current rule list."""
        return list(self._rules)

    def update_rules(self, rules: Sequence[PenaltyRule]) -> None:
        """Replace the rule list.

        Raises:
            ValueError: If ``rules`` is empty.
        """
        if not rules:
            msg = "At least one penalty rule is required"
            raise ValueError(msg)
        with self._lock:
            self._rules = tuple(rules)

    def select_rule(self, days_overdue: int) -> PenaltyRule | None:
        """Pick the rule charged for ``days_overdue`` under the selection policy."""
        candidates = [r for r in self._rules if days_overdue > r.grace_period_days]
        if not candidates:
            return None
        if self.selection is RuleSelection.HIGHEST_GRACE:
            return max(candidates, key=lambda r: r.grace_period_days)
        return candidates[0]

    def calculate_penalty(
        self,
        tax_amount: Decimal,
        due_date: date | datetime,
        current_date: date | datetime | None = None,
    ) -> PenaltyCalculation | None:
        """Compute the penalty owed on a tax amount.

        Args:
            tax_amount: The tax record amount.
            due_date: When the tax was due.
            current_date: Evaluation date, today when omitted.

        Returns:
            PenaltyCalculation | None: None when the record is not overdue or
                every rule's grace period still covers it.
        """
        current = current_date if current_date is not None else date.today()
        days_overdue = days_between(due_date, current)
        if days_overdue <= 0:
            return None

        rule = self.select_rule(days_overdue)
        if rule is None:
            return None

        amount, calculation = _charge(rule, Decimal(tax_amount), days_overdue)
        return PenaltyCalculation(
            penalty_amount=_round_rupees(amount),
            days_overdue=days_overdue,
            applied_rule=rule,
            calculation=calculation,
        )
