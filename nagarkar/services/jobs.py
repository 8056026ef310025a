"""Recurring jobs: the daily overdue check and the weekly reminder run.

Both are plain coroutines over a session so they can be run by the Celery
worker, triggered manually through the cron endpoints, or called in tests.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.constants import CURRENCY_SYMBOL
from nagarkar.core.observability import trace_operation
from nagarkar.domain.enums import ReminderStatus, ReminderType, TaxStatus
from nagarkar.domain.penalties import (
    PenaltyCalculation,
    PenaltyCalculator,
    format_amount,
)
from nagarkar.infrastructure.database.models import Reminder, TaxRecord
from nagarkar.infrastructure.repositories import TaxRecordRepository
from nagarkar.services.common import (
    ZERO,
    AmountBreakdown,
    active_penalties,
    local_today,
    utcnow,
)
from nagarkar.services.penalties import new_penalty


@dataclass(frozen=True)
class OverdueCheckResult:
    records_processed: int
    penalties_applied: int
    total_penalty_amount: Decimal
    reminders_created: int
    failed_records: list[int]


@dataclass(frozen=True)
class WeeklyReminderResult:
    reminders_created: int


def overdue_message(record: TaxRecord) -> str:
    citizen = record.citizen
    return (
        f"Dear {citizen.name}, your tax payment for {record.tax_year} is overdue. "
        f"Amount: {CURRENCY_SYMBOL}{format_amount(record.amount)}. "
        "Please pay immediately to avoid additional penalties. "
        f"Customer ID: {citizen.customer_id}"
    )


def weekly_message(record: TaxRecord, total: Decimal) -> str:
    citizen = record.citizen
    return (
        f"WEEKLY REMINDER: Dear {citizen.name}, your tax payment for "
        f"{record.tax_year} remains unpaid. Total amount including penalties: "
        f"{CURRENCY_SYMBOL}{format_amount(total)}. Please pay immediately. "
        f"Customer ID: {citizen.customer_id}"
    )


def _reminder(record: TaxRecord, message: str, kind: ReminderType) -> Reminder:
    return Reminder(
        citizen_id=record.citizen_id,
        message=message,
        type=kind,
        status=ReminderStatus.SENT,
        sent_at=utcnow(),
    )


def _penalize(
    session: AsyncSession,
    record: TaxRecord,
    calculator: PenaltyCalculator,
    today: date,
) -> PenaltyCalculation | None:
    """Charge a record that has no ACTIVE penalty yet and mark it OVERDUE."""
    if active_penalties(record):
        return None
    calculation = calculator.calculate_penalty(record.amount, record.due_date, today)
    if calculation is None:
        return None

    session.add(
        new_penalty(
            record, calculation, f"Auto-applied: {calculation.applied_rule.name}"
        )
    )
    record.status = TaxStatus.OVERDUE
    return calculation


async def check_overdue_taxes(
    session: AsyncSession, calculator: PenaltyCalculator, today: date | None = None
) -> OverdueCheckResult:
    """Penalize overdue records and remind their owners.

    Every unpaid record past its due date gets an OVERDUE reminder. Records
    without an ACTIVE penalty are also charged by the current rules and
    marked OVERDUE. A record that fails is logged and skipped.
    """
    today = today or local_today()
    with trace_operation("jobs.check_overdue_taxes", today=today.isoformat()) as span:
        records = await TaxRecordRepository(session).list_overdue(today)
        if not records:
            logger.info("No overdue taxes found")

        applied = 0
        total = ZERO
        failed: list[int] = []
        for record in records:
            record_id = record.id
            try:
                async with session.begin_nested():
                    calculation = _penalize(session, record, calculator, today)
                    session.add(
                        _reminder(record, overdue_message(record), ReminderType.OVERDUE)
                    )
                    await session.flush()
            except (ArithmeticError, SQLAlchemyError):
                logger.exception(
                    "Error processing overdue tax record", tax_record_id=record_id
                )
                failed.append(record_id)
                continue

            if calculation is not None:
                applied += 1
                total += calculation.penalty_amount
                logger.info(
                    "Applied penalty",
                    customer_id=record.citizen.customer_id,
                    amount=str(calculation.penalty_amount),
                    days_overdue=calculation.days_overdue,
                )

        span.set_attribute("penalties_applied", applied)

    reminders = len(records) - len(failed)
    logger.info(
        "Overdue tax check finished",
        processed=len(records),
        penalties_applied=applied,
        total_penalty_amount=str(total),
        reminders=reminders,
    )
    return OverdueCheckResult(
        records_processed=len(records),
        penalties_applied=applied,
        total_penalty_amount=total,
        reminders_created=reminders,
        failed_records=failed,
    )


async def send_weekly_reminders(
    session: AsyncSession, today: date | None = None
) -> WeeklyReminderResult:
    """Record a WEEKLY reminder with the amount owed for each overdue record."""
    today = today or local_today()
    with trace_operation("jobs.send_weekly_reminders", today=today.isoformat()):
        records = await TaxRecordRepository(session).list_overdue(today)
        for record in records:
            total = AmountBreakdown.for_record(record).total_amount
            session.add(
                _reminder(record, weekly_message(record, total), ReminderType.WEEKLY)
            )
        await session.flush()

    logger.info("Weekly reminders created", count=len(records))
    return WeeklyReminderResult(reminders_created=len(records))
