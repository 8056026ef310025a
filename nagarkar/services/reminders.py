"""Reminder records and SMS notifications to citizens."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal, TypeAlias

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import NotFoundError
from nagarkar.domain.enums import ReminderStatus, ReminderType
from nagarkar.infrastructure.database.models import Citizen, Penalty, Reminder
from nagarkar.infrastructure.gateways import SmsClient
from nagarkar.infrastructure.repositories import (
    CitizenRepository,
    PenaltyRepository,
    ReminderRepository,
    TaxRecordRepository,
)
from nagarkar.services.common import (
    active_penalties,
    local_today,
    sum_amounts,
    utcnow,
)

UPCOMING_WINDOW_DAYS = 7

SmsKind: TypeAlias = Literal["reminder", "overdue", "penalty"]
BulkKind: TypeAlias = Literal["upcoming", "overdue", "penalty"]

SMS_REMINDER_TYPES: dict[str, ReminderType] = {
    "reminder": ReminderType.UPCOMING,
    "upcoming": ReminderType.UPCOMING,
    "overdue": ReminderType.OVERDUE,
    "penalty": ReminderType.PENALTY,
}


@dataclass(frozen=True)
class ReminderSummary:
    total: int
    sent: int
    failed: int


@dataclass(frozen=True)
class CitizenReminders:
    citizen: Citizen
    summary: ReminderSummary
    reminders: list[Reminder]


@dataclass(frozen=True)
class SmsDelivery:
    citizen_id: int
    citizen_name: str | None
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SmsBatch:
    results: list[SmsDelivery]
    total: int
    successful: int
    failed: int

    @classmethod
    def of(cls, results: list[SmsDelivery]) -> "SmsBatch":
        successful = sum(1 for r in results if r.success)
        return cls(
            results=results,
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
        )


class ReminderService:
    """Reminder operations.

    Args:
        session: Database session of the current unit of work.
        sms: SMS client, needed only for the operations that send texts.
    """

    def __init__(self, session: AsyncSession, sms: SmsClient | None = None) -> None:
        self.sms = sms
        self.citizens = CitizenRepository(session)
        self.penalties = PenaltyRepository(session)
        self.reminders = ReminderRepository(session)
        self.tax_records = TaxRecordRepository(session)

    def _require_sms(self) -> SmsClient:
        if self.sms is None:
            msg = "ReminderService was created without an SMS client"
            raise RuntimeError(msg)
        return self.sms

    async def create_reminders(
        self, citizen_ids: Sequence[int], message: str
    ) -> list[Reminder]:
        """Record a MANUAL reminder for every citizen.

        Raises:
            NotFoundError: If any of the citizens does not exist.
        """
        wanted = set(citizen_ids)
        citizens = await self.citizens.get_many(wanted)
        missing = wanted - {c.id for c in citizens}
        if missing:
            raise NotFoundError(
                "Some citizens not found", context={"missing_ids": sorted(missing)}
            )

        reminders = [
            await self.reminders.create(
                Reminder(
                    citizen_id=citizen.id,
                    message=message,
                    type=ReminderType.MANUAL,
                    status=ReminderStatus.SENT,
                    sent_at=utcnow(),
                )
            )
            for citizen in citizens
        ]
        logger.info("Manual reminders recorded", count=len(reminders))
        return reminders

    async def list_for_citizen(self, citizen_id: int) -> CitizenReminders:
        citizen = await self.citizens.get_by_id(citizen_id)
        if citizen is None:
            raise NotFoundError("Citizen not found", context={"citizen_id": citizen_id})

        reminders = await self.reminders.list_for_citizen(citizen_id)
        if not reminders:
            raise NotFoundError(
                "No reminders found", context={"citizen_id": citizen_id}
            )

        sent = sum(1 for r in reminders if r.status == ReminderStatus.SENT)
        return CitizenReminders(
            citizen=citizen,
            summary=ReminderSummary(
                total=len(reminders), sent=sent, failed=len(reminders) - sent
            ),
            reminders=reminders,
        )

    async def _deliver(
        self, citizen: Citizen, message: str, reminder_type: ReminderType
    ) -> SmsDelivery:
        result = await self._require_sms().send(citizen.contact_no, message)
        await self.reminders.create(
            Reminder(
                citizen_id=citizen.id,
                message=message,
                type=reminder_type,
                status=ReminderStatus.SENT if result.success else ReminderStatus.FAILED,
                sent_at=utcnow(),
                message_id=result.message_id,
            )
        )
        return SmsDelivery(
            citizen_id=citizen.id,
            citizen_name=citizen.name,
            success=result.success,
            message_id=result.message_id,
            error=result.error,
        )

    async def send_sms(
        self, citizen_ids: Sequence[int], message: str, kind: SmsKind = "reminder"
    ) -> SmsBatch:
        """Text ``message`` to each citizen and log a reminder per attempt.

        Unknown citizens are reported in the results and do not stop the batch.
        """
        citizens = {c.id: c for c in await self.citizens.get_many(set(citizen_ids))}
        results = []
        for citizen_id in citizen_ids:
            citizen = citizens.get(citizen_id)
            if citizen is None:
                results.append(
                    SmsDelivery(
                        citizen_id=citizen_id,
                        citizen_name=None,
                        success=False,
                        error="Citizen not found",
                    )
                )
                continue
            results.append(
                await self._deliver(citizen, message, SMS_REMINDER_TYPES[kind])
            )

        batch = SmsBatch.of(results)
        logger.info(
            "SMS batch sent", total=batch.total, successful=batch.successful
        )
        return batch

    async def _bulk_messages(
        self, kind: BulkKind, custom_message: str | None, today: date
    ) -> list[tuple[Citizen, str]]:
        sms = self._require_sms()
        messages: dict[int, tuple[Citizen, str]] = {}

        if kind == "penalty":
            by_citizen: dict[int, list[Penalty]] = {}
            for penalty in await self.penalties.list_active():
                by_citizen.setdefault(penalty.citizen_id, []).append(penalty)
            for penalties in by_citizen.values():
                citizen = penalties[0].citizen
                text = custom_message or sms.penalty_message(
                    citizen.name, sum_amounts(penalties)
                )
                messages[citizen.id] = (citizen, text)
            return list(messages.values())

        if kind == "upcoming":
            records = await self.tax_records.list_pending_due_between(
                today, today + timedelta(days=UPCOMING_WINDOW_DAYS)
            )
        else:
            records = await self.tax_records.list_overdue(today)

        for record in records:
            if record.citizen_id in messages:
                continue
            citizen = record.citizen
            if custom_message:
                text = custom_message
            elif kind == "upcoming":
                text = sms.reminder_message(
                    citizen.name, record.amount, record.due_date
                )
            else:
                text = sms.overdue_message(
                    citizen.name, record.amount, sum_amounts(active_penalties(record))
                )
            messages[citizen.id] = (citizen, text)
        return list(messages.values())

    async def send_bulk_reminders(
        self,
        kind: BulkKind,
        custom_message: str | None = None,
        today: date | None = None,
    ) -> SmsBatch:
        """Text every citizen concerned by ``kind``.

        - ``upcoming``: a pending tax record is due within seven days
        - ``overdue``: an unpaid tax record is past its due date
        - ``penalty``: the citizen has ACTIVE penalties
        """
        today = today or local_today()
        targets = await self._bulk_messages(kind, custom_message, today)
        reminder_type = SMS_REMINDER_TYPES[kind]
        results = [
            await self._deliver(citizen, text, reminder_type)
            for citizen, text in targets
        ]
        batch = SmsBatch.of(results)
        logger.info(
            "Bulk {} reminders sent",
            kind,
            total=batch.total,
            successful=batch.successful,
        )
        return batch
