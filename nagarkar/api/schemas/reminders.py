"""Reminder and SMS payloads."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from nagarkar.api.schemas.citizens import CitizenOut
from nagarkar.api.schemas.common import ORMSchema, RequestSchema
from nagarkar.domain.enums import ReminderStatus, ReminderType


class ReminderCreate(RequestSchema):
    citizen_ids: list[int] = Field(min_length=1)
    message: str = Field(min_length=1, max_length=1000)


class SmsSendRequest(RequestSchema):
    citizen_ids: list[int] = Field(min_length=1)
    message: str = Field(min_length=1, max_length=1000)
    type: Literal["reminder", "overdue", "penalty"] = "reminder"


class BulkReminderRequest(RequestSchema):
    reminder_type: Literal["upcoming", "overdue", "penalty"]
    custom_message: str | None = Field(default=None, max_length=1000)


class ReminderOut(ORMSchema):
    id: int
    citizen_id: int
    message: str
    type: ReminderType
    status: ReminderStatus
    sent_at: datetime
    message_id: str | None


class ReminderSummaryOut(ORMSchema):
    total: int
    sent: int
    failed: int


class CitizenRemindersOut(ORMSchema):
    citizen: CitizenOut
    summary: ReminderSummaryOut
    reminders: list[ReminderOut]


class SmsDeliveryOut(ORMSchema):
    citizen_id: int
    citizen_name: str | None
    success: bool
    message_id: str | None
    error: str | None


class SmsBatchOut(ORMSchema):
    results: list[SmsDeliveryOut]
    total: int
    successful: int
    failed: int
