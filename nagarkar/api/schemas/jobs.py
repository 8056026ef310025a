"""Results of manually triggered recurring jobs."""

from datetime import datetime

from nagarkar.api.schemas.common import Amount, ORMSchema


class OverdueCheckOut(ORMSchema):
    records_processed: int
    penalties_applied: int
    total_penalty_amount: Amount
    reminders_created: int
    failed_records: list[int]
    timestamp: datetime


class WeeklyReminderOut(ORMSchema):
    reminders_created: int
    timestamp: datetime
