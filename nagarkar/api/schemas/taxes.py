"""Tax record payloads."""

from datetime import date, datetime

from pydantic import Field

from nagarkar.api.schemas.common import (
    Amount,
    ORMSchema,
    PaymentRef,
    PositiveAmount,
    RequestSchema,
)
from nagarkar.domain.enums import PenaltyStatus, TaxStatus


class TaxRecordCreate(RequestSchema):
    citizen_id: int = Field(gt=0)
    tax_year: int = Field(ge=1900, le=2100, examples=[2024])
    amount: PositiveAmount
    due_date: date


class TaxRecordOut(ORMSchema):
    id: int
    citizen_id: int
    tax_year: int
    amount: Amount
    due_date: date
    status: TaxStatus
    paid_date: datetime | None
    created_at: datetime


class PenaltyRef(ORMSchema):
    id: int
    amount: Amount
    reason: str
    status: PenaltyStatus
    applied_date: datetime


class TaxRecordHistoryOut(TaxRecordOut):
    payments: list[PaymentRef]
    penalties: list[PenaltyRef]
