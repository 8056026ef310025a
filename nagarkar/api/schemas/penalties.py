"""Penalty, rule and auto calculation payloads."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from nagarkar.api.schemas.citizens import CitizenOut
from nagarkar.api.schemas.common import (
    Amount,
    CitizenRef,
    ORMSchema,
    PositiveAmount,
    RequestSchema,
    TaxRecordRef,
)
from nagarkar.domain.enums import PenaltyStatus
from nagarkar.domain.penalties import PenaltyRule, PenaltyType
from nagarkar.services.penalties import AutoPenaltyStatus


class ManualPenaltyRequest(RequestSchema):
    tax_record_ids: list[int] = Field(min_length=1)
    percentage: Decimal | None = Field(
        default=None,
        gt=0,
        le=100,
        description="Percentage of the tax amount; the configured default if omitted",
    )


class AutoCalculateRequest(RequestSchema):
    dry_run: bool = False
    citizen_ids: list[int] = Field(default_factory=list)


class SimulateRequest(RequestSchema):
    tax_amount: PositiveAmount
    due_date: date
    current_date: date | None = None


class RulesUpdateRequest(RequestSchema):
    rules: list[PenaltyRule] = Field(min_length=1)


class PenaltyRuleOut(ORMSchema):
    id: str
    name: str
    type: PenaltyType
    value: Amount
    grace_period_days: int
    max_penalty: Amount | None
    escalating: bool
    description: str


class PenaltyCalculationOut(ORMSchema):
    penalty_amount: Amount
    days_overdue: int
    applied_rule: PenaltyRuleOut
    calculation: str


class PenaltyOut(ORMSchema):
    id: int
    tax_record_id: int
    citizen_id: int
    amount: Amount
    reason: str
    status: PenaltyStatus
    days_overdue: int | None
    calculation: str | None
    applied_date: datetime
    paid_date: datetime | None
    tax_record: TaxRecordRef


class PenaltyWithCitizenOut(PenaltyOut):
    citizen: CitizenRef


class PenaltySummaryOut(ORMSchema):
    total_penalties: int
    active_penalties: int
    paid_penalties: int
    waived_penalties: int
    total_penalty_amount: Amount


class CitizenPenaltiesOut(ORMSchema):
    citizen: CitizenOut
    penalty_summary: PenaltySummaryOut
    penalties: list[PenaltyOut]


class AutoPenaltyOutcomeOut(ORMSchema):
    citizen_id: int
    citizen_name: str
    tax_record_id: int
    tax_year: int
    tax_amount: Amount
    status: AutoPenaltyStatus
    reason: str | None
    existing_penalty: Amount | None
    penalty_amount: Amount | None
    days_overdue: int | None
    applied_rule: str | None
    calculation: str | None
    error: str | None


class AutoPenaltyRunOut(ORMSchema):
    total_records_processed: int
    penalties_applied: int
    total_penalty_amount: Amount
    dry_run: bool
    results: list[AutoPenaltyOutcomeOut]
