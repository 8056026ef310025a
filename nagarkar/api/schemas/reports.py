"""Tax report and dashboard payloads."""

from datetime import date, datetime

from nagarkar.api.schemas.citizens import CitizenOut
from nagarkar.api.schemas.common import Amount, CitizenRef, ORMSchema, PaymentRef
from nagarkar.api.schemas.payments import PaymentOut, PaymentWithCitizenOut
from nagarkar.api.schemas.penalties import PenaltyOut, PenaltyWithCitizenOut
from nagarkar.api.schemas.reminders import ReminderOut
from nagarkar.domain.enums import PaymentMethod, TaxStatus


class ReportSummaryOut(ORMSchema):
    total_records: int
    paid_records: int
    unpaid_records: int
    overdue_records: int
    total_amount: Amount
    collected_amount: Amount
    pending_amount: Amount
    total_penalties: Amount
    collection_rate: str


class ReportRowOut(ORMSchema):
    id: int
    citizen: CitizenRef
    tax_year: int
    amount: Amount
    due_date: date
    status: TaxStatus
    payment_info: PaymentRef | None
    penalty_amount: Amount
    days_overdue: int
    created_at: datetime


class TaxReportOut(ORMSchema):
    summary: ReportSummaryOut
    records: list[ReportRowOut]


class AdminOverviewOut(ORMSchema):
    total_citizens: int
    total_districts: int
    total_tax_records: int
    total_payments: int
    total_penalties: int
    tax_collected: Amount
    pending_tax: Amount
    total_penalty_amount: Amount
    collection_rate: int


class MonthlyCollectionOut(ORMSchema):
    month: str
    amount: Amount
    count: int


class DistrictBreakdownOut(ORMSchema):
    name: str
    citizens: int
    total_tax: Amount
    collected_tax: Amount
    pending_tax: Amount
    penalties: Amount
    collection_rate: int


class MethodBreakdownOut(ORMSchema):
    method: PaymentMethod
    amount: Amount
    count: int


class AdminAnalyticsOut(ORMSchema):
    year: int
    overview: AdminOverviewOut
    monthly_collections: list[MonthlyCollectionOut]
    district_analytics: list[DistrictBreakdownOut]
    payment_methods: list[MethodBreakdownOut]
    recent_payments: list[PaymentWithCitizenOut]
    recent_penalties: list[PenaltyWithCitizenOut]


class CitizenOverviewOut(ORMSchema):
    total_tax_paid: Amount
    total_pending_tax: Amount
    total_penalties: Amount
    total_tax_records: int
    total_payments: int
    active_penalties: int


class YearlyPaymentsOut(ORMSchema):
    year: int
    amount: Amount
    count: int


class TaxTrendPointOut(ORMSchema):
    year: int
    amount: Amount
    status: TaxStatus
    due_date: date
    paid_date: datetime | None


class CitizenAnalyticsOut(ORMSchema):
    citizen: CitizenOut
    overview: CitizenOverviewOut
    payment_history: list[YearlyPaymentsOut]
    tax_trend: list[TaxTrendPointOut]
    payment_methods: list[MethodBreakdownOut]
    recent_payments: list[PaymentOut]
    recent_penalties: list[PenaltyOut]
    recent_reminders: list[ReminderOut]
