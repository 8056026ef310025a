"""District and citizen payloads."""

from datetime import date, datetime

from pydantic import Field

from nagarkar.api.schemas.common import (
    Amount,
    DistrictRef,
    ORMSchema,
    PaymentRef,
    RequestSchema,
)
from nagarkar.domain.enums import TaxStatus


class DistrictCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=100, examples=["Central District"])


class DistrictOut(ORMSchema):
    id: int
    name: str
    created_at: datetime


class DistrictListingOut(ORMSchema):
    district: DistrictOut
    citizen_count: int


class CitizenCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=200)
    ward_no: str = Field(min_length=1, max_length=50)
    district_id: int = Field(gt=0)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    contact_no: str = Field(min_length=1, max_length=20)
    email: str | None = Field(default=None, max_length=255)


class CitizenOut(ORMSchema):
    id: int
    customer_id: str
    name: str
    ward_no: str
    district_id: int
    district: DistrictRef
    city: str
    state: str
    contact_no: str
    email: str | None
    created_at: datetime


class CitizenListingOut(ORMSchema):
    citizen: CitizenOut
    tax_records_count: int
    payments_count: int


class TaxSummaryOut(ORMSchema):
    total_tax_amount: Amount
    total_paid_amount: Amount
    total_pending_amount: Amount
    total_penalties: Amount
    total_records: int
    paid_records: int
    pending_records: int


class TaxRecordStatusOut(ORMSchema):
    id: int
    tax_year: int
    amount: Amount
    due_date: date
    status: TaxStatus
    is_overdue: bool
    days_overdue: int
    penalty_amount: Amount
    last_payment: PaymentRef | None


class CitizenTaxDetailsOut(ORMSchema):
    citizen: CitizenOut
    tax_summary: TaxSummaryOut
    tax_records: list[TaxRecordStatusOut]
