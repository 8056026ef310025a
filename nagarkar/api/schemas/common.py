"""Building blocks shared by the request and response schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from nagarkar.domain.enums import PaymentMethod, PaymentStatus, TaxStatus

T = TypeVar("T")

# Rupee amounts are Decimal internally and JSON numbers on the wire
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
PositiveAmount = Annotated[
    Decimal,
    Field(gt=0, max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ORMSchema(BaseModel):
    """Response schema read from ORM rows and service results."""

    model_config = ConfigDict(from_attributes=True)


class RequestSchema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class SuccessResponse(ORMSchema, Generic[T]):
    """Envelope of every successful API response."""

    success: bool = True
    message: str | None = None
    data: T


class DistrictRef(ORMSchema):
    id: int
    name: str


class CitizenRef(ORMSchema):
    id: int
    customer_id: str
    name: str
    contact_no: str
    district: DistrictRef


class TaxRecordRef(ORMSchema):
    id: int
    tax_year: int
    amount: Amount
    due_date: date
    status: TaxStatus


class PaymentRef(ORMSchema):
    id: int
    amount: Amount
    method: PaymentMethod
    status: PaymentStatus
    receipt_number: str
    payment_date: datetime


class AmountBreakdownOut(ORMSchema):
    tax_amount: Amount
    penalty_amount: Amount
    total_amount: Amount
