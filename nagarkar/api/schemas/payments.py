"""Payment, gateway webhook and receipt payloads."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from nagarkar.api.schemas.common import (
    Amount,
    AmountBreakdownOut,
    CitizenRef,
    ORMSchema,
    PaymentRef,
    PositiveAmount,
    RequestSchema,
    TaxRecordRef,
)
from nagarkar.api.schemas.taxes import PenaltyRef
from nagarkar.domain.enums import PaymentMethod


class DirectPaymentRequest(RequestSchema):
    tax_record_id: int = Field(gt=0)
    method: PaymentMethod
    amount: PositiveAmount


class OnlinePaymentRequest(RequestSchema):
    tax_record_id: int = Field(gt=0)


class VerifyPaymentRequest(RequestSchema):
    payment_id: int | None = Field(default=None, gt=0)
    session_id: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def require_reference(self) -> "VerifyPaymentRequest":
        if self.payment_id is None and self.session_id is None:
            msg = "Payment ID or Session ID is required"
            raise ValueError(msg)
        return self


class WebhookEvent(RequestSchema):
    event: str = Field(min_length=1, examples=["payment.completed"])
    data: dict[str, Any] = Field(default_factory=dict)


class PaymentOut(PaymentRef):
    tax_record_id: int
    citizen_id: int
    gateway_session_id: str | None
    gateway_payment_id: str | None
    gateway_transaction_id: str | None
    expires_at: datetime | None
    tax_record: TaxRecordRef


class PaymentWithCitizenOut(PaymentOut):
    citizen: CitizenRef


class DirectPaymentOut(ORMSchema):
    payment: PaymentOut
    breakdown: AmountBreakdownOut


class PaymentSummaryOut(ORMSchema):
    total_payments: int
    total_amount: Amount
    online_payments: int
    offline_payments: int


class PaymentHistoryOut(ORMSchema):
    payments: list[PaymentOut]
    payment_summary: PaymentSummaryOut


class PaymentSessionOut(ORMSchema):
    session_id: str
    payment_url: str
    expires_at: datetime


class OnlinePaymentOut(ORMSchema):
    payment: PaymentOut
    breakdown: AmountBreakdownOut
    session: PaymentSessionOut


class VerificationOut(ORMSchema):
    payment: PaymentOut
    already_verified: bool


class WebhookAck(ORMSchema):
    applied: bool


class ReceiptOut(ORMSchema):
    payment: PaymentOut
    citizen: CitizenRef
    tax_record: TaxRecordRef
    breakdown: AmountBreakdownOut
    penalties: list[PenaltyRef]
