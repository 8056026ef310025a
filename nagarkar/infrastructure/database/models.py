"""ORM models for the tax administration records.

Many-to-one relationships are eagerly joined so that a loaded row can be
serialized without further queries. Collections are never lazy loaded;
repositories request them explicitly with ``selectinload``.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nagarkar.domain.enums import (
    PaymentMethod,
    PaymentStatus,
    PenaltyStatus,
    ReminderStatus,
    ReminderType,
    TaxStatus,
)
from nagarkar.infrastructure.database.base import BaseModel, BigIntegerKey

Money = Numeric(12, 2)


def _enum(enum_class: type) -> SQLEnum:
    return SQLEnum(enum_class, native_enum=False, length=20)


class Admin(BaseModel):
    """Municipal staff account."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class District(BaseModel):
    __tablename__ = "districts"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    citizens: Mapped[list["Citizen"]] = relationship(
        back_populates="district", lazy="raise"
    )


class Citizen(BaseModel):
    """A property owner who is billed annually."""

    __tablename__ = "citizens"

    customer_id: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    ward_no: Mapped[str] = mapped_column(String(50), nullable=False)
    district_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("districts.id"), nullable=False, index=True
    )
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_no: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    district: Mapped[District] = relationship(back_populates="citizens", lazy="joined")
    tax_records: Mapped[list["TaxRecord"]] = relationship(
        back_populates="citizen", lazy="raise"
    )
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="citizen", lazy="raise"
    )
    penalties: Mapped[list["Penalty"]] = relationship(
        back_populates="citizen", lazy="raise"
    )
    reminders: Mapped[list["Reminder"]] = relationship(
        back_populates="citizen", lazy="raise"
    )


class TaxRecord(BaseModel):
    """A citizen's tax obligation for one year."""

    __tablename__ = "tax_records"
    __table_args__ = (UniqueConstraint("citizen_id", "tax_year"),)

    citizen_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("citizens.id"), nullable=False, index=True
    )
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[TaxStatus] = mapped_column(
        _enum(TaxStatus), default=TaxStatus.PENDING, nullable=False, index=True
    )
    paid_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    citizen: Mapped[Citizen] = relationship(back_populates="tax_records", lazy="joined")
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="tax_record", lazy="raise"
    )
    penalties: Mapped[list["Penalty"]] = relationship(
        back_populates="tax_record", lazy="raise"
    )


class Payment(BaseModel):
    """A payment against a tax record, counter or online."""

    __tablename__ = "payments"

    tax_record_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("tax_records.id"), nullable=False, index=True
    )
    citizen_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("citizens.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    method: Mapped[PaymentMethod] = mapped_column(_enum(PaymentMethod), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True
    )
    receipt_number: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False
    )
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    gateway_session_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True, index=True
    )
    gateway_payment_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gateway_transaction_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    gateway_response: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    tax_record: Mapped[TaxRecord] = relationship(
        back_populates="payments", lazy="joined"
    )
    citizen: Mapped[Citizen] = relationship(back_populates="payments", lazy="joined")


class Penalty(BaseModel):
    """A late payment surcharge on a tax record."""

    __tablename__ = "penalties"

    tax_record_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("tax_records.id"), nullable=False, index=True
    )
    citizen_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("citizens.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[PenaltyStatus] = mapped_column(
        _enum(PenaltyStatus), default=PenaltyStatus.ACTIVE, nullable=False, index=True
    )
    days_overdue: Mapped[int | None] = mapped_column(Integer, nullable=True)
    calculation: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    paid_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    tax_record: Mapped[TaxRecord] = relationship(
        back_populates="penalties", lazy="joined"
    )
    citizen: Mapped[Citizen] = relationship(back_populates="penalties", lazy="joined")


class Reminder(BaseModel):
    """A logged SMS notification."""

    __tablename__ = "reminders"

    citizen_id: Mapped[int] = mapped_column(
        BigIntegerKey, ForeignKey("citizens.id"), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[ReminderType] = mapped_column(_enum(ReminderType), nullable=False)
    status: Mapped[ReminderStatus] = mapped_column(
        _enum(ReminderStatus), default=ReminderStatus.SENT, nullable=False
    )
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    message_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    citizen: Mapped[Citizen] = relationship(back_populates="reminders", lazy="joined")
