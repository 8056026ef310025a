"""Status and kind enumerations stored on the tax administration records."""

from enum import StrEnum


class TaxStatus(StrEnum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class PaymentMethod(StrEnum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class PaymentStatus(StrEnum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


class PenaltyStatus(StrEnum):
    ACTIVE = "ACTIVE"
    PAID = "PAID"
    WAIVED = "WAIVED"


class ReminderType(StrEnum):
    MANUAL = "MANUAL"
    UPCOMING = "UPCOMING"
    OVERDUE = "OVERDUE"
    PENALTY = "PENALTY"
    WEEKLY = "WEEKLY"


class ReminderStatus(StrEnum):
    SENT = "SENT"
    FAILED = "FAILED"
