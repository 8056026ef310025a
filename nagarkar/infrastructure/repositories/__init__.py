"""Entity repositories with the queries the services need."""

from nagarkar.infrastructure.repositories.admins import AdminRepository
from nagarkar.infrastructure.repositories.citizens import CitizenRepository
from nagarkar.infrastructure.repositories.districts import DistrictRepository
from nagarkar.infrastructure.repositories.payments import PaymentRepository
from nagarkar.infrastructure.repositories.penalties import PenaltyRepository
from nagarkar.infrastructure.repositories.reminders import ReminderRepository
from nagarkar.infrastructure.repositories.tax_records import TaxRecordRepository

__all__ = [
    "AdminRepository",
    "CitizenRepository",
    "DistrictRepository",
    "PaymentRepository",
    "PenaltyRepository",
    "ReminderRepository",
    "TaxRecordRepository",
]
