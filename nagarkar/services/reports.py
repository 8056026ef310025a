"""Tax collection report for administrators."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.domain.enums import PaymentStatus, TaxStatus
from nagarkar.infrastructure.database.models import Citizen, Payment
from nagarkar.infrastructure.repositories import TaxRecordRepository
from nagarkar.services.common import (
    active_penalties,
    days_overdue,
    local_today,
    sum_amounts,
)


@dataclass(frozen=True)
class ReportSummary:
    total_records: int
    paid_records: int
    unpaid_records: int
    overdue_records: int
    total_amount: Decimal
    collected_amount: Decimal
    pending_amount: Decimal
    total_penalties: Decimal
    collection_rate: str


@dataclass(frozen=True)
class ReportRow:
    id: int
    citizen: Citizen
    tax_year: int
    amount: Decimal
    due_date: date
    status: TaxStatus
    payment_info: Payment | None
    penalty_amount: Decimal
    days_overdue: int
    created_at: datetime


@dataclass(frozen=True)
class TaxReport:
    summary: ReportSummary
    records: list[ReportRow]


def collection_rate(paid: int, total: int) -> str:
    """Share of paid records as a percentage with two decimals."""
    if total == 0:
        return "0.00"
    return f"{paid / total * 100:.2f}"


class ReportService:
    def __init__(self, session: AsyncSession) -> None:
        self.tax_records = TaxRecordRepository(session)

    async def tax_report(
        self,
        status: TaxStatus | None = None,
        district_id: int | None = None,
        tax_year: int | None = None,
        search: str | None = None,
        today: date | None = None,
    ) -> TaxReport:
        today = today or local_today()
        records = await self.tax_records.report(
            status=status, district_id=district_id, tax_year=tax_year, search=search
        )

        rows = []
        total_penalties = Decimal(0)
        for record in records:
            penalty_amount = sum_amounts(active_penalties(record))
            total_penalties += penalty_amount
            completed = [
                p for p in record.payments if p.status == PaymentStatus.COMPLETED
            ]
            rows.append(
                ReportRow(
                    id=record.id,
                    citizen=record.citizen,
                    tax_year=record.tax_year,
                    amount=record.amount,
                    due_date=record.due_date,
                    status=record.status,
                    payment_info=(
                        max(completed, key=lambda p: p.id) if completed else None
                    ),
                    penalty_amount=penalty_amount,
                    days_overdue=days_overdue(record, today),
                    created_at=record.created_at,
                )
            )

        paid = [r for r in records if r.status == TaxStatus.PAID]
        total_amount = sum_amounts(records)
        collected = sum_amounts(paid)
        summary = ReportSummary(
            total_records=len(records),
            paid_records=len(paid),
            unpaid_records=sum(1 for r in records if r.status == TaxStatus.PENDING),
            overdue_records=sum(1 for r in records if r.status == TaxStatus.OVERDUE),
            total_amount=total_amount,
            collected_amount=collected,
            pending_amount=total_amount - collected,
            total_penalties=total_penalties,
            collection_rate=collection_rate(len(paid), len(records)),
        )
        return TaxReport(summary=summary, records=rows)
