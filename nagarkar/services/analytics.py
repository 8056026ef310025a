"""Dashboards: municipality wide figures for admins, personal ones for citizens."""

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import NotFoundError
from nagarkar.domain.enums import PaymentMethod, PaymentStatus, PenaltyStatus, TaxStatus
from nagarkar.infrastructure.database.models import Citizen, Payment, Penalty, Reminder
from nagarkar.infrastructure.repositories import (
    CitizenRepository,
    DistrictRepository,
    PaymentRepository,
    PenaltyRepository,
    TaxRecordRepository,
)
from nagarkar.services.common import ZERO, local_today, sum_amounts

RECENT_ADMIN_ITEMS = 10
RECENT_CITIZEN_ITEMS = 5


def percentage(part: Decimal, whole: Decimal) -> int:
    """``part`` as a whole-number percentage of ``whole``, 0 when empty."""
    if whole <= 0:
        return 0
    return round(part / whole * 100)


@dataclass(frozen=True)
class AdminOverview:
    total_citizens: int
    total_districts: int
    total_tax_records: int
    total_payments: int
    total_penalties: int
    tax_collected: Decimal
    pending_tax: Decimal
    total_penalty_amount: Decimal
    collection_rate: int


@dataclass(frozen=True)
class MonthlyCollection:
    month: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class DistrictBreakdown:
    name: str
    citizens: int
    total_tax: Decimal
    collected_tax: Decimal
    pending_tax: Decimal
    penalties: Decimal
    collection_rate: int


@dataclass(frozen=True)
class MethodBreakdown:
    method: PaymentMethod
    amount: Decimal
    count: int


@dataclass(frozen=True)
class AdminAnalytics:
    year: int
    overview: AdminOverview
    monthly_collections: list[MonthlyCollection]
    district_analytics: list[DistrictBreakdown]
    payment_methods: list[MethodBreakdown]
    recent_payments: list[Payment]
    recent_penalties: list[Penalty]


@dataclass(frozen=True)
class CitizenOverview:
    total_tax_paid: Decimal
    total_pending_tax: Decimal
    total_penalties: Decimal
    total_tax_records: int
    total_payments: int
    active_penalties: int


@dataclass(frozen=True)
class YearlyPayments:
    year: int
    amount: Decimal
    count: int


@dataclass(frozen=True)
class TaxTrendPoint:
    year: int
    amount: Decimal
    status: TaxStatus
    due_date: date
    paid_date: datetime | None


@dataclass(frozen=True)
class CitizenAnalytics:
    citizen: Citizen
    overview: CitizenOverview
    payment_history: list[YearlyPayments]
    tax_trend: list[TaxTrendPoint]
    payment_methods: list[MethodBreakdown]
    recent_payments: list[Payment]
    recent_penalties: list[Penalty]
    recent_reminders: list[Reminder]


def _by_method(payments: list[Payment]) -> list[MethodBreakdown]:
    amounts: dict[PaymentMethod, Decimal] = defaultdict(Decimal)
    counts: dict[PaymentMethod, int] = defaultdict(int)
    for payment in payments:
        amounts[payment.method] += payment.amount
        counts[payment.method] += 1
    return [MethodBreakdown(m, amounts[m], counts[m]) for m in sorted(amounts)]


class AnalyticsService:
    def __init__(self, session: AsyncSession) -> None:
        self.citizens = CitizenRepository(session)
        self.districts = DistrictRepository(session)
        self.payments = PaymentRepository(session)
        self.penalties = PenaltyRepository(session)
        self.tax_records = TaxRecordRepository(session)

    async def _monthly_collections(self, year: int) -> list[MonthlyCollection]:
        payments = await self.payments.list_completed_between(
            datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)
        )
        amounts: dict[int, Decimal] = defaultdict(Decimal)
        counts: dict[int, int] = defaultdict(int)
        for payment in payments:
            amounts[payment.payment_date.month] += payment.amount
            counts[payment.payment_date.month] += 1
        return [
            MonthlyCollection(calendar.month_abbr[month], amounts[month], counts[month])
            for month in range(1, 13)
        ]

    async def _district_breakdown(self, year: int) -> list[DistrictBreakdown]:
        billed = await self.tax_records.amount_by_district(year)
        collected = await self.payments.completed_by_district()
        penalties = await self.penalties.active_by_district()

        breakdown = []
        for district, citizen_count in await self.districts.list_with_citizen_counts():
            total_tax = billed.get(district.id, ZERO)
            collected_tax = collected.get(district.id, ZERO)
            breakdown.append(
                DistrictBreakdown(
                    name=district.name,
                    citizens=citizen_count,
                    total_tax=total_tax,
                    collected_tax=collected_tax,
                    pending_tax=total_tax - collected_tax,
                    penalties=penalties.get(district.id, ZERO),
                    collection_rate=percentage(collected_tax, total_tax),
                )
            )
        return breakdown

    async def admin_dashboard(self, year: int | None = None) -> AdminAnalytics:
        """Municipality wide figures for ``year``, the current year by default."""
        year = year or local_today().year
        collected = await self.payments.completed_total()
        pending = await self.tax_records.pending_amount_for_year(year)

        overview = AdminOverview(
            total_citizens=await self.citizens.count(),
            total_districts=await self.districts.count(),
            total_tax_records=await self.tax_records.count_for_year(year),
            total_payments=await self.payments.count_completed(),
            total_penalties=await self.penalties.count_active(),
            tax_collected=collected,
            pending_tax=pending,
            total_penalty_amount=await self.penalties.active_total(),
            collection_rate=percentage(collected, collected + pending),
        )
        methods = [
            MethodBreakdown(method, amount, count)
            for method, amount, count in await self.payments.completed_by_method()
        ]
        return AdminAnalytics(
            year=year,
            overview=overview,
            monthly_collections=await self._monthly_collections(year),
            district_analytics=await self._district_breakdown(year),
            payment_methods=methods,
            recent_payments=await self.payments.recent_completed(RECENT_ADMIN_ITEMS),
            recent_penalties=await self.penalties.list_active(RECENT_ADMIN_ITEMS),
        )

    async def citizen_dashboard(self, citizen_id: int) -> CitizenAnalytics:
        citizen = await self.citizens.get_with_history(citizen_id)
        if citizen is None:
            raise NotFoundError("Citizen not found", context={"citizen_id": citizen_id})

        completed = sorted(
            (p for p in citizen.payments if p.status == PaymentStatus.COMPLETED),
            key=lambda p: p.id,
            reverse=True,
        )
        records = sorted(citizen.tax_records, key=lambda r: r.tax_year)
        active = [p for p in citizen.penalties if p.status == PenaltyStatus.ACTIVE]

        yearly_amounts: dict[int, Decimal] = defaultdict(Decimal)
        yearly_counts: dict[int, int] = defaultdict(int)
        for payment in completed:
            yearly_amounts[payment.tax_record.tax_year] += payment.amount
            yearly_counts[payment.tax_record.tax_year] += 1

        overview = CitizenOverview(
            total_tax_paid=sum((p.amount for p in completed), ZERO),
            total_pending_tax=sum_amounts(
                [r for r in records if r.status != TaxStatus.PAID]
            ),
            total_penalties=sum_amounts(active),
            total_tax_records=len(records),
            total_payments=len(completed),
            active_penalties=len(active),
        )
        return CitizenAnalytics(
            citizen=citizen,
            overview=overview,
            payment_history=[
                YearlyPayments(year, yearly_amounts[year], yearly_counts[year])
                for year in sorted(yearly_amounts)
            ],
            tax_trend=[
                TaxTrendPoint(r.tax_year, r.amount, r.status, r.due_date, r.paid_date)
                for r in records
            ],
            payment_methods=_by_method(completed),
            recent_payments=completed[:RECENT_CITIZEN_ITEMS],
            recent_penalties=sorted(
                citizen.penalties, key=lambda p: p.id, reverse=True
            )[:RECENT_CITIZEN_ITEMS],
            recent_reminders=sorted(
                citizen.reminders, key=lambda r: r.id, reverse=True
            )[:RECENT_CITIZEN_ITEMS],
        )
