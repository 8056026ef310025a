from collections.abc import Collection
from datetime import date
from decimal import Decimal

from sqlalchemy import Exists, Select, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nagarkar.domain.enums import PenaltyStatus, TaxStatus
from nagarkar.infrastructure.database.models import Citizen, Penalty, TaxRecord
from nagarkar.infrastructure.database.repository import BaseRepository

UNPAID_STATUSES = (TaxStatus.PENDING, TaxStatus.OVERDUE)


def _has_active_penalty() -> Exists:
    return exists().where(
        Penalty.tax_record_id == TaxRecord.id,
        Penalty.status == PenaltyStatus.ACTIVE,
    )


class TaxRecordRepository(BaseRepository[TaxRecord]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TaxRecord)

    def _with_history(self) -> Select[tuple[TaxRecord]]:
        return select(TaxRecord).options(
            selectinload(TaxRecord.payments), selectinload(TaxRecord.penalties)
        )

    async def _all(self, stmt: Select[tuple[TaxRecord]]) -> list[TaxRecord]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_citizen_year(
        self, citizen_id: int, tax_year: int
    ) -> TaxRecord | None:
        return await self.find_one_by(citizen_id=citizen_id, tax_year=tax_year)

    async def get_with_history(self, tax_record_id: int) -> TaxRecord | None:
        """Load a tax record with its payments and penalties."""
        return await self.get_by_id(
            tax_record_id,
            options=(
                selectinload(TaxRecord.payments),
                selectinload(TaxRecord.penalties),
            ),
        )

    async def list_for_citizen(self, citizen_id: int) -> list[TaxRecord]:
        """A citizen's tax records, latest year first, with payments and penalties."""
        stmt = (
            self._with_history()
            .where(TaxRecord.citizen_id == citizen_id)
            .order_by(TaxRecord.tax_year.desc())
        )
        return await self._all(stmt)

    async def list_without_active_penalty(
        self, tax_record_ids: Collection[int]
    ) -> list[TaxRecord]:
        """Unpaid records among ``tax_record_ids`` that carry no active penalty."""
        stmt = (
            select(TaxRecord)
            .where(
                TaxRecord.id.in_(tax_record_ids),
                TaxRecord.status.in_(UNPAID_STATUSES),
                ~_has_active_penalty(),
            )
            .order_by(TaxRecord.id)
        )
        return await self._all(stmt)

    async def list_overdue(
        self,
        today: date,
        citizen_ids: Collection[int] | None = None,
    ) -> list[TaxRecord]:
        """Unpaid records due before ``today``, with their penalties loaded."""
        stmt = (
            select(TaxRecord)
            .options(selectinload(TaxRecord.penalties))
            .where(
                TaxRecord.status.in_(UNPAID_STATUSES),
                TaxRecord.due_date < today,
            )
            .order_by(TaxRecord.due_date, TaxRecord.id)
        )
        if citizen_ids:
            stmt = stmt.where(TaxRecord.citizen_id.in_(citizen_ids))
        return await self._all(stmt)

    async def list_pending_due_between(self, start: date, end: date) -> list[TaxRecord]:
        """Pending records due within ``[start, end]``."""
        stmt = (
            select(TaxRecord)
            .where(
                TaxRecord.status == TaxStatus.PENDING,
                TaxRecord.due_date >= start,
                TaxRecord.due_date <= end,
            )
            .order_by(TaxRecord.due_date, TaxRecord.id)
        )
        return await self._all(stmt)

    async def report(
        self,
        status: TaxStatus | None = None,
        district_id: int | None = None,
        tax_year: int | None = None,
        search: str | None = None,
    ) -> list[TaxRecord]:
        """Filtered records, newest first, with payments and penalties."""
        stmt = self._with_history().join(TaxRecord.citizen)
        if status is not None:
            stmt = stmt.where(TaxRecord.status == status)
        if district_id is not None:
            stmt = stmt.where(Citizen.district_id == district_id)
        if tax_year is not None:
            stmt = stmt.where(TaxRecord.tax_year == tax_year)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Citizen.name).like(pattern),
                    func.lower(Citizen.customer_id).like(pattern),
                )
            )
        stmt = stmt.order_by(TaxRecord.created_at.desc(), TaxRecord.id.desc())
        return await self._all(stmt)

    async def count_for_year(self, tax_year: int) -> int:
        stmt = select(func.count(TaxRecord.id)).where(TaxRecord.tax_year == tax_year)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def pending_amount_for_year(self, tax_year: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(TaxRecord.amount), 0)).where(
            TaxRecord.status == TaxStatus.PENDING,
            TaxRecord.tax_year == tax_year,
        )
        result = await self.session.execute(stmt)
        return Decimal(result.scalar() or 0)

    async def amount_by_district(self, tax_year: int) -> dict[int, Decimal]:
        """Billed amount for ``tax_year`` keyed by district id."""
        stmt = (
            select(Citizen.district_id, func.sum(TaxRecord.amount))
            .join(TaxRecord.citizen)
            .where(TaxRecord.tax_year == tax_year)
            .group_by(Citizen.district_id)
        )
        result = await self.session.execute(stmt)
        return {district_id: Decimal(total or 0) for district_id, total in result.all()}
