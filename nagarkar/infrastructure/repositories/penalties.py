from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.domain.enums import PenaltyStatus
from nagarkar.infrastructure.database.models import Citizen, Penalty
from nagarkar.infrastructure.database.repository import BaseRepository


class PenaltyRepository(BaseRepository[Penalty]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Penalty)

    async def list_for_citizen(self, citizen_id: int) -> list[Penalty]:
        """A citizen's penalties, most recently applied first."""
        stmt = (
            select(Penalty)
            .where(Penalty.citizen_id == citizen_id)
            .order_by(Penalty.applied_date.desc(), Penalty.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_for_tax_record(self, tax_record_id: int) -> list[Penalty]:
        return await self.filter_by(
            tax_record_id=tax_record_id, status=PenaltyStatus.ACTIVE
        )

    async def list_paid_for_tax_record(self, tax_record_id: int) -> list[Penalty]:
        return await self.filter_by(
            tax_record_id=tax_record_id, status=PenaltyStatus.PAID
        )

    async def list_active(self, limit: int | None = None) -> list[Penalty]:
        """Active penalties, most recently applied first."""
        stmt = (
            select(Penalty)
            .where(Penalty.status == PenaltyStatus.ACTIVE)
            .order_by(Penalty.applied_date.desc(), Penalty.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self) -> int:
        stmt = select(func.count(Penalty.id)).where(
            Penalty.status == PenaltyStatus.ACTIVE
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def active_total(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Penalty.amount), 0)).where(
            Penalty.status == PenaltyStatus.ACTIVE
        )
        result = await self.session.execute(stmt)
        return Decimal(result.scalar() or 0)

    async def active_by_district(self) -> dict[int, Decimal]:
        """Active penalty amount keyed by district id."""
        stmt = (
            select(Citizen.district_id, func.sum(Penalty.amount))
            .join(Penalty.citizen)
            .where(Penalty.status == PenaltyStatus.ACTIVE)
            .group_by(Citizen.district_id)
        )
        result = await self.session.execute(stmt)
        return {district_id: Decimal(total or 0) for district_id, total in result.all()}
