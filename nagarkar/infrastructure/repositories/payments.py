from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.domain.enums import PaymentMethod, PaymentStatus
from nagarkar.infrastructure.database.models import Citizen, Payment
from nagarkar.infrastructure.database.repository import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def get_by_session_id(self, session_id: str) -> Payment | None:
        return await self.find_one_by(gateway_session_id=session_id)

    async def receipt_number_exists(self, receipt_number: str) -> bool:
        stmt = select(func.count()).where(Payment.receipt_number == receipt_number)
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def list_for_citizen(self, citizen_id: int) -> list[Payment]:
        """A citizen's payments, most recent first."""
        stmt = (
            select(Payment)
            .where(Payment.citizen_id == citizen_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_completed(self) -> int:
        stmt = select(func.count(Payment.id)).where(
            Payment.status == PaymentStatus.COMPLETED
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def completed_total(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.status == PaymentStatus.COMPLETED
        )
        result = await self.session.execute(stmt)
        return Decimal(result.scalar() or 0)

    async def list_completed_between(
        self, start: datetime, end: datetime
    ) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(
                Payment.status == PaymentStatus.COMPLETED,
                Payment.payment_date >= start,
                Payment.payment_date < end,
            )
            .order_by(Payment.payment_date)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def completed_by_method(self) -> list[tuple[PaymentMethod, Decimal, int]]:
        """Completed amount and count per payment method."""
        stmt = (
            select(Payment.method, func.sum(Payment.amount), func.count(Payment.id))
            .where(Payment.status == PaymentStatus.COMPLETED)
            .group_by(Payment.method)
            .order_by(Payment.method)
        )
        result = await self.session.execute(stmt)
        return [
            (method, Decimal(total or 0), count)
            for method, total, count in result.all()
        ]

    async def completed_by_district(self) -> dict[int, Decimal]:
        """Completed amount keyed by the payer's district id."""
        stmt = (
            select(Citizen.district_id, func.sum(Payment.amount))
            .join(Payment.citizen)
            .where(Payment.status == PaymentStatus.COMPLETED)
            .group_by(Citizen.district_id)
        )
        result = await self.session.execute(stmt)
        return {district_id: Decimal(total or 0) for district_id, total in result.all()}

    async def recent_completed(self, limit: int = 10) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.status == PaymentStatus.COMPLETED)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
