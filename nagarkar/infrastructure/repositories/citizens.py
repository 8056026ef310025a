from collections.abc import Collection

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nagarkar.infrastructure.database.models import (
    Citizen,
    Payment,
    TaxRecord,
)
from nagarkar.infrastructure.database.repository import BaseRepository


class CitizenRepository(BaseRepository[Citizen]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Citizen)

    async def get_by_customer_id(self, customer_id: str) -> Citizen | None:
        return await self.find_one_by(customer_id=customer_id)

    async def customer_id_exists(self, customer_id: str) -> bool:
        stmt = select(func.count()).where(Citizen.customer_id == customer_id)
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def get_many(self, citizen_ids: Collection[int]) -> list[Citizen]:
        stmt = select(Citizen).where(Citizen.id.in_(citizen_ids)).order_by(Citizen.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self, search: str | None = None, district_id: int | None = None
    ) -> list[tuple[Citizen, int, int]]:
        """Citizens newest first, with their tax record and payment counts.

        ``search`` matches name, customer id or contact number, ignoring case.
        """
        tax_count = (
            select(func.count(TaxRecord.id))
            .where(TaxRecord.citizen_id == Citizen.id)
            .correlate(Citizen)
            .scalar_subquery()
        )
        payment_count = (
            select(func.count(Payment.id))
            .where(Payment.citizen_id == Citizen.id)
            .correlate(Citizen)
            .scalar_subquery()
        )
        stmt = select(Citizen, tax_count, payment_count)
        if district_id is not None:
            stmt = stmt.where(Citizen.district_id == district_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Citizen.name).like(pattern),
                    func.lower(Citizen.customer_id).like(pattern),
                    Citizen.contact_no.like(f"%{search}%"),
                )
            )
        stmt = stmt.order_by(Citizen.created_at.desc(), Citizen.id.desc())
        result = await self.session.execute(stmt)
        return [
            (citizen, taxes or 0, payments or 0)
            for citizen, taxes, payments in result.all()
        ]

    async def get_with_history(self, citizen_id: int) -> Citizen | None:
        """Load a citizen with tax records, payments, penalties and reminders."""
        return await self.get_by_id(
            citizen_id,
            options=(
                selectinload(Citizen.tax_records).selectinload(TaxRecord.payments),
                selectinload(Citizen.tax_records).selectinload(TaxRecord.penalties),
                selectinload(Citizen.payments),
                selectinload(Citizen.penalties),
                selectinload(Citizen.reminders),
            ),
        )
