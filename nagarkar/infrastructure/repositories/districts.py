from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.infrastructure.database.models import Citizen, District
from nagarkar.infrastructure.database.repository import BaseRepository


class DistrictRepository(BaseRepository[District]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, District)

    async def get_by_name(self, name: str) -> District | None:
        return await self.find_one_by(name=name)

    async def list_with_citizen_counts(self) -> list[tuple[District, int]]:
        """All districts ordered by name, each with its number of citizens."""
        citizen_count = (
            select(func.count(Citizen.id))
            .where(Citizen.district_id == District.id)
            .correlate(District)
            .scalar_subquery()
        )
        stmt = select(District, citizen_count).order_by(District.name)
        result = await self.session.execute(stmt)
        return [(district, count or 0) for district, count in result.all()]
