from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import ConflictError
from nagarkar.infrastructure.database.models import District
from nagarkar.infrastructure.repositories import DistrictRepository


@dataclass(frozen=True)
class DistrictListing:
    district: District
    citizen_count: int


class DistrictService:
    def __init__(self, session: AsyncSession) -> None:
        self.districts = DistrictRepository(session)

    async def list_districts(self) -> list[DistrictListing]:
        """All districts in name order with their citizen counts."""
        rows = await self.districts.list_with_citizen_counts()
        return [DistrictListing(district, count) for district, count in rows]

    async def create_district(self, name: str) -> District:
        name = name.strip()
        if await self.districts.get_by_name(name) is not None:
            raise ConflictError("District already exists", context={"name": name})

        district = await self.districts.create(District(name=name))
        logger.info("District created", district_id=district.id)
        return district
