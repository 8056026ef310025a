from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.infrastructure.database.models import Admin
from nagarkar.infrastructure.database.repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Admin)

    async def get_by_username(self, username: str) -> Admin | None:
        return await self.find_one_by(username=username)
