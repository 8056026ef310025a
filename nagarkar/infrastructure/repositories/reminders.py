from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.infrastructure.database.models import Reminder
from nagarkar.infrastructure.database.repository import BaseRepository


class ReminderRepository(BaseRepository[Reminder]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Reminder)

    async def list_for_citizen(
        self, citizen_id: int, limit: int | None = None
    ) -> list[Reminder]:
        """A citizen's reminders, most recent first."""
        stmt = (
            select(Reminder)
            .where(Reminder.citizen_id == citizen_id)
            .order_by(Reminder.sent_at.desc(), Reminder.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
