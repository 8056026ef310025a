"""Generic async repository with the CRUD operations every entity needs.

Entity specific queries (searches, aggregates, eager loading of collections)
live in subclasses under ``nagarkar.infrastructure.repositories``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from loguru import logger
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from nagarkar.infrastructure.database.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Base repository class providing common CRUD operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class DistrictRepository(BaseRepository[District]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, District)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    @property
    def _name(self) -> str:
        return self.model_class.__name__

    async def get_by_id(
        self, entity_id: int, options: Sequence[ORMOption] = ()
    ) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.
            options: Loader options such as ``selectinload(...)``.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug("{} instance not found with ID: {}", self._name, entity_id)
        return instance

    async def create(self, obj: T) -> T:
        """Add a new model instance and load its server-generated values.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info("Created {} instance with ID: {}", self._name, obj.id)
        return obj

    async def save(self, obj: T) -> T:
        """Flush pending changes on ``obj`` and reload it.

        Reloading picks up ``updated_at`` from the database so the instance
        can be serialized without lazy loads.
        """
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def count(self) -> int:
        """Count all instances of the model."""
        stmt = select(func.count()).select_from(self.model_class)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, entity_id: int) -> bool:
        """Check if a model instance exists by its ID."""
        stmt = (
            select(func.count())
            .select_from(self.model_class)
            .where(self.model_class.id == entity_id)
        )
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    def _filtered(self, filters: Mapping[str, Any]) -> Select[tuple[T]]:
        stmt = select(self.model_class)
        for field, value in filters.items():
            if hasattr(self.model_class, field):
                stmt = stmt.where(getattr(self.model_class, field) == value)
            else:
                logger.warning(
                    "Attempted to filter by non-existent field '{}' on {}",
                    field,
                    self._name,
                )
        return stmt.order_by(self.model_class.id)

    async def filter_by(self, **kwargs: object) -> list[T]:
        """Return instances matching all field-value pairs, ordered by ID."""
        result = await self.session.execute(self._filtered(kwargs))
        return list(result.scalars().all())

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Return the first instance matching all field-value pairs."""
        result = await self.session.execute(self._filtered(kwargs).limit(1))
        return result.scalar_one_or_none()
