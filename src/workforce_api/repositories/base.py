"""Base repository with common database operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common operations.

    Repositories only flush; committing is left to the service that owns
    the unit of work.
    """

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count total records."""
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record (flushed, not committed)
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def apply(self, instance: T, **kwargs: Any) -> T:
        """Set fields on a loaded record and flush.

        Args:
            instance: Record to modify
            **kwargs: Fields to update; unknown names are ignored

        Returns:
            The same record
        """
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.flush()
        return instance
