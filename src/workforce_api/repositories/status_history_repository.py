"""Employee status history repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import select

from workforce_api.models.orm.status_history import StatusHistoryORM
from workforce_api.repositories.base import BaseRepository


class StatusHistoryRepository(BaseRepository[StatusHistoryORM]):
    """Repository for the append-only status history.

    Exposes no update or delete.
    """

    model = StatusHistoryORM

    async def apply(self, instance: StatusHistoryORM, **kwargs: Any) -> StatusHistoryORM:
        """History entries are never modified."""
        raise TypeError("Status history entries are append-only")

    async def get_by_employee(self, employee_id: UUID) -> list[StatusHistoryORM]:
        """Get an employee's history, newest first."""
        result = await self.session.execute(
            select(StatusHistoryORM)
            .where(StatusHistoryORM.employee_id == employee_id)
            .order_by(StatusHistoryORM.changed_at.desc())
        )
        return list(result.scalars().all())
