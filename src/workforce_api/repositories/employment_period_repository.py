"""Employment period repository."""

from uuid import UUID

from sqlalchemy import select

from workforce_api.models.orm.employment_period import EmploymentPeriodORM
from workforce_api.repositories.base import BaseRepository


class EmploymentPeriodRepository(BaseRepository[EmploymentPeriodORM]):
    """Repository for employment periods."""

    model = EmploymentPeriodORM

    async def get_open(self, employee_id: UUID) -> EmploymentPeriodORM | None:
        """Get the employee's open period (end_date is NULL), if any."""
        result = await self.session.execute(
            select(EmploymentPeriodORM)
            .where(
                EmploymentPeriodORM.employee_id == employee_id,
                EmploymentPeriodORM.end_date.is_(None),
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_most_recent_closed(self, employee_id: UUID) -> EmploymentPeriodORM | None:
        """Get the closed period with the latest end date."""
        result = await self.session.execute(
            select(EmploymentPeriodORM)
            .where(
                EmploymentPeriodORM.employee_id == employee_id,
                EmploymentPeriodORM.end_date.is_not(None),
            )
            .order_by(EmploymentPeriodORM.end_date.desc(), EmploymentPeriodORM.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_employee(self, employee_id: UUID) -> list[EmploymentPeriodORM]:
        """Get all periods of an employee, most recent start first."""
        result = await self.session.execute(
            select(EmploymentPeriodORM)
            .where(EmploymentPeriodORM.employee_id == employee_id)
            .order_by(EmploymentPeriodORM.start_date.desc(), EmploymentPeriodORM.created_at.desc())
        )
        return list(result.scalars().all())
