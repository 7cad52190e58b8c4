"""Employment period ledger."""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import PeriodAlreadyOpenError, PeriodNotFoundError
from workforce_api.models.orm.employment_period import EmploymentPeriodORM
from workforce_api.repositories.employment_period_repository import EmploymentPeriodRepository

logger = logging.getLogger(__name__)

CLOSURE_FIELDS = ("separation_type", "separation_reason", "eligible_for_rehire", "notice_days")


class EmploymentPeriodService:
    """Open/closed tenure intervals per employee.

    Writes are flushed into the caller's transaction and never committed
    here; the status transition that drives them owns the commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.period_repo = EmploymentPeriodRepository(session)

    async def open_period(self, employee_id: UUID, start_date: date) -> EmploymentPeriodORM:
        """Open a new period for an employee.

        Args:
            employee_id: Employee UUID
            start_date: First day of the period

        Returns:
            The new open period

        Raises:
            PeriodAlreadyOpenError: If the employee already has an open period
        """
        if await self.period_repo.get_open(employee_id) is not None:
            raise PeriodAlreadyOpenError(employee_id)
        try:
            period = await self.period_repo.create(employee_id=employee_id, start_date=start_date)
        except IntegrityError as e:
            # Lost a race against another opener; the partial unique index caught it
            raise PeriodAlreadyOpenError(employee_id) from e
        logger.info("Opened employment period %s for employee %s from %s", period.id, employee_id, start_date)
        return period

    async def close_period(
        self,
        period_id: UUID,
        end_date: date,
        closure: dict[str, Any] | None = None,
    ) -> EmploymentPeriodORM:
        """Close an open period.

        Args:
            period_id: Period UUID
            end_date: Last day of the period
            closure: Closure metadata (separation_type, separation_reason,
                eligible_for_rehire, notice_days); other keys are ignored

        Returns:
            The closed period

        Raises:
            PeriodNotFoundError: If the period does not exist or is already closed
        """
        period = await self.period_repo.get(period_id)
        if period is None or period.end_date is not None:
            raise PeriodNotFoundError(period_id)
        fields = {k: v for k, v in (closure or {}).items() if k in CLOSURE_FIELDS}
        await self.period_repo.apply(period, end_date=end_date, **fields)
        logger.info("Closed employment period %s on %s", period_id, end_date)
        return period

    async def current_open_period(self, employee_id: UUID) -> EmploymentPeriodORM | None:
        """Get the employee's open period, read fresh from the store."""
        return await self.period_repo.get_open(employee_id)

    async def most_recent_closed_period(self, employee_id: UUID) -> EmploymentPeriodORM | None:
        """Get the employee's closed period with the latest end date."""
        return await self.period_repo.get_most_recent_closed(employee_id)

    async def list_periods(self, employee_id: UUID) -> list[EmploymentPeriodORM]:
        """Get every period of an employee, most recent first."""
        return await self.period_repo.get_by_employee(employee_id)
