"""Status history log."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.orm.status_history import StatusHistoryORM
from workforce_api.repositories.status_history_repository import StatusHistoryRepository

SNAPSHOT_FIELDS = (
    "separation_date",
    "final_working_day",
    "reason",
    "eligible_for_rehire",
    "notice_given",
    "notice_days_served",
    "exit_interview_done",
    "clearance_done",
    "clearance_amount",
    "clearance_cheque_number",
)


class StatusHistoryService:
    """Append-only audit of status changes."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.history_repo = StatusHistoryRepository(session)

    async def append(
        self,
        employee_id: UUID,
        old_status: EmployeeStatus | None,
        new_status: EmployeeStatus,
        changed_by: UUID | None = None,
        note: str | None = None,
        snapshot: dict[str, Any] | None = None,
    ) -> StatusHistoryORM:
        """Append an entry inside the caller's transaction.

        Args:
            employee_id: Employee UUID
            old_status: Status before the change
            new_status: Status after the change
            changed_by: Principal that made the change
            note: Free-text note
            snapshot: Separation snapshot fields

        Returns:
            The flushed entry
        """
        fields = {k: v for k, v in (snapshot or {}).items() if k in SNAPSHOT_FIELDS}
        return await self.history_repo.create(
            employee_id=employee_id,
            old_status=old_status.value if old_status else None,
            new_status=new_status.value,
            changed_by=changed_by,
            note=note,
            **fields,
        )

    async def list_for_employee(self, employee_id: UUID) -> list[StatusHistoryORM]:
        """Get an employee's history, newest first."""
        return await self.history_repo.get_by_employee(employee_id)
