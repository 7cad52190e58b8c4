"""Attendance record repository."""

from datetime import date, time
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from workforce_api.models.orm.attendance_record import AttendanceRecordORM
from workforce_api.models.orm.base import utcnow
from workforce_api.repositories.base import BaseRepository


class AttendanceRepository(BaseRepository[AttendanceRecordORM]):
    """Repository for attendance records."""

    model = AttendanceRecordORM

    def _insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(AttendanceRecordORM)
        if dialect == "sqlite":
            return sqlite_insert(AttendanceRecordORM)
        raise NotImplementedError(f"Attendance upsert is not supported on {dialect}")

    async def upsert(
        self,
        employee_id: UUID,
        day: date,
        status: str,
        start_time: time | None,
    ) -> None:
        """Insert or replace the record for (employee_id, day).

        Args:
            employee_id: Employee UUID
            day: Calendar day
            status: Attendance status value
            start_time: Start time, or None
        """
        stmt = self._insert().values(
            employee_id=employee_id,
            day=day,
            status=status,
            start_time=start_time,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["employee_id", "day"],
            set_={
                "status": stmt.excluded.status,
                "start_time": stmt.excluded.start_time,
                "updated_at": utcnow(),
            },
        )
        await self.session.execute(stmt)

    async def get_for_day(self, employee_id: UUID, day: date) -> AttendanceRecordORM | None:
        """Get one record, reloading it if it is already in the session."""
        result = await self.session.execute(
            select(AttendanceRecordORM)
            .where(AttendanceRecordORM.employee_id == employee_id, AttendanceRecordORM.day == day)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_range(
        self,
        start: date,
        end_exclusive: date,
        employee_ids: list[UUID] | None = None,
    ) -> list[AttendanceRecordORM]:
        """Get records with start <= day < end_exclusive.

        Args:
            start: First day (inclusive)
            end_exclusive: Day after the last day
            employee_ids: Restrict to these employees; None means everyone

        Returns:
            Records ordered by day
        """
        query = select(AttendanceRecordORM).where(
            AttendanceRecordORM.day >= start,
            AttendanceRecordORM.day < end_exclusive,
        )
        if employee_ids is not None:
            if not employee_ids:
                return []
            query = query.where(AttendanceRecordORM.employee_id.in_(employee_ids))
        result = await self.session.execute(
            query.order_by(AttendanceRecordORM.day).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def count_by_status(
        self, employee_id: UUID, start: date, end_exclusive: date
    ) -> dict[str, int]:
        """Count an employee's records per status in a date range."""
        result = await self.session.execute(
            select(AttendanceRecordORM.status, func.count())
            .where(
                AttendanceRecordORM.employee_id == employee_id,
                AttendanceRecordORM.day >= start,
                AttendanceRecordORM.day < end_exclusive,
            )
            .group_by(AttendanceRecordORM.status)
        )
        return {status: count for status, count in result.all()}
