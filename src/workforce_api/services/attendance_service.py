"""Attendance ledger service."""

import calendar
import logging
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import EmployeeNotFoundError, PersistenceFailureError, ValidationError
from workforce_api.models.domain.attendance import AttendanceStatus
from workforce_api.models.dto.attendance import (
    AttendanceRecordResponse,
    AttendanceSummaryResponse,
    BulkPresentResponse,
    DaySheetResponse,
    DaySheetRow,
    MonthlySheetResponse,
    SheetEmployee,
)
from workforce_api.models.orm.attendance_record import AttendanceRecordORM
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.repositories.attendance_repository import AttendanceRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.utils.secure_logging import log_error
from workforce_api.utils.time_format import format_am_label, format_time, parse_time
from workforce_api.utils.validation import sanitize_search

logger = logging.getLogger(__name__)


def parse_month(value: str | date) -> date:
    """Parse ``YYYY-MM`` (or a date) into the first day of that month.

    Raises:
        ValidationError: If the value is not a valid month
    """
    if isinstance(value, date):
        return value.replace(day=1)
    try:
        year, month = (int(part) for part in value.split("-"))
        return date(year, month, 1)
    except ValueError:
        raise ValidationError("Invalid month, expected YYYY-MM", {"field": "month"}) from None


def month_bounds(month_start: date) -> tuple[date, date]:
    """First day of the month and first day of the next month."""
    start = month_start.replace(day=1)
    if start.month == 12:
        return start, date(start.year + 1, 1, 1)
    return start, date(start.year, start.month + 1, 1)


def _parse_attendance_status(value: str | AttendanceStatus) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Invalid attendance status", {"field": "status"}) from None


def record_response(record: AttendanceRecordORM) -> AttendanceRecordResponse:
    """Build an AttendanceRecordResponse from ORM object."""
    return AttendanceRecordResponse(
        employee_id=record.employee_id,
        day=record.day,
        status=AttendanceStatus(record.status),
        start_time=format_time(record.start_time),
        start_time_label=format_am_label(record.start_time),
    )


def sheet_employee(employee: EmployeeORM) -> SheetEmployee:
    return SheetEmployee(
        id=employee.id,
        employee_no=employee.employee_no,
        full_name=employee.full_name,
        status=employee.status,
    )


class AttendanceService:
    """One attendance record per employee per day, written by upsert."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.attendance_repo = AttendanceRepository(session)
        self.employee_repo = EmployeeRepository(session)

    async def set_status(
        self,
        employee_id: UUID,
        day: date,
        status: str | AttendanceStatus,
        start_time: str | None = None,
    ) -> AttendanceRecordResponse:
        """Mark one employee for one day, replacing any existing record.

        The start time is normalized to HH:MM:SS and kept only for
        ``present``; any other status stores no time.

        Args:
            employee_id: Employee UUID
            day: Calendar day
            status: present, absent or leave
            start_time: Start time as H:M[:S]

        Returns:
            The stored record

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            ValidationError: If the status or time is invalid
            PersistenceFailureError: If the store rejects the write
        """
        attendance_status = _parse_attendance_status(status)
        stored_time = parse_time(start_time) if attendance_status == AttendanceStatus.PRESENT else None

        if await self.employee_repo.get(employee_id) is None:
            raise EmployeeNotFoundError(employee_id)

        try:
            await self.attendance_repo.upsert(employee_id, day, attendance_status.value, stored_time)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log_error(logger, f"Failed to write attendance for employee {employee_id} on {day}", e)
            raise PersistenceFailureError(step="set_attendance", cause=e) from e

        logger.info("Attendance for employee %s on %s set to %s", employee_id, day, attendance_status)
        record = await self.attendance_repo.get_for_day(employee_id, day)
        return record_response(record)

    async def bulk_mark_present(
        self,
        day: date,
        start_time: str | None = None,
        employee_ids: list[UUID] | None = None,
    ) -> BulkPresentResponse:
        """Mark many employees present for one day.

        Each row is written and committed on its own; a failed row is
        rolled back and reported without undoing rows already written.
        Ids that do not belong to an employee are reported as failed
        without a write.

        Args:
            day: Calendar day
            start_time: Start time applied to every row
            employee_ids: Employees to mark; defaults to the attendance population

        Returns:
            BulkPresentResponse listing written and failed ids

        Raises:
            ValidationError: If the time is invalid
        """
        stored_time = parse_time(start_time)
        if employee_ids is None:
            population = await self.employee_repo.get_attendance_population()
            employee_ids = [employee.id for employee in population]
            known = set(employee_ids)
        else:
            known = await self.employee_repo.get_existing_ids(employee_ids)

        written: list[UUID] = []
        failed: list[UUID] = []
        for employee_id in employee_ids:
            if employee_id not in known:
                logger.warning("Cannot mark unknown employee %s present on %s", employee_id, day)
                failed.append(employee_id)
                continue
            try:
                await self.attendance_repo.upsert(
                    employee_id, day, AttendanceStatus.PRESENT.value, stored_time
                )
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                log_error(logger, f"Failed to mark employee {employee_id} present on {day}", e)
                failed.append(employee_id)
            else:
                written.append(employee_id)

        if failed:
            logger.warning("Bulk mark-present for %s: %d written, %d failed", day, len(written), len(failed))
        else:
            logger.info("Bulk mark-present for %s: %d written", day, len(written))
        return BulkPresentResponse(day=day, written=written, failed=failed)

    async def query_range(
        self,
        start: date,
        end_exclusive: date,
        employee_ids: list[UUID] | None = None,
    ) -> dict[UUID, dict[date, AttendanceRecordORM]]:
        """Get records in [start, end_exclusive) as employee -> day -> record.

        Args:
            start: First day (inclusive)
            end_exclusive: Day after the last day
            employee_ids: Restrict to these employees; None means everyone
        """
        records = await self.attendance_repo.get_range(start, end_exclusive, employee_ids)
        by_employee: dict[UUID, dict[date, AttendanceRecordORM]] = {}
        for record in records:
            by_employee.setdefault(record.employee_id, {})[record.day] = record
        return by_employee

    async def summary_for_month(self, employee_id: UUID, month: str | date) -> AttendanceSummaryResponse:
        """Count present, absent and leave days for an employee in a month.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            ValidationError: If the month is invalid
        """
        start, end = month_bounds(parse_month(month))
        if await self.employee_repo.get(employee_id) is None:
            raise EmployeeNotFoundError(employee_id)
        counts = await self.attendance_repo.count_by_status(employee_id, start, end)
        return AttendanceSummaryResponse(
            employee_id=employee_id,
            month=start.strftime("%Y-%m"),
            present=counts.get(AttendanceStatus.PRESENT.value, 0),
            absent=counts.get(AttendanceStatus.ABSENT.value, 0),
            leave=counts.get(AttendanceStatus.LEAVE.value, 0),
        )

    async def day_sheet(self, day: date, search: str | None = None) -> DaySheetResponse:
        """Attendance of the default population on one day."""
        employees = await self.employee_repo.get_attendance_population(search=sanitize_search(search))
        records = await self.query_range(day, day + timedelta(days=1), [e.id for e in employees])
        rows = []
        for employee in employees:
            record = records.get(employee.id, {}).get(day)
            rows.append(
                DaySheetRow(
                    employee=sheet_employee(employee),
                    record=record_response(record) if record else None,
                )
            )
        return DaySheetResponse(day=day, rows=rows)

    async def monthly_sheet(
        self,
        month: str | date,
        employee_ids: list[UUID] | None = None,
    ) -> MonthlySheetResponse:
        """Attendance grid for a month.

        Args:
            month: ``YYYY-MM`` or any date in the month
            employee_ids: Explicit selection (separated employees included);
                defaults to the attendance population

        Raises:
            ValidationError: If the month is invalid
        """
        start, end = month_bounds(parse_month(month))
        employees = await self.employee_repo.get_attendance_population(employee_ids=employee_ids)
        records = await self.query_range(start, end, [e.id for e in employees])
        return MonthlySheetResponse(
            month=start.strftime("%Y-%m"),
            days_in_month=calendar.monthrange(start.year, start.month)[1],
            employees=[sheet_employee(e) for e in employees],
            records={
                str(employee_id): {day.isoformat(): record_response(r) for day, r in days.items()}
                for employee_id, days in records.items()
            },
        )
