"""Attendance DTOs."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from workforce_api.models.domain.attendance import AttendanceStatus
from workforce_api.utils.time_format import EMPTY_LABEL


class AttendanceSetRequest(BaseModel):
    """Mark one employee for one day."""

    status: AttendanceStatus
    start_time: str | None = Field(default=None, max_length=8, description="HH:MM or HH:MM:SS")


class BulkPresentRequest(BaseModel):
    """Mark many employees present for one day.

    When ``employee_ids`` is omitted, the default attendance population
    (everyone not resigned or terminated) is used.
    """

    day: date
    start_time: str | None = Field(default=None, max_length=8)
    employee_ids: list[UUID] | None = Field(default=None, max_length=1000)


class BulkPresentResponse(BaseModel):
    """Outcome of a bulk mark-present batch."""

    day: date
    written: list[UUID]
    failed: list[UUID]


class AttendanceRecordResponse(BaseModel):
    """One attendance record."""

    employee_id: UUID
    day: date
    status: AttendanceStatus
    start_time: str | None = None
    start_time_label: str = EMPTY_LABEL


class AttendanceSummaryResponse(BaseModel):
    """Per-status day counts for one employee in one month."""

    employee_id: UUID
    month: str
    present: int = 0
    absent: int = 0
    leave: int = 0


class SheetEmployee(BaseModel):
    """Employee row header on an attendance sheet."""

    id: UUID
    employee_no: str
    full_name: str
    status: str


class DaySheetRow(BaseModel):
    """Employee and their record (if any) for a single day."""

    employee: SheetEmployee
    record: AttendanceRecordResponse | None = None


class DaySheetResponse(BaseModel):
    """Attendance for the default population on one day."""

    day: date
    rows: list[DaySheetRow]


class MonthlySheetResponse(BaseModel):
    """Attendance grid for one month."""

    month: str
    days_in_month: int
    employees: list[SheetEmployee]
    records: dict[str, dict[str, AttendanceRecordResponse]]
