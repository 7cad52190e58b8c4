"""Attendance router."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from workforce_api.dependencies import get_attendance_service
from workforce_api.models.domain.principal import Principal
from workforce_api.models.dto.attendance import (
    AttendanceRecordResponse,
    AttendanceSetRequest,
    AttendanceSummaryResponse,
    BulkPresentRequest,
    BulkPresentResponse,
    DaySheetResponse,
    MonthlySheetResponse,
)
from workforce_api.security.auth import require_admin
from workforce_api.security.rate_limit import BULK_ATTENDANCE_LIMIT, limiter
from workforce_api.services.attendance_service import AttendanceService

router = APIRouter()


@router.get("/day/{day}", response_model=DaySheetResponse)
async def get_day_sheet(
    day: date,
    principal: Annotated[Principal, Depends(require_admin)],
    attendance_service: Annotated[AttendanceService, Depends(get_attendance_service)],
    search: str | None = Query(default=None, max_length=200),
) -> DaySheetResponse:
    """Attendance of current employees on one day."""
    return await attendance_service.day_sheet(day, search=search)


@router.get("/month/{month}", response_model=MonthlySheetResponse)
async def get_monthly_sheet(
    month: str,
    principal: Annotated[Principal, Depends(require_admin)],
    attendance_service: Annotated[AttendanceService, Depends(get_attendance_service)],
    employee_id: list[UUID] | None = Query(default=None, max_length=1000),
) -> MonthlySheetResponse:
    """Attendance grid for a month (``YYYY-MM``).

    Pass ``employee_id`` (repeatable) to choose employees explicitly,
    including resigned or terminated ones.
    """
    return await attendance_service.monthly_sheet(month, employee_ids=employee_id)


@router.post("/bulk-present", response_model=BulkPresentResponse)
@limiter.limit(BULK_ATTENDANCE_LIMIT)
async def bulk_mark_present(
    request: Request,
    data: BulkPresentRequest,
    principal: Annotated[Principal, Depends(require_admin)],
    attendance_service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> BulkPresentResponse:
    """Mark employees present for a day; failed rows are reported, not rolled back."""
    return await attendance_service.bulk_mark_present(
        data.day,
        start_time=data.start_time,
        employee_ids=data.employee_ids,
    )


@router.get("/{employee_id}/summary", response_model=AttendanceSummaryResponse)
async def get_attendance_summary(
    employee_id: UUID,
    principal: Annotated[Principal, Depends(require_admin)],
    attendance_service: Annotated[AttendanceService, Depends(get_attendance_service)],
    month: str | None = Query(default=None, max_length=7, description="YYYY-MM, defaults to this month"),
) -> AttendanceSummaryResponse:
    """Present, absent and leave counts for one month."""
    return await attendance_service.summary_for_month(employee_id, month or date.today())


@router.put("/{employee_id}/{day}", response_model=AttendanceRecordResponse)
async def set_attendance(
    employee_id: UUID,
    day: date,
    data: AttendanceSetRequest,
    principal: Annotated[Principal, Depends(require_admin)],
    attendance_service: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> AttendanceRecordResponse:
    """Mark one employee for one day, replacing any existing record."""
    return await attendance_service.set_status(employee_id, day, data.status, data.start_time)
