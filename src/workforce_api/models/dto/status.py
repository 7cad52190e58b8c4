"""Status change, separation and history DTOs."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.dto.employee import EmployeeResponse


class StatusChangeRequest(BaseModel):
    """Request for a simple status change (hold, reactivate, rehire)."""

    status: str = Field(max_length=20, description="Target status")
    expected_status: str | None = Field(
        default=None,
        max_length=20,
        description="Status the caller last saw; the change is rejected if it no longer matches",
    )


class SeparationRequest(BaseModel):
    """Separation details collected when resigning or terminating an employee."""

    separation_type: str = Field(max_length=20, description="resigned or terminated")
    separation_date: date | None = None
    separation_reason: str | None = Field(default=None, max_length=2000)
    final_working_day: date | None = None
    eligible_for_rehire: bool | None = None
    notice_given: bool | None = None
    notice_days_served: int | None = Field(default=None, ge=0)
    exit_interview_done: bool = False
    clearance_done: bool = False
    clearance_amount: Decimal | None = None
    clearance_cheque_number: str | None = Field(default=None, max_length=100)
    expected_status: str | None = Field(default=None, max_length=20)

    @field_validator("separation_date", "final_working_day", mode="before")
    @classmethod
    def _blank_date_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class StatusHistoryResponse(BaseModel):
    """Status history entry DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    old_status: EmployeeStatus | None = None
    new_status: EmployeeStatus
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None
    separation_date: date | None = None
    final_working_day: date | None = None
    reason: str | None = None
    eligible_for_rehire: bool | None = None
    notice_given: bool | None = None
    notice_days_served: int | None = None
    exit_interview_done: bool | None = None
    clearance_done: bool | None = None
    clearance_amount: Decimal | None = None
    clearance_cheque_number: str | None = None


class EmploymentPeriodResponse(BaseModel):
    """Employment period DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    start_date: date
    end_date: date | None = None
    separation_type: EmployeeStatus | None = None
    separation_reason: str | None = None
    eligible_for_rehire: bool | None = None
    notice_days: int | None = None


class TransitionResponse(BaseModel):
    """Result of a simple status change."""

    employee: EmployeeResponse
    history: StatusHistoryResponse
    opened_period: EmploymentPeriodResponse | None = None


class SeparationResponse(BaseModel):
    """Result of a separation.

    ``period_closed`` is False when the employee had no open period to close.
    """

    employee: EmployeeResponse
    history: StatusHistoryResponse
    closed_period: EmploymentPeriodResponse | None = None
    period_closed: bool


class SeparationSummary(BaseModel):
    """Latest separation details for the profile view."""

    source: str = Field(description="history or period")
    new_status: EmployeeStatus | None = None
    separation_date: date | None = None
    final_working_day: date | None = None
    reason: str | None = None
    eligible_for_rehire: bool | None = None
    notice_days_served: int | None = None
    clearance_done: bool | None = None
    clearance_amount: Decimal | None = None
    clearance_cheque_number: str | None = None


class ProfileResponse(BaseModel):
    """Employee profile: record, history, tenure and latest separation."""

    employee: EmployeeResponse
    history: list[StatusHistoryResponse]
    current_period: EmploymentPeriodResponse | None = None
    last_closed_period: EmploymentPeriodResponse | None = None
    latest_separation: SeparationSummary | None = None
    allowed_transitions: list[EmployeeStatus]
