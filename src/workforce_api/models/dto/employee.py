"""Employee DTOs."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workforce_api.models.domain.employee import EmployeeStatus


class EmployeeResponse(BaseModel):
    """Employee response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_no: str
    full_name: str
    national_id: str
    id_no: str
    employee_address: str | None = None
    phone_number: str | None = None
    hire_date: date
    birth_date: date
    notes: str | None = None
    status: EmployeeStatus

    separation_type: EmployeeStatus | None = None
    separation_date: date | None = None
    separation_reason: str | None = None
    final_working_day: date | None = None
    eligible_for_rehire: bool | None = None
    notice_given: bool | None = None
    notice_days_served: int | None = None
    exit_interview_done: bool = False
    clearance_done: bool = False
    clearance_amount: Decimal | None = None
    clearance_cheque_number: str | None = None

    national_id_copy_received: bool = False
    national_id_copy_received_date: date | None = None
    contract_signed: bool = False
    contract_signed_date: date | None = None
    cv_received: bool = False
    cv_received_date: date | None = None
    medical_check_done: bool = False
    medical_check_done_date: date | None = None

    created_at: datetime
    updated_at: datetime


class EmployeeListResponse(BaseModel):
    """Employee list response DTO."""

    items: list[EmployeeResponse]
    total: int
    page: int
    page_size: int


class EmployeeCreate(BaseModel):
    """DTO for creating an employee.

    ``employee_no`` is taken from the numbering sequence when omitted.
    """

    employee_no: str | None = Field(default=None, min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=255)
    national_id: str = Field(min_length=1, max_length=100)
    id_no: str = Field(min_length=1, max_length=100)
    employee_address: str | None = Field(default=None, max_length=1000)
    phone_number: str | None = Field(default=None, min_length=9, max_length=50)
    hire_date: date
    birth_date: date
    notes: str | None = None


class EmployeeUpdate(BaseModel):
    """DTO for editing employee identity, contact and document fields.

    Status and separation fields are changed only through status transitions.
    """

    employee_no: str | None = Field(default=None, min_length=1, max_length=50)
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    national_id: str | None = Field(default=None, min_length=1, max_length=100)
    id_no: str | None = Field(default=None, min_length=1, max_length=100)
    employee_address: str | None = Field(default=None, max_length=1000)
    phone_number: str | None = Field(default=None, min_length=9, max_length=50)
    hire_date: date | None = None
    birth_date: date | None = None
    notes: str | None = None

    national_id_copy_received: bool | None = None
    national_id_copy_received_date: date | None = None
    contract_signed: bool | None = None
    contract_signed_date: date | None = None
    cv_received: bool | None = None
    cv_received_date: date | None = None
    medical_check_done: bool | None = None
    medical_check_done_date: date | None = None


class NextEmployeeNumberResponse(BaseModel):
    """Next employee number preview."""

    employee_no: str
