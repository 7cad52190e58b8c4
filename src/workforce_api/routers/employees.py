"""Employees router - directory, status changes and separations."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from workforce_api.config import get_settings
from workforce_api.dependencies import (
    get_employee_service,
    get_separation_service,
    get_status_transition_service,
)
from workforce_api.models.domain.principal import Principal
from workforce_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
    NextEmployeeNumberResponse,
)
from workforce_api.models.dto.status import (
    EmploymentPeriodResponse,
    ProfileResponse,
    SeparationRequest,
    SeparationResponse,
    StatusChangeRequest,
    StatusHistoryResponse,
    TransitionResponse,
)
from workforce_api.security.auth import require_admin
from workforce_api.security.rate_limit import STATUS_CHANGE_LIMIT, limiter
from workforce_api.services.employee_service import EmployeeService
from workforce_api.services.separation_service import SeparationService
from workforce_api.services.status_transition_service import StatusTransitionService

router = APIRouter()

DEFAULT_PAGE_SIZE = get_settings().employee_default_page_size


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
    search: str | None = Query(default=None, max_length=200),
    status: str | None = Query(default=None, max_length=20),
    include_separated: bool = False,
    page: int = Query(default=1, ge=1, le=10000),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=200),
) -> EmployeeListResponse:
    """List employees; resigned and terminated ones are hidden unless asked for."""
    return await employee_service.list_employees(
        search=search,
        status=status,
        include_separated=include_separated,
        page=page,
        page_size=page_size,
    )


@router.get("/separated", response_model=EmployeeListResponse)
async def list_separated_employees(
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1, le=10000),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=200),
) -> EmployeeListResponse:
    """List resigned and terminated employees."""
    return await employee_service.list_separated_employees(search=search, page=page, page_size=page_size)


@router.get("/next-number", response_model=NextEmployeeNumberResponse)
async def get_next_employee_number(
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> NextEmployeeNumberResponse:
    """Preview the employee number a new employee would receive."""
    return NextEmployeeNumberResponse(employee_no=await employee_service.get_next_employee_number())


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Create an employee and open their first employment period."""
    return await employee_service.create_employee(data)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Get a single employee."""
    return await employee_service.get_employee(employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    data: EmployeeUpdate,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Edit identity, contact and document fields."""
    return await employee_service.update_employee(employee_id, data)


@router.get("/{employee_id}/profile", response_model=ProfileResponse)
async def get_employee_profile(
    employee_id: UUID,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ProfileResponse:
    """Get the employee profile with history, periods and latest separation."""
    return await employee_service.get_profile(employee_id, principal)


@router.get("/{employee_id}/history", response_model=list[StatusHistoryResponse])
async def get_employee_history(
    employee_id: UUID,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> list[StatusHistoryResponse]:
    """Get the status history, newest first."""
    return await employee_service.get_history(employee_id)


@router.get("/{employee_id}/periods", response_model=list[EmploymentPeriodResponse])
async def get_employee_periods(
    employee_id: UUID,
    principal: Annotated[Principal, Depends(require_admin)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> list[EmploymentPeriodResponse]:
    """Get the employment periods, most recent first."""
    return await employee_service.get_periods(employee_id)


@router.post("/{employee_id}/status", response_model=TransitionResponse)
@limiter.limit(STATUS_CHANGE_LIMIT)
async def change_employee_status(
    request: Request,
    employee_id: UUID,
    data: StatusChangeRequest,
    principal: Annotated[Principal, Depends(require_admin)],
    transition_service: Annotated[StatusTransitionService, Depends(get_status_transition_service)],
) -> TransitionResponse:
    """Put on hold, reactivate or rehire an employee.

    Resignation and termination go through the separation endpoint.
    """
    return await transition_service.change_status(
        employee_id,
        data.status,
        principal,
        expected_status=data.expected_status,
    )


@router.post("/{employee_id}/separation", response_model=SeparationResponse)
@limiter.limit(STATUS_CHANGE_LIMIT)
async def separate_employee(
    request: Request,
    employee_id: UUID,
    data: SeparationRequest,
    principal: Annotated[Principal, Depends(require_admin)],
    separation_service: Annotated[SeparationService, Depends(get_separation_service)],
) -> SeparationResponse:
    """Resign or terminate an employee.

    Termination requires the can_terminate capability.
    """
    return await separation_service.separate(employee_id, data, principal)
