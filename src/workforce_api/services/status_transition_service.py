"""Employee status transition engine.

Every status change goes through ``StatusTransitionService``: the edge is
checked against the status graph, the employee row is locked, and the
employee update, period open/close and history append are flushed in one
transaction and committed once. Any failure rolls the whole unit back.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from workforce_api.exceptions import (
    ConcurrentModificationError,
    EmployeeNotFoundError,
    InvalidTransitionError,
    PermissionDeniedError,
    PersistenceFailureError,
    WorkforceAPIError,
)
from workforce_api.models.domain.employee import SEPARATION_RESET_FIELDS, EmployeeStatus, parse_status
from workforce_api.models.domain.principal import Principal
from workforce_api.models.domain.separation import SeparationDetails
from workforce_api.models.domain.status_graph import get_rule
from workforce_api.models.dto.employee import EmployeeResponse
from workforce_api.models.dto.status import (
    EmploymentPeriodResponse,
    SeparationResponse,
    StatusHistoryResponse,
    TransitionResponse,
)
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.services.employment_period_service import EmploymentPeriodService
from workforce_api.services.profile_cache import ProfileCache
from workforce_api.services.status_history_service import StatusHistoryService
from workforce_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)


class TransitionStep:
    """Names of the unit-of-work steps, reported on persistence failures."""

    LOAD_EMPLOYEE = "load_employee"
    UPDATE_EMPLOYEE = "update_employee"
    OPEN_PERIOD = "open_period"
    CLOSE_PERIOD = "close_period"
    APPEND_HISTORY = "append_history"
    COMMIT = "commit"


class StatusTransitionService:
    """Validates and applies employee status changes."""

    def __init__(self, session: AsyncSession, profile_cache: ProfileCache | None = None) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.period_ledger = EmploymentPeriodService(session)
        self.history_log = StatusHistoryService(session)
        self.profile_cache = profile_cache

    async def _lock_employee(self, employee_id: UUID) -> EmployeeORM:
        employee = await self.employee_repo.get_for_update(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    @staticmethod
    def _current_status(
        employee: EmployeeORM, expected_status: EmployeeStatus | None
    ) -> EmployeeStatus:
        current = parse_status(employee.status)
        if expected_status is not None and current != expected_status:
            raise ConcurrentModificationError(employee.id, expected_status, current)
        return current

    async def _abort(self, employee_id: UUID, step: str, exc: SQLAlchemyError) -> WorkforceAPIError:
        """Roll back the unit and translate a store error."""
        await self.session.rollback()
        if isinstance(exc, StaleDataError):
            logger.warning("Concurrent modification of employee %s during %s", employee_id, step)
            return ConcurrentModificationError(employee_id)
        log_error(logger, f"Status change for employee {employee_id} failed at {step}", exc)
        return PersistenceFailureError(step=step, cause=exc)

    async def change_status(
        self,
        employee_id: UUID,
        target_status: str | EmployeeStatus,
        principal: Principal,
        expected_status: str | EmployeeStatus | None = None,
        note: str | None = None,
    ) -> TransitionResponse:
        """Apply a simple transition (hold, reactivate, rehire).

        Moving into ACTIVE opens a new employment period dated today when
        none is open. Separation fields are cleared on the employee.

        Args:
            employee_id: Employee UUID
            target_status: Status to move to
            principal: Acting principal
            expected_status: Status the caller last saw, if it wants the
                change rejected when the employee has moved on since
            note: Optional note stored on the history entry

        Returns:
            TransitionResponse with the updated employee and new history entry

        Raises:
            InvalidStatusError: If a status value is unknown
            EmployeeNotFoundError: If the employee does not exist
            InvalidTransitionError: If the edge is illegal or needs separation details
            ConcurrentModificationError: If the employee changed concurrently
            PersistenceFailureError: If the store rejects a write
        """
        new_status = parse_status(target_status)
        expected = parse_status(expected_status) if expected_status is not None else None

        step = TransitionStep.LOAD_EMPLOYEE
        try:
            employee = await self._lock_employee(employee_id)
            old_status = self._current_status(employee, expected)
            rule = get_rule(old_status, new_status)
            if rule.requires_separation:
                raise InvalidTransitionError(
                    old_status, new_status, reason="separation details are required"
                )

            step = TransitionStep.UPDATE_EMPLOYEE
            await self.employee_repo.apply(employee, status=new_status.value, **SEPARATION_RESET_FIELDS)

            opened = None
            if new_status == EmployeeStatus.ACTIVE:
                step = TransitionStep.OPEN_PERIOD
                if await self.period_ledger.current_open_period(employee_id) is None:
                    opened = await self.period_ledger.open_period(employee_id, date.today())

            step = TransitionStep.APPEND_HISTORY
            entry = await self.history_log.append(
                employee_id,
                old_status,
                new_status,
                changed_by=principal.id,
                note=note,
            )

            step = TransitionStep.COMMIT
            await self.session.commit()
        except WorkforceAPIError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            raise await self._abort(employee_id, step, e) from e

        if self.profile_cache is not None:
            self.profile_cache.invalidate(employee_id)
        logger.info("Employee %s status changed %s -> %s", employee_id, old_status, new_status)

        return TransitionResponse(
            employee=EmployeeResponse.model_validate(employee),
            history=StatusHistoryResponse.model_validate(entry),
            opened_period=EmploymentPeriodResponse.model_validate(opened) if opened else None,
        )

    async def apply_separation(
        self,
        employee_id: UUID,
        details: SeparationDetails,
        principal: Principal,
        expected_status: str | EmployeeStatus | None = None,
    ) -> SeparationResponse:
        """Move an employee into RESIGNED or TERMINATED.

        Updates the employee with the separation details, closes the open
        employment period (if any) on the effective end date, and appends a
        history entry carrying the full separation snapshot.

        Args:
            employee_id: Employee UUID
            details: Validated separation details
            principal: Acting principal
            expected_status: Status the caller last saw

        Returns:
            SeparationResponse; ``period_closed`` is False when no period was open

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            InvalidTransitionError: If the edge is not in the status graph
            PermissionDeniedError: If termination is requested without can_terminate
            ConcurrentModificationError: If the employee changed concurrently
            PersistenceFailureError: If the store rejects a write; ``step``
                names the failed step and nothing is persisted
        """
        new_status = details.separation_type
        expected = parse_status(expected_status) if expected_status is not None else None

        step = TransitionStep.LOAD_EMPLOYEE
        try:
            employee = await self._lock_employee(employee_id)
            old_status = self._current_status(employee, expected)
            rule = get_rule(old_status, new_status)
            if not rule.requires_separation:
                raise InvalidTransitionError(old_status, new_status)
            if rule.requires_terminate_capability and not principal.can_terminate:
                raise PermissionDeniedError("can_terminate")

            step = TransitionStep.UPDATE_EMPLOYEE
            await self.employee_repo.apply(employee, status=new_status.value, **details.employee_fields())

            step = TransitionStep.CLOSE_PERIOD
            closed = None
            current = await self.period_ledger.current_open_period(employee_id)
            if current is not None:
                closed = await self.period_ledger.close_period(
                    current.id,
                    details.effective_end_date(date.today()),
                    details.period_closure_fields(),
                )
            else:
                logger.warning(
                    "Employee %s separated (%s) with no open employment period; nothing to close",
                    employee_id,
                    new_status,
                )

            step = TransitionStep.APPEND_HISTORY
            entry = await self.history_log.append(
                employee_id,
                old_status,
                new_status,
                changed_by=principal.id,
                snapshot=details.history_fields(),
            )

            step = TransitionStep.COMMIT
            await self.session.commit()
        except WorkforceAPIError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            raise await self._abort(employee_id, step, e) from e

        if self.profile_cache is not None:
            self.profile_cache.invalidate(employee_id)
        logger.info("Employee %s separated %s -> %s", employee_id, old_status, new_status)

        return SeparationResponse(
            employee=EmployeeResponse.model_validate(employee),
            history=StatusHistoryResponse.model_validate(entry),
            closed_period=EmploymentPeriodResponse.model_validate(closed) if closed else None,
            period_closed=closed is not None,
        )
