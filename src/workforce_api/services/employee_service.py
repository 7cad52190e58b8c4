"""Employee directory service."""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from workforce_api.exceptions import (
    ConcurrentModificationError,
    DuplicateIdentifierError,
    EmployeeNotFoundError,
    PersistenceFailureError,
    ValidationError,
    WorkforceAPIError,
)
from workforce_api.models.domain.employee import SEPARATED_STATUSES, EmployeeStatus, parse_status
from workforce_api.models.domain.principal import Principal
from workforce_api.models.domain.status_graph import allowed_targets
from workforce_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from workforce_api.models.dto.status import (
    EmploymentPeriodResponse,
    ProfileResponse,
    SeparationSummary,
    StatusHistoryResponse,
)
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.models.orm.employment_period import EmploymentPeriodORM
from workforce_api.models.orm.status_history import StatusHistoryORM
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.services.employee_number import EmployeeNumberSequence
from workforce_api.services.employment_period_service import EmploymentPeriodService
from workforce_api.services.profile_cache import ProfileCache
from workforce_api.services.status_history_service import StatusHistoryService
from workforce_api.utils.db_errors import duplicate_field_from_integrity_error
from workforce_api.utils.secure_logging import log_error
from workforce_api.utils.validation import sanitize_search

logger = logging.getLogger(__name__)


def _validate_dates(hire_date: date, birth_date: date) -> None:
    if birth_date > date.today():
        raise ValidationError("Birth date cannot be in the future", {"field": "birth_date"})
    if hire_date < birth_date:
        raise ValidationError("Hire date cannot be before birth date", {"field": "hire_date"})


def latest_separation(
    history: list[StatusHistoryORM],
    last_closed: EmploymentPeriodORM | None,
) -> SeparationSummary | None:
    """Pick the separation details shown on a profile.

    The newest history entry that moved into a separated status or recorded
    a clearance wins; otherwise the most recent closed period is used.

    Args:
        history: Entries, newest first
        last_closed: Most recent closed period, if any
    """
    for entry in history:
        new_status = parse_status(entry.new_status)
        if new_status in SEPARATED_STATUSES or entry.clearance_done:
            return SeparationSummary(
                source="history",
                new_status=new_status,
                separation_date=entry.separation_date,
                final_working_day=entry.final_working_day,
                reason=entry.reason,
                eligible_for_rehire=entry.eligible_for_rehire,
                notice_days_served=entry.notice_days_served,
                clearance_done=entry.clearance_done,
                clearance_amount=entry.clearance_amount,
                clearance_cheque_number=entry.clearance_cheque_number,
            )
    if last_closed is not None:
        return SeparationSummary(
            source="period",
            new_status=last_closed.separation_type,
            final_working_day=last_closed.end_date,
            reason=last_closed.separation_reason,
            eligible_for_rehire=last_closed.eligible_for_rehire,
            notice_days_served=last_closed.notice_days,
        )
    return None


class EmployeeService:
    """Service for employee records and profiles."""

    def __init__(self, session: AsyncSession, profile_cache: ProfileCache | None = None) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.period_ledger = EmploymentPeriodService(session)
        self.history_log = StatusHistoryService(session)
        self.sequence = EmployeeNumberSequence(session)
        self.profile_cache = profile_cache

    async def _get_or_raise(self, employee_id: UUID) -> EmployeeORM:
        employee = await self.employee_repo.get(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def _commit(self, step: str) -> None:
        """Commit, translating store errors into domain errors."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise self._integrity_error(e, step) from e
        except StaleDataError as e:
            await self.session.rollback()
            raise ConcurrentModificationError() from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            log_error(logger, f"Employee write failed at {step}", e)
            raise PersistenceFailureError(step=step, cause=e) from e

    @staticmethod
    def _integrity_error(exc: IntegrityError, step: str) -> WorkforceAPIError:
        field = duplicate_field_from_integrity_error(exc)
        if field is not None:
            logger.info("Rejected %s: duplicate %s", step, field)
            return DuplicateIdentifierError(field)
        log_error(logger, f"Employee write failed at {step}", exc)
        return PersistenceFailureError(step=step, cause=exc)

    async def get_next_employee_number(self) -> str:
        """Preview the number the next created employee would get."""
        return await self.sequence.next_number()

    async def create_employee(self, data: EmployeeCreate) -> EmployeeResponse:
        """Create an employee and open their first employment period.

        Args:
            data: Employee creation data

        Returns:
            Created EmployeeResponse

        Raises:
            ValidationError: If the dates are inconsistent
            DuplicateIdentifierError: If employee_no, national_id or id_no is taken
            PersistenceFailureError: If the store rejects the write
        """
        _validate_dates(data.hire_date, data.birth_date)
        employee_no = data.employee_no or await self.sequence.next_number()

        duplicate = await self.employee_repo.find_duplicate_field(
            employee_no=employee_no,
            national_id=data.national_id,
            id_no=data.id_no,
        )
        if duplicate is not None:
            logger.info("Rejected employee create: duplicate %s", duplicate)
            raise DuplicateIdentifierError(duplicate)

        fields = data.model_dump(exclude={"employee_no"})
        try:
            employee = await self.employee_repo.create(
                employee_no=employee_no,
                status=EmployeeStatus.ACTIVE.value,
                **fields,
            )
            await self.period_ledger.open_period(employee.id, data.hire_date)
        except IntegrityError as e:
            await self.session.rollback()
            raise self._integrity_error(e, "create_employee") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            log_error(logger, "Failed to create employee", e)
            raise PersistenceFailureError(step="create_employee", cause=e) from e
        await self._commit("create_employee")

        logger.info("Created employee %s (%s)", employee.id, employee_no)
        return EmployeeResponse.model_validate(employee)

    async def update_employee(self, employee_id: UUID, data: EmployeeUpdate) -> EmployeeResponse:
        """Edit identity, contact and document fields.

        Args:
            employee_id: Employee UUID
            data: Fields to change; unset fields are left alone

        Returns:
            Updated EmployeeResponse

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            ValidationError: If the resulting dates are inconsistent
            DuplicateIdentifierError: If a changed identifier is taken
            ConcurrentModificationError: If the employee changed concurrently
        """
        employee = await self._get_or_raise(employee_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        for required in ("employee_no", "full_name", "national_id", "id_no", "hire_date", "birth_date"):
            if required in changes and changes[required] is None:
                changes.pop(required)

        _validate_dates(
            changes.get("hire_date", employee.hire_date),
            changes.get("birth_date", employee.birth_date),
        )

        duplicate = await self.employee_repo.find_duplicate_field(
            employee_no=changes.get("employee_no"),
            national_id=changes.get("national_id"),
            id_no=changes.get("id_no"),
            exclude_id=employee_id,
        )
        if duplicate is not None:
            logger.info("Rejected update of employee %s: duplicate %s", employee_id, duplicate)
            raise DuplicateIdentifierError(duplicate)

        try:
            await self.employee_repo.apply(employee, **changes)
        except IntegrityError as e:
            await self.session.rollback()
            raise self._integrity_error(e, "update_employee") from e
        except StaleDataError as e:
            await self.session.rollback()
            raise ConcurrentModificationError(employee_id) from e
        await self._commit("update_employee")

        if self.profile_cache is not None:
            self.profile_cache.invalidate(employee_id)
        logger.info("Updated employee %s", employee_id)
        return EmployeeResponse.model_validate(employee)

    async def get_employee(self, employee_id: UUID) -> EmployeeResponse:
        """Get an employee by ID.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        return EmployeeResponse.model_validate(await self._get_or_raise(employee_id))

    async def list_employees(
        self,
        search: str | None = None,
        status: str | None = None,
        include_separated: bool = False,
        page: int = 1,
        page_size: int = 50,
    ) -> EmployeeListResponse:
        """List employees, leaving out resigned and terminated ones by default.

        Args:
            search: Match on name, employee number or phone
            status: Only this status
            include_separated: Include resigned and terminated employees
            page: Page number (1-based)
            page_size: Items per page

        Returns:
            EmployeeListResponse
        """
        statuses = [parse_status(status)] if status else None
        offset = (page - 1) * page_size
        employees, total = await self.employee_repo.get_all_with_filters(
            search=sanitize_search(search),
            statuses=statuses,
            include_separated=include_separated,
            offset=offset,
            limit=page_size,
        )
        return EmployeeListResponse(
            items=[EmployeeResponse.model_validate(e) for e in employees],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def list_separated_employees(
        self,
        search: str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> EmployeeListResponse:
        """List resigned and terminated employees."""
        offset = (page - 1) * page_size
        employees, total = await self.employee_repo.get_all_with_filters(
            search=sanitize_search(search),
            statuses=sorted(SEPARATED_STATUSES),
            offset=offset,
            limit=page_size,
        )
        return EmployeeListResponse(
            items=[EmployeeResponse.model_validate(e) for e in employees],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def get_history(self, employee_id: UUID) -> list[StatusHistoryResponse]:
        """Get an employee's status history, newest first."""
        await self._get_or_raise(employee_id)
        entries = await self.history_log.list_for_employee(employee_id)
        return [StatusHistoryResponse.model_validate(entry) for entry in entries]

    async def get_periods(self, employee_id: UUID) -> list[EmploymentPeriodResponse]:
        """Get an employee's employment periods, most recent first."""
        await self._get_or_raise(employee_id)
        periods = await self.period_ledger.list_periods(employee_id)
        return [EmploymentPeriodResponse.model_validate(period) for period in periods]

    async def get_profile(self, employee_id: UUID, principal: Principal) -> ProfileResponse:
        """Build the employee profile.

        Served from the request's profile cache when already built.

        Args:
            employee_id: Employee UUID
            principal: Viewing principal, used for the allowed transitions

        Returns:
            ProfileResponse

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        if self.profile_cache is not None:
            cached = self.profile_cache.get(employee_id)
            if cached is not None:
                return cached

        employee = await self._get_or_raise(employee_id)
        history = await self.history_log.list_for_employee(employee_id)
        current = await self.period_ledger.current_open_period(employee_id)
        last_closed = await self.period_ledger.most_recent_closed_period(employee_id)

        profile = ProfileResponse(
            employee=EmployeeResponse.model_validate(employee),
            history=[StatusHistoryResponse.model_validate(entry) for entry in history],
            current_period=EmploymentPeriodResponse.model_validate(current) if current else None,
            last_closed_period=(
                EmploymentPeriodResponse.model_validate(last_closed) if last_closed else None
            ),
            latest_separation=latest_separation(history, last_closed),
            allowed_transitions=allowed_targets(
                parse_status(employee.status), can_terminate=principal.can_terminate
            ),
        )
        if self.profile_cache is not None:
            self.profile_cache.put(employee_id, profile)
        return profile
