"""Employee repository."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.sql import Select

from workforce_api.models.domain.employee import SEPARATED_STATUSES, EmployeeStatus
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.repositories.base import BaseRepository
from workforce_api.utils.validation import escape_like_wildcards

_SEPARATED_VALUES = [status.value for status in SEPARATED_STATUSES]


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations."""

    model = EmployeeORM

    async def get_for_update(self, id: UUID) -> EmployeeORM | None:
        """Load an employee with a row lock, bypassing the identity map.

        The lock is held until the enclosing transaction ends. On SQLite
        ``FOR UPDATE`` is not emitted and the version counter alone guards
        against lost updates.
        """
        result = await self.session.execute(
            select(EmployeeORM)
            .where(EmployeeORM.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_existing_ids(self, ids: list[UUID]) -> set[UUID]:
        """Return the subset of ``ids`` that belong to an employee."""
        if not ids:
            return set()
        result = await self.session.execute(select(EmployeeORM.id).where(EmployeeORM.id.in_(ids)))
        return set(result.scalars().all())

    async def find_duplicate_field(
        self,
        employee_no: str | None = None,
        national_id: str | None = None,
        id_no: str | None = None,
        exclude_id: UUID | None = None,
    ) -> str | None:
        """Find the first identifier already used by another employee.

        Args:
            employee_no: Candidate employee number
            national_id: Candidate national ID
            id_no: Candidate ID number
            exclude_id: Employee to ignore (the one being edited)

        Returns:
            "employee_no", "national_id", "id_no" or None
        """
        candidates = {
            "employee_no": employee_no,
            "national_id": national_id,
            "id_no": id_no,
        }
        for field, value in candidates.items():
            if value is None:
                continue
            column = getattr(EmployeeORM, field)
            query = select(EmployeeORM.id).where(column == value)
            if exclude_id is not None:
                query = query.where(EmployeeORM.id != exclude_id)
            result = await self.session.execute(query.limit(1))
            if result.scalar_one_or_none() is not None:
                return field
        return None

    def _filtered(
        self,
        search: str | None,
        statuses: list[EmployeeStatus] | None,
        include_separated: bool,
    ) -> Select:
        query = select(EmployeeORM)
        if statuses:
            query = query.where(EmployeeORM.status.in_([s.value for s in statuses]))
        elif not include_separated:
            query = query.where(EmployeeORM.status.not_in(_SEPARATED_VALUES))
        if search:
            pattern = f"%{escape_like_wildcards(search.lower())}%"
            query = query.where(
                or_(
                    func.lower(EmployeeORM.full_name).like(pattern, escape="\\"),
                    func.lower(EmployeeORM.employee_no).like(pattern, escape="\\"),
                    EmployeeORM.phone_number.like(pattern, escape="\\"),
                )
            )
        return query

    async def get_all_with_filters(
        self,
        search: str | None = None,
        statuses: list[EmployeeStatus] | None = None,
        include_separated: bool = False,
        offset: int = 0,
        limit: int = 100,
    ) -> tuple[list[EmployeeORM], int]:
        """Get employees with optional filters.

        Args:
            search: Case-insensitive match on name, employee number or phone
            statuses: Restrict to these statuses (overrides include_separated)
            include_separated: Include resigned and terminated employees
            offset: Pagination offset
            limit: Pagination limit

        Returns:
            Tuple of (employees, total_count)
        """
        query = self._filtered(search, statuses, include_separated)

        count_result = await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            query.order_by(EmployeeORM.employee_no).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def get_attendance_population(
        self,
        employee_ids: list[UUID] | None = None,
        search: str | None = None,
    ) -> list[EmployeeORM]:
        """Employees shown on attendance sheets.

        An explicit id selection is returned as is, whatever the status;
        otherwise resigned and terminated employees are left out.
        """
        if employee_ids is not None:
            if not employee_ids:
                return []
            query = select(EmployeeORM).where(EmployeeORM.id.in_(employee_ids))
            if search:
                pattern = f"%{escape_like_wildcards(search.lower())}%"
                query = query.where(func.lower(EmployeeORM.full_name).like(pattern, escape="\\"))
        else:
            query = self._filtered(search, None, include_separated=False)
        result = await self.session.execute(query.order_by(EmployeeORM.employee_no))
        return list(result.scalars().all())

    async def get_employee_numbers(self, prefix: str) -> list[str]:
        """Get every employee number starting with ``<prefix>-``."""
        pattern = f"{escape_like_wildcards(prefix)}-%"
        result = await self.session.execute(
            select(EmployeeORM.employee_no).where(EmployeeORM.employee_no.like(pattern, escape="\\"))
        )
        return list(result.scalars().all())
