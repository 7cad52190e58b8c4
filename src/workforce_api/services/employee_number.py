"""Employee number sequence."""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.repositories.employee_repository import EmployeeRepository


class EmployeeNumberSequence:
    """Produces ``<prefix>-<n>`` numbers, n one above the highest in use."""

    def __init__(self, session: AsyncSession, prefix: str | None = None) -> None:
        self.employee_repo = EmployeeRepository(session)
        self.prefix = prefix or get_settings().employee_no_prefix
        self._pattern = re.compile(rf"^{re.escape(self.prefix)}-(\d+)$")

    async def next_number(self) -> str:
        """Next free employee number.

        Not reserved: two concurrent creates can be handed the same value,
        and the second insert then fails on the unique constraint.
        """
        highest = 0
        for employee_no in await self.employee_repo.get_employee_numbers(self.prefix):
            match = self._pattern.match(employee_no)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{self.prefix}-{highest + 1}"
