"""Employee domain model."""

from enum import StrEnum
from typing import Any

from workforce_api.exceptions import InvalidStatusError


class EmployeeStatus(StrEnum):
    """Employee status enum."""

    ACTIVE = "active"
    ON_HOLD = "on_hold"
    RESIGNED = "resigned"
    TERMINATED = "terminated"

    @property
    def is_separated(self) -> bool:
        """Whether the status ends active employment."""
        return self in SEPARATED_STATUSES


SEPARATED_STATUSES = frozenset({EmployeeStatus.RESIGNED, EmployeeStatus.TERMINATED})


def parse_status(value: Any) -> EmployeeStatus:
    """Parse a status value case-insensitively.

    Accepts enum members and strings such as ``"ON_HOLD"`` or ``"on_hold"``.

    Raises:
        InvalidStatusError: If the value is not a known status
    """
    if isinstance(value, EmployeeStatus):
        return value
    if not isinstance(value, str):
        raise InvalidStatusError(value)
    try:
        return EmployeeStatus(value.strip().lower())
    except ValueError:
        raise InvalidStatusError(value) from None


# Employee columns reset whenever an employee is (re)activated or put on hold
SEPARATION_RESET_FIELDS: dict[str, Any] = {
    "separation_type": None,
    "separation_date": None,
    "separation_reason": None,
    "final_working_day": None,
    "eligible_for_rehire": None,
    "notice_given": None,
    "notice_days_served": None,
    "exit_interview_done": False,
    "clearance_done": False,
    "clearance_amount": None,
    "clearance_cheque_number": None,
}
