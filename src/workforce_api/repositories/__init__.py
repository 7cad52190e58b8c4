"""Data access repositories."""

from workforce_api.repositories.attendance_repository import AttendanceRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.employment_period_repository import EmploymentPeriodRepository
from workforce_api.repositories.status_history_repository import StatusHistoryRepository

__all__ = [
    "AttendanceRepository",
    "EmployeeRepository",
    "EmploymentPeriodRepository",
    "StatusHistoryRepository",
]
