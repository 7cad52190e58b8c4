"""SQLAlchemy ORM models package."""

from workforce_api.models.orm.base import Base
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.models.orm.employment_period import EmploymentPeriodORM
from workforce_api.models.orm.status_history import StatusHistoryORM
from workforce_api.models.orm.attendance_record import AttendanceRecordORM

__all__ = [
    "Base",
    "EmployeeORM",
    "EmploymentPeriodORM",
    "StatusHistoryORM",
    "AttendanceRecordORM",
]
