"""Attendance record ORM model."""

from datetime import date, time
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Time, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AttendanceRecordORM(Base, UUIDMixin, TimestampMixin):
    """Attendance status of one employee on one calendar day."""

    __tablename__ = "attendance_records"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "day", name="uq_attendance_employee_day"),
        Index("idx_attendance_day", "day"),
    )
