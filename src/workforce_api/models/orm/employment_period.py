"""Employment period ORM model."""

from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmploymentPeriodORM(Base, UUIDMixin, TimestampMixin):
    """One tenure interval; ``end_date`` is NULL while the period is open."""

    __tablename__ = "employment_periods"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Closure metadata
    separation_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    separation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    eligible_for_rehire: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notice_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_employment_periods_employee", "employee_id"),
        # At most one open period per employee
        Index(
            "uq_employment_periods_one_open",
            "employee_id",
            unique=True,
            postgresql_where=text("end_date IS NULL"),
            sqlite_where=text("end_date IS NULL"),
        ),
    )
