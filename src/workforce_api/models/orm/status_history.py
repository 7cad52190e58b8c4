"""Employee status history ORM model."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from workforce_api.models.orm.base import Base, UUIDMixin, utcnow


class StatusHistoryORM(Base, UUIDMixin):
    """Append-only audit record of one status change."""

    __tablename__ = "employee_status_history"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    old_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    # Stamped in microseconds on insert; the server default covers rows written by plain SQL
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    changed_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Separation snapshot
    separation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    final_working_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    eligible_for_rehire: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notice_given: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notice_days_served: Mapped[int | None] = mapped_column(Integer, nullable=True)
    exit_interview_done: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    clearance_done: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    clearance_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    clearance_cheque_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("idx_status_history_employee_changed", "employee_id", "changed_at"),
    )
