"""Employee ORM model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin):
    """Employee database model.

    Holds identity data plus a denormalized snapshot of the current status
    and, for separated employees, the separation details.
    """

    __tablename__ = "employees"

    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(String(100), nullable=False)
    id_no: Mapped[str] = mapped_column(String(100), nullable=False)
    employee_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    # Separation snapshot - only populated while resigned/terminated
    separation_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    separation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    separation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    final_working_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    eligible_for_rehire: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notice_given: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    notice_days_served: Mapped[int | None] = mapped_column(Integer, nullable=True)
    exit_interview_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    clearance_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    clearance_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    clearance_cheque_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Document flags (storage only)
    national_id_copy_received: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    national_id_copy_received_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_signed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contract_signed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cv_received: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cv_received_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    medical_check_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    medical_check_done_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Optimistic concurrency counter, bumped by SQLAlchemy on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("employee_no", name="uq_employees_employee_no"),
        UniqueConstraint("national_id", name="uq_employees_national_id"),
        UniqueConstraint("id_no", name="uq_employees_id_no"),
        Index("idx_employees_status", "status"),
        Index("idx_employees_full_name", "full_name"),
    )
