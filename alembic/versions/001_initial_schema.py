"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # Create employees table
    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_no", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("national_id", sa.String(100), nullable=False),
        sa.Column("id_no", sa.String(100), nullable=False),
        sa.Column("employee_address", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("separation_type", sa.String(20), nullable=True),
        sa.Column("separation_date", sa.Date(), nullable=True),
        sa.Column("separation_reason", sa.Text(), nullable=True),
        sa.Column("final_working_day", sa.Date(), nullable=True),
        sa.Column("eligible_for_rehire", sa.Boolean(), nullable=True),
        sa.Column("notice_given", sa.Boolean(), nullable=True),
        sa.Column("notice_days_served", sa.Integer(), nullable=True),
        sa.Column("exit_interview_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("clearance_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("clearance_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("clearance_cheque_number", sa.String(100), nullable=True),
        sa.Column("national_id_copy_received", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("national_id_copy_received_date", sa.Date(), nullable=True),
        sa.Column("contract_signed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contract_signed_date", sa.Date(), nullable=True),
        sa.Column("cv_received", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cv_received_date", sa.Date(), nullable=True),
        sa.Column("medical_check_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("medical_check_done_date", sa.Date(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_no", name="uq_employees_employee_no"),
        sa.UniqueConstraint("national_id", name="uq_employees_national_id"),
        sa.UniqueConstraint("id_no", name="uq_employees_id_no"),
    )
    op.create_index("idx_employees_status", "employees", ["status"])
    op.create_index("idx_employees_full_name", "employees", ["full_name"])

    # Create employment_periods table
    op.create_table(
        "employment_periods",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("separation_type", sa.String(20), nullable=True),
        sa.Column("separation_reason", sa.Text(), nullable=True),
        sa.Column("eligible_for_rehire", sa.Boolean(), nullable=True),
        sa.Column("notice_days", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_employment_periods_employee", "employment_periods", ["employee_id"])
    # At most one open period per employee
    op.create_index(
        "uq_employment_periods_one_open",
        "employment_periods",
        ["employee_id"],
        unique=True,
        postgresql_where=sa.text("end_date IS NULL"),
        sqlite_where=sa.text("end_date IS NULL"),
    )

    # Create employee_status_history table
    op.create_table(
        "employee_status_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("old_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("changed_by", sa.Uuid(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("separation_date", sa.Date(), nullable=True),
        sa.Column("final_working_day", sa.Date(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("eligible_for_rehire", sa.Boolean(), nullable=True),
        sa.Column("notice_given", sa.Boolean(), nullable=True),
        sa.Column("notice_days_served", sa.Integer(), nullable=True),
        sa.Column("exit_interview_done", sa.Boolean(), nullable=True),
        sa.Column("clearance_done", sa.Boolean(), nullable=True),
        sa.Column("clearance_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("clearance_cheque_number", sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_status_history_employee_changed",
        "employee_status_history",
        ["employee_id", "changed_at"],
    )

    # Create attendance_records table
    op.create_table(
        "attendance_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("employee_id", "day", name="uq_attendance_employee_day"),
    )
    op.create_index("idx_attendance_day", "attendance_records", ["day"])


def downgrade() -> None:
    op.drop_table("attendance_records")
    op.drop_table("employee_status_history")
    op.drop_table("employment_periods")
    op.drop_table("employees")
