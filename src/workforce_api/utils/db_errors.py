"""Translation of store errors into domain errors."""

from sqlalchemy.exc import IntegrityError

# Checked in order; "employee_no" and "national_id" before the shorter "id_no"
IDENTIFIER_FIELDS = ("employee_no", "national_id", "id_no")


def duplicate_field_from_integrity_error(exc: IntegrityError) -> str | None:
    """Name the employee identifier column a unique violation is about.

    Works on both PostgreSQL messages (``... unique constraint
    "uq_employees_national_id"``) and SQLite messages (``UNIQUE constraint
    failed: employees.national_id``).

    Returns:
        The column name, or None if the error is not an identifier clash
    """
    message = str(exc.orig if exc.orig is not None else exc).lower()
    if "unique" not in message and "duplicate" not in message:
        return None
    for field in IDENTIFIER_FIELDS:
        if f"employees_{field}" in message or f"employees.{field}" in message:
            return field
    return None
