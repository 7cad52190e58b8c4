"""Domain-specific exceptions for the workforce API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. Each concrete error carries a stable ``code`` and a
``details`` dict that the error handler passes through to the caller.
"""

from typing import Any


class WorkforceAPIError(Exception):
    """Base exception for all workforce API errors."""

    code = "error"

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(WorkforceAPIError):
    """Base class for validation errors."""

    code = "validation_error"


class InvalidStatusError(ValidationError):
    """Raised when a status value is not one of the known employee statuses."""

    code = "invalid_status"

    def __init__(self, value: Any = None) -> None:
        super().__init__("Invalid employee status", {"status": str(value)} if value is not None else {})


class MissingFieldError(ValidationError):
    """Raised when a required field is missing or empty."""

    code = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}", {"field": field})


class IncompleteClearanceError(ValidationError):
    """Raised when clearance is marked done without amount and cheque number."""

    code = "incomplete_clearance"

    def __init__(self, field: str) -> None:
        super().__init__(
            "Clearance amount and cheque number are required when clearance is done",
            {"field": field},
        )


# =============================================================================
# Permission Errors (403)
# =============================================================================


class ForbiddenError(WorkforceAPIError):
    """Base class for permission errors."""

    code = "forbidden"


class PermissionDeniedError(ForbiddenError):
    """Raised when the principal lacks a capability for the requested change."""

    code = "permission_denied"

    def __init__(self, capability: str) -> None:
        super().__init__("Insufficient permissions", {"capability": capability})


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(WorkforceAPIError):
    """Base class for resource not found errors."""

    code = "not_found"


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee cannot be found."""

    code = "employee_not_found"

    def __init__(self, employee_id: Any = None) -> None:
        details = {"employee_id": str(employee_id)} if employee_id else {}
        super().__init__("Employee not found", details)


class PeriodNotFoundError(NotFoundError):
    """Raised when an employment period does not exist or is already closed."""

    code = "period_not_found"

    def __init__(self, period_id: Any = None) -> None:
        details = {"period_id": str(period_id)} if period_id else {}
        super().__init__("Open employment period not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(WorkforceAPIError):
    """Base class for resource conflict errors."""

    code = "conflict"


class InvalidTransitionError(ConflictError):
    """Raised when a status change is not an edge of the status graph."""

    code = "invalid_transition"

    def __init__(self, old_status: Any, new_status: Any, reason: str | None = None) -> None:
        details: dict[str, Any] = {"new_status": str(new_status)}
        message = f"Cannot change status to {new_status}"
        if old_status is not None:
            details["old_status"] = str(old_status)
            message = f"Cannot change status from {old_status} to {new_status}"
        if reason:
            details["reason"] = reason
        super().__init__(message, details)


class PeriodAlreadyOpenError(ConflictError):
    """Raised when opening a period for an employee who already has one open."""

    code = "period_already_open"

    def __init__(self, employee_id: Any = None) -> None:
        details = {"employee_id": str(employee_id)} if employee_id else {}
        super().__init__("Employee already has an open employment period", details)


class ConcurrentModificationError(ConflictError):
    """Raised when the employee changed between read and write."""

    code = "concurrent_modification"

    def __init__(self, employee_id: Any = None, expected: Any = None, actual: Any = None) -> None:
        details: dict[str, Any] = {}
        if employee_id:
            details["employee_id"] = str(employee_id)
        if expected is not None:
            details["expected_status"] = str(expected)
        if actual is not None:
            details["actual_status"] = str(actual)
        super().__init__("Employee was modified concurrently, reload and retry", details)


class DuplicateIdentifierError(ConflictError):
    """Raised when employee_no, national_id or id_no is already in use."""

    code = "duplicate_identifier"

    def __init__(self, field: str) -> None:
        super().__init__(f"Duplicate identifier: {field} is already used", {"field": field})


# =============================================================================
# Persistence Errors (500)
# =============================================================================


class PersistenceFailureError(WorkforceAPIError):
    """Raised when the data store rejects or fails a write.

    ``step`` names the unit-of-work step that failed so the caller can
    tell which part of a multi-step change was being written.
    """

    code = "persistence_failure"

    def __init__(self, step: str | None = None, cause: BaseException | None = None) -> None:
        details: dict[str, Any] = {}
        if step:
            details["step"] = step
        if cause is not None:
            details["cause"] = type(cause).__name__
        super().__init__("Failed to persist changes", details)
        self.step = step
        self.cause = cause
