"""Global error handling to map domain errors and prevent information disclosure."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from workforce_api.config import get_settings
from workforce_api.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceFailureError,
    ValidationError,
    WorkforceAPIError,
)
from workforce_api.utils.db_errors import duplicate_field_from_integrity_error

logger = logging.getLogger(__name__)


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses.

    Exception handlers run before the CORS middleware can add headers, so
    allowed origins are echoed here.

    Args:
        request: The incoming request

    Returns:
        Dict of CORS headers to add to the response
    """
    origin = request.headers.get("origin")
    if not origin:
        return {}

    if origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }

    return {}


# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}

# Error messages that are safe to pass through
ALLOWED_ERROR_PATTERNS = [
    "Authentication required",
    "Access denied",
    "Insufficient permissions",
    "Admin access required",
    "Resource not found",
    "Employee not found",
    "Invalid or expired token",
    "Not Found",
    "Method Not Allowed",
]

# Domain error category -> HTTP status, most specific first
DOMAIN_ERROR_STATUS: list[tuple[type[WorkforceAPIError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PersistenceFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def is_safe_error_message(message: str) -> bool:
    """Check if an error message is safe to expose to users.

    Args:
        message: Error message to check

    Returns:
        True if message is safe to expose
    """
    message_lower = message.lower()
    return any(pattern.lower() in message_lower for pattern in ALLOWED_ERROR_PATTERNS)


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Sanitize error detail to prevent information disclosure.

    Args:
        detail: Original error detail
        status_code: HTTP status code

    Returns:
        Safe error message
    """
    if isinstance(detail, str):
        if is_safe_error_message(detail):
            return detail
    elif isinstance(detail, list):
        # Validation errors - only field names and messages
        safe_errors = []
        for error in detail:
            if isinstance(error, dict):
                loc = error.get("loc", [])
                msg = error.get("msg", "Invalid value")
                field = loc[-1] if loc else "field"
                if isinstance(field, str) and not field.startswith("_"):
                    safe_errors.append(f"{field}: {msg}")
        if safe_errors:
            return "; ".join(safe_errors[:3])

    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


def status_for_domain_error(exc: WorkforceAPIError) -> int:
    """HTTP status for a domain error."""
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def workforce_exception_handler(request: Request, exc: WorkforceAPIError) -> JSONResponse:
    """Handle domain errors.

    Domain messages and details are written for callers and are returned
    as is, except for persistence failures, which only report the step.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with ``detail``, ``code`` and the error details
    """
    status_code = status_for_domain_error(exc)
    content: dict[str, Any] = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, PersistenceFailureError):
        content["step"] = exc.step
    else:
        content.update(exc.details)

    if status_code >= 500:
        logger.error(f"Persistence failure for {request.url.path}: step={exc.details.get('step')}")
    else:
        logger.info(f"{exc.code} for {request.url.path}")

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=_get_cors_headers(request),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages.

    Args:
        request: FastAPI request
        exc: HTTP exception

    Returns:
        JSONResponse with sanitized error
    """
    settings = get_settings()
    cors_headers = _get_cors_headers(request)

    if settings.debug:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=cors_headers,
        )

    safe_detail = sanitize_error_detail(exc.detail, exc.status_code)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": safe_detail},
        headers=cors_headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation exceptions with sanitized messages.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSONResponse with sanitized error
    """
    settings = get_settings()
    cors_headers = _get_cors_headers(request)

    logger.warning(f"Validation error for {request.url.path}: {len(exc.errors())} error(s)")

    if settings.debug:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors()},
            headers=cors_headers,
        )

    safe_detail = sanitize_error_detail(exc.errors(), status.HTTP_422_UNPROCESSABLE_ENTITY)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": safe_detail},
        headers=cors_headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSONResponse with generic error
    """
    settings = get_settings()
    cors_headers = _get_cors_headers(request)

    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    if settings.debug:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
            },
            headers=cors_headers,
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SAFE_ERROR_MESSAGES[500]},
        headers=cors_headers,
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions that escaped the services.

    Args:
        request: FastAPI request
        exc: SQLAlchemy exception

    Returns:
        JSONResponse with safe error
    """
    settings = get_settings()
    cors_headers = _get_cors_headers(request)

    logger.error(f"Database error for {request.url.path}: {type(exc).__name__}", exc_info=settings.debug)

    if isinstance(exc, IntegrityError):
        field = duplicate_field_from_integrity_error(exc)
        if field is not None:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={
                    "detail": f"Duplicate identifier: {field} is already used",
                    "code": "duplicate_identifier",
                    "field": field,
                },
                headers=cors_headers,
            )
        message = str(exc).lower()
        if "unique" in message or "duplicate" in message:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "Resource already exists"},
                headers=cors_headers,
            )
        if "foreign key" in message:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": "Referenced resource not found"},
                headers=cors_headers,
            )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred"},
        headers=cors_headers,
    )
