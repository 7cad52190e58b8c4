"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from workforce_api import __version__
from workforce_api.config import get_settings
from workforce_api.exceptions import WorkforceAPIError
from workforce_api.middleware.error_handler import (
    generic_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
    workforce_exception_handler,
)
from workforce_api.routers import attendance, employees
from workforce_api.security.rate_limit import limiter

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        if not get_settings().debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    config = get_settings()
    logger.info("Starting %s (%s)", config.app_name, config.environment)
    yield
    from workforce_api.database import engine

    await engine.dispose()


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit handler returning RFC 7807 Problem Details with Retry-After."""
    return JSONResponse(
        status_code=429,
        content={
            "type": "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
            "title": "Too many requests",
            "status": 429,
            "detail": "Rate limit exceeded",
            "instance": request.url.path,
        },
        headers={
            "Content-Type": "application/problem+json",
            "Retry-After": "60",
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Employee lifecycle and attendance ledger API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors carry their own status category
    app.add_exception_handler(WorkforceAPIError, workforce_exception_handler)

    # Sanitized error handlers to prevent information disclosure
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = config.cors_origins_list
    if "*" in allowed_origins:
        raise ValueError(
            "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
            "Specify explicit origins."
        )

    # Middleware runs in reverse order of addition; CORS is added last so it runs first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(employees.router, prefix="/api/v1/employees", tags=["Employees"])
    app.include_router(attendance.router, prefix="/api/v1/attendance", tags=["Attendance"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
