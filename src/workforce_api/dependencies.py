"""Centralized dependency injection factories for FastAPI."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.database import get_db
from workforce_api.services.attendance_service import AttendanceService
from workforce_api.services.employee_service import EmployeeService
from workforce_api.services.profile_cache import ProfileCache
from workforce_api.services.separation_service import SeparationService
from workforce_api.services.status_transition_service import StatusTransitionService


def get_profile_cache() -> ProfileCache:
    """Get a ProfileCache scoped to the current request."""
    return ProfileCache()


def get_employee_service(
    db: AsyncSession = Depends(get_db),
    profile_cache: ProfileCache = Depends(get_profile_cache),
) -> EmployeeService:
    """Get EmployeeService instance."""
    return EmployeeService(db, profile_cache)


def get_status_transition_service(
    db: AsyncSession = Depends(get_db),
    profile_cache: ProfileCache = Depends(get_profile_cache),
) -> StatusTransitionService:
    """Get StatusTransitionService instance."""
    return StatusTransitionService(db, profile_cache)


def get_separation_service(
    db: AsyncSession = Depends(get_db),
    profile_cache: ProfileCache = Depends(get_profile_cache),
) -> SeparationService:
    """Get SeparationService instance."""
    return SeparationService(db, profile_cache)


def get_attendance_service(db: AsyncSession = Depends(get_db)) -> AttendanceService:
    """Get AttendanceService instance."""
    return AttendanceService(db)
