"""API routers."""

from workforce_api.routers import attendance, employees

__all__ = ["attendance", "employees"]
