"""API routers package."""

from hr_api.routers import departments, employees, me

__all__ = [
    "departments",
    "employees",
    "me",
]
