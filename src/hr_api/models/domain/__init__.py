"""Domain models package."""

from hr_api.models.domain.roles import DepartmentStatus, EmployeeStatus, UserRole
from hr_api.models.domain.session import SessionContext

__all__ = [
    "DepartmentStatus",
    "EmployeeStatus",
    "SessionContext",
    "UserRole",
]
