"""Role and status enums shared across layers."""

from enum import StrEnum


class UserRole(StrEnum):
    """Login account roles."""

    HRADMIN = "HRADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class EmployeeStatus(StrEnum):
    """Employee status enum."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class DepartmentStatus(StrEnum):
    """Department status enum."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
