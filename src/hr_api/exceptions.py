"""Domain-specific exceptions for the HR API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. Each base class corresponds to one error kind and is
mapped to a status code in ``hr_api.middleware.error_handler``.
"""

from typing import Any
from uuid import UUID


class HRAPIError(Exception):
    """Base exception for all HR API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class UnauthenticatedError(HRAPIError):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


# =============================================================================
# Permission Errors (403)
# =============================================================================


class ForbiddenError(HRAPIError):
    """Base class for authorization failures on a visible resource."""

    def __init__(self, message: str = "Access denied", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class AdminRequiredError(ForbiddenError):
    """Raised when a non-administrator calls an administrator-only operation."""

    def __init__(self) -> None:
        super().__init__("HR administrator access required")


class RestrictedFieldError(ForbiddenError):
    """Raised when a non-administrator sends privileged fields in an update."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__("Insufficient permissions to change these fields", {"fields": sorted(fields)})


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(HRAPIError):
    """Base class for resource not found errors.

    Also used for records that exist but fall outside the caller's scope,
    so both cases are indistinguishable to the caller.
    """

    pass


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee cannot be found (or is not visible)."""

    def __init__(self, employee_id: UUID | None = None) -> None:
        details = {"employee_id": str(employee_id)} if employee_id else {}
        super().__init__("Employee not found", details)


class DepartmentNotFoundError(NotFoundError):
    """Raised when a department cannot be found (or is not visible)."""

    def __init__(self, department_id: UUID | None = None) -> None:
        details = {"department_id": str(department_id)} if department_id else {}
        super().__init__("Department not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(HRAPIError):
    """Base class for resource conflict errors."""

    pass


class EmailAlreadyExistsError(ConflictError):
    """Raised when an email is already used by an employee or login account."""

    def __init__(self) -> None:
        super().__init__("Email already registered")


class DepartmentNameExistsError(ConflictError):
    """Raised when a department name is already taken."""

    def __init__(self, name: str | None = None) -> None:
        details = {"name": name} if name else {}
        super().__init__("Department name already exists", details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(HRAPIError):
    """Base class for validation and referential errors."""

    pass


class UnknownDepartmentError(ValidationError):
    """Raised when one or more referenced departments do not exist."""

    def __init__(self, department_ids: list[UUID]) -> None:
        super().__init__(
            "Unknown department",
            {"department_ids": sorted(str(d) for d in department_ids)},
        )


class InvalidManagerError(ValidationError):
    """Raised when a manager reference is missing, self-referential or cyclic."""

    def __init__(self, reason: str) -> None:
        super().__init__("Invalid manager", {"reason": reason})


class NullFieldError(ValidationError):
    """Raised when a field that cannot be cleared is sent as null."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__("Fields cannot be null", {"fields": sorted(fields)})


class DepartmentNotEmptyError(ValidationError):
    """Raised when deleting a department that still has members."""

    def __init__(self, member_count: int) -> None:
        super().__init__("Department still has employees", {"member_count": member_count})


# =============================================================================
# Internal Errors (500)
# =============================================================================


class ConfigurationError(HRAPIError):
    """Raised when required deployment configuration is missing."""

    def __init__(self, setting: str) -> None:
        super().__init__("Server configuration incomplete", {"setting": setting})
