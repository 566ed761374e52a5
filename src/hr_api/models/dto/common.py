"""DTOs shared by the employee and department endpoints."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hr_api.models.domain.roles import DepartmentStatus, EmployeeStatus, UserRole

MAX_TEXT_FILTER_LENGTH = 200


class SortDirection(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class ManagerSummary(BaseModel):
    """Manager info embedded in employee and department responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str


class EmployeeSummary(BaseModel):
    """Short employee record (direct reports, department members)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    status: EmployeeStatus


class DepartmentSummary(BaseModel):
    """Short department record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    status: DepartmentStatus


class AccountSummary(BaseModel):
    """Login account linked to an employee (never includes credentials)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRole


class DeleteResponse(BaseModel):
    """Success marker for delete operations."""

    success: bool = True
    message: str


def clean_text_filter(value: str | None) -> str | None:
    """Trim a text filter; blank values mean "no filter".

    Raises:
        ValueError: If the trimmed value is longer than MAX_TEXT_FILTER_LENGTH
    """
    if value is None:
        return None
    value = value.strip()
    if len(value) > MAX_TEXT_FILTER_LENGTH:
        raise ValueError(f"Filter must be at most {MAX_TEXT_FILTER_LENGTH} characters")
    return value or None
