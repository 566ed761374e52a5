"""Employee DTOs."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from hr_api.models.domain.roles import EmployeeStatus
from hr_api.models.dto.common import (
    AccountSummary,
    DepartmentSummary,
    EmployeeSummary,
    ManagerSummary,
    SortDirection,
    clean_text_filter,
)


class EmployeeSortField(StrEnum):
    """Sortable employee columns.

    ``manager`` sorts by the manager's last then first name, ``departments``
    by membership count and ``reports`` by direct-report count.
    """

    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    STATUS = "status"
    CREATED_AT = "created_at"
    MANAGER = "manager"
    DEPARTMENTS = "departments"
    REPORTS = "reports"


class EmployeeSort(BaseModel):
    """Requested employee ordering."""

    field: EmployeeSortField
    direction: SortDirection = SortDirection.ASC


class EmployeeFilters(BaseModel):
    """Optional employee list filters, combined with AND."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    status: list[EmployeeStatus] | None = None
    department_ids: list[UUID] | None = None
    manager_id: UUID | None = None

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def _clean_text(cls, value: str | None) -> str | None:
        return clean_text_filter(value)


class EmployeeListItem(BaseModel):
    """Employee row in list responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    telephone: str
    status: EmployeeStatus
    created_at: datetime
    manager: ManagerSummary | None = None
    department_count: int = 0
    report_count: int = 0


class EmployeeListResponse(BaseModel):
    """Employee list response DTO."""

    items: list[EmployeeListItem]
    total: int
    page: int
    page_size: int


class EmployeeResponse(BaseModel):
    """Full employee record with relations."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    telephone: str
    status: EmployeeStatus
    created_at: datetime
    updated_at: datetime
    manager: ManagerSummary | None = None
    account: AccountSummary | None = None
    departments: list[DepartmentSummary] = []
    direct_reports: list[EmployeeSummary] = []


class EmployeeCreateResponse(BaseModel):
    """Result of creating an employee together with its login account."""

    employee: EmployeeResponse
    account: AccountSummary


class EmployeeCreate(BaseModel):
    """DTO for creating an employee."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    telephone: str = Field(min_length=1, max_length=50)
    email: EmailStr = Field(description="Employee email address (stored lowercase)")
    status: EmployeeStatus = Field(default=EmployeeStatus.ACTIVE)
    manager_id: UUID | None = Field(default=None, description="Direct manager employee ID")
    department_ids: list[UUID] | None = Field(default=None, description="Departments to join")


# Self-editable fields that may be sent but never set to null. The
# administrator-only fields are checked by the service after the field guard.
_NON_NULLABLE_UPDATE_FIELDS = ("first_name", "last_name", "telephone", "email")


class EmployeeUpdate(BaseModel):
    """DTO for a partial employee update.

    Field presence matters: ``model_fields_set`` tells the guard which
    fields the caller sent, including privileged ones sent unchanged.
    ``manager_id: null`` clears the manager; ``status: null`` and
    ``department_ids: null`` pass validation and are rejected by the service.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    telephone: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    status: EmployeeStatus | None = None
    manager_id: UUID | None = None
    department_ids: list[UUID] | None = None

    @model_validator(mode="after")
    def _reject_nulls(self) -> "EmployeeUpdate":
        for name in _NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
