"""Department DTOs."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hr_api.models.domain.roles import DepartmentStatus
from hr_api.models.dto.common import EmployeeSummary, ManagerSummary, SortDirection, clean_text_filter


class DepartmentSortField(StrEnum):
    """Sortable department columns."""

    NAME = "name"
    MANAGER = "manager"
    STATUS = "status"
    CREATED_AT = "created_at"


class DepartmentSort(BaseModel):
    """Requested department ordering."""

    field: DepartmentSortField
    direction: SortDirection = SortDirection.ASC


class DepartmentFilters(BaseModel):
    """Optional department list filters, combined with AND."""

    name: str | None = None
    status: list[DepartmentStatus] | None = None
    manager_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str | None) -> str | None:
        return clean_text_filter(value)


class DepartmentListItem(BaseModel):
    """Department row in list responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    status: DepartmentStatus
    created_at: datetime
    manager: ManagerSummary | None = None
    employee_count: int = 0


class DepartmentListResponse(BaseModel):
    """Department list response DTO."""

    items: list[DepartmentListItem]
    total: int
    page: int
    page_size: int


class DepartmentResponse(BaseModel):
    """Full department record with members."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    status: DepartmentStatus
    created_at: datetime
    updated_at: datetime
    manager: ManagerSummary | None = None
    employees: list[EmployeeSummary] = []


class DepartmentCreate(BaseModel):
    """DTO for creating a department."""

    name: str = Field(min_length=1, max_length=255)
    status: DepartmentStatus = Field(default=DepartmentStatus.ACTIVE)
    manager_id: UUID | None = Field(default=None, description="Managing employee ID")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be blank")
        return value


class DepartmentUpdate(BaseModel):
    """DTO for a partial department update. ``manager_id: null`` clears it."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    status: DepartmentStatus | None = None
    manager_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("name cannot be blank")
        return value

    @model_validator(mode="after")
    def _reject_nulls(self) -> "DepartmentUpdate":
        for name in ("name", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
