"""Data transfer objects package."""

from hr_api.models.dto.common import (
    AccountSummary,
    DeleteResponse,
    DepartmentSummary,
    EmployeeSummary,
    ManagerSummary,
    SortDirection,
)
from hr_api.models.dto.department import (
    DepartmentCreate,
    DepartmentFilters,
    DepartmentListItem,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentSort,
    DepartmentSortField,
    DepartmentUpdate,
)
from hr_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeCreateResponse,
    EmployeeFilters,
    EmployeeListItem,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeSort,
    EmployeeSortField,
    EmployeeUpdate,
)
from hr_api.models.dto.session import SessionResponse

__all__ = [
    "AccountSummary",
    "DeleteResponse",
    "DepartmentCreate",
    "DepartmentFilters",
    "DepartmentListItem",
    "DepartmentListResponse",
    "DepartmentResponse",
    "DepartmentSort",
    "DepartmentSortField",
    "DepartmentSummary",
    "DepartmentUpdate",
    "EmployeeCreate",
    "EmployeeCreateResponse",
    "EmployeeFilters",
    "EmployeeListItem",
    "EmployeeListResponse",
    "EmployeeResponse",
    "EmployeeSort",
    "EmployeeSortField",
    "EmployeeSummary",
    "EmployeeUpdate",
    "ManagerSummary",
    "SessionResponse",
    "SortDirection",
]
