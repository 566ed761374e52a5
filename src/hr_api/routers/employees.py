"""Employees router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hr_api.dependencies import CurrentSession, get_employee_service
from hr_api.models.domain.roles import EmployeeStatus
from hr_api.models.dto.common import MAX_TEXT_FILTER_LENGTH, SortDirection
from hr_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeCreateResponse,
    EmployeeFilters,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeSort,
    EmployeeSortField,
    EmployeeUpdate,
)
from hr_api.services.employee_service import EmployeeService

router = APIRouter()


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
    first_name: str | None = Query(default=None, max_length=MAX_TEXT_FILTER_LENGTH),
    last_name: str | None = Query(default=None, max_length=MAX_TEXT_FILTER_LENGTH),
    email: str | None = Query(default=None, max_length=MAX_TEXT_FILTER_LENGTH),
    status: Annotated[list[EmployeeStatus] | None, Query()] = None,
    department_ids: Annotated[list[UUID] | None, Query()] = None,
    manager_id: UUID | None = None,
    sort_by: EmployeeSortField | None = None,
    sort_dir: SortDirection = SortDirection.ASC,
    page: int | None = None,
    page_size: int | None = None,
) -> EmployeeListResponse:
    """List employees visible to the caller.

    Paging values outside the allowed range are clamped, not rejected.
    """
    filters = EmployeeFilters(
        first_name=first_name,
        last_name=last_name,
        email=email,
        status=status,
        department_ids=department_ids,
        manager_id=manager_id,
    )
    sort = EmployeeSort(field=sort_by, direction=sort_dir) if sort_by else None
    return await employee_service.list_employees(session, filters, sort, page, page_size)


@router.post("", response_model=EmployeeCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeCreateResponse:
    """Create an employee and its login account. HR administrators only."""
    return await employee_service.create_employee(session, data)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Get employee details."""
    return await employee_service.get_employee(session, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    data: EmployeeUpdate,
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Update an employee. Non-administrators may only edit their own contact fields."""
    return await employee_service.update_employee(session, employee_id, data)


@router.post("/{employee_id}/deactivate", response_model=EmployeeResponse)
async def deactivate_employee(
    employee_id: UUID,
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Deactivate an employee. HR administrators only."""
    return await employee_service.deactivate_employee(session, employee_id)
