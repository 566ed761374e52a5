"""Departments router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hr_api.dependencies import CurrentSession, get_department_service
from hr_api.models.domain.roles import DepartmentStatus
from hr_api.models.dto.common import MAX_TEXT_FILTER_LENGTH, DeleteResponse, SortDirection
from hr_api.models.dto.department import (
    DepartmentCreate,
    DepartmentFilters,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentSort,
    DepartmentSortField,
    DepartmentUpdate,
)
from hr_api.services.department_service import DepartmentService

router = APIRouter()


@router.get("", response_model=DepartmentListResponse)
async def list_departments(
    session: CurrentSession,
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
    name: str | None = Query(default=None, max_length=MAX_TEXT_FILTER_LENGTH),
    status: Annotated[list[DepartmentStatus] | None, Query()] = None,
    manager_id: UUID | None = None,
    sort_by: DepartmentSortField | None = None,
    sort_dir: SortDirection = SortDirection.ASC,
    page: int | None = None,
    page_size: int | None = None,
) -> DepartmentListResponse:
    """List departments visible to the caller."""
    filters = DepartmentFilters(name=name, status=status, manager_id=manager_id)
    sort = DepartmentSort(field=sort_by, direction=sort_dir) if sort_by else None
    return await department_service.list_departments(session, filters, sort, page, page_size)


@router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    data: DepartmentCreate,
    session: CurrentSession,
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentResponse:
    """Create a department. HR administrators only."""
    return await department_service.create_department(session, data)


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: UUID,
    session: CurrentSession,
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentResponse:
    """Get department details with members."""
    return await department_service.get_department(session, department_id)


@router.patch("/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: UUID,
    data: DepartmentUpdate,
    session: CurrentSession,
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentResponse:
    """Update a department. HR administrators only."""
    return await department_service.update_department(session, department_id, data)


@router.delete("/{department_id}", response_model=DeleteResponse)
async def delete_department(
    department_id: UUID,
    session: CurrentSession,
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DeleteResponse:
    """Delete an empty department. HR administrators only."""
    return await department_service.delete_department(session, department_id)
