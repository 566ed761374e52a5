"""Centralized dependency injection factories for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_api.config import Settings
from hr_api.database import get_db
from hr_api.models.domain.session import SessionContext
from hr_api.security.auth import get_app_settings, get_session_context
from hr_api.services.department_service import DepartmentService
from hr_api.services.employee_service import EmployeeService

# Authenticated caller, resolved from the bearer token
CurrentSession = Annotated[SessionContext, Depends(get_session_context)]


def get_employee_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> EmployeeService:
    """Get EmployeeService instance."""
    return EmployeeService(db, settings)


def get_department_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DepartmentService:
    """Get DepartmentService instance."""
    return DepartmentService(db, settings)
