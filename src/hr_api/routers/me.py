"""Current session router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from hr_api.dependencies import CurrentSession, get_employee_service
from hr_api.models.dto.session import SessionResponse
from hr_api.services.employee_service import EmployeeService

router = APIRouter()


@router.get("", response_model=SessionResponse)
async def get_me(
    session: CurrentSession,
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> SessionResponse:
    """Get the caller's role and linked employee."""
    return await employee_service.describe_session(session)
