"""Session DTOs."""

from uuid import UUID

from pydantic import BaseModel

from hr_api.models.domain.roles import UserRole
from hr_api.models.dto.common import EmployeeSummary


class SessionResponse(BaseModel):
    """The caller's session context with its linked employee, if any."""

    account_id: UUID
    role: UserRole | str
    employee_id: UUID | None = None
    employee: EmployeeSummary | None = None
