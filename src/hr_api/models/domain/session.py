"""Session context domain model."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hr_api.models.domain.roles import UserRole


class SessionContext(BaseModel):
    """Who is asking: the only caller information access control consumes.

    ``role`` is kept as a plain string so that an unrecognized role coming
    from storage still yields a context (which then matches nothing).
    """

    model_config = ConfigDict(frozen=True)

    account_id: UUID
    role: str
    employee_id: UUID | None = None

    def is_admin(self) -> bool:
        """Check if the caller is an HR administrator."""
        return self.role == UserRole.HRADMIN

    def is_manager(self) -> bool:
        """Check if the caller is a manager."""
        return self.role == UserRole.MANAGER

    def is_employee(self) -> bool:
        """Check if the caller is a plain employee."""
        return self.role == UserRole.EMPLOYEE

    def is_self(self, employee_id: UUID) -> bool:
        """Check if the caller's linked employee is the given one."""
        return self.employee_id is not None and self.employee_id == employee_id
