"""Login account ORM model."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_api.models.domain.roles import UserRole
from hr_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class UserAccountORM(Base, UUIDMixin, TimestampMixin):
    """Authentication principal linked 1:1 to an employee."""

    __tablename__ = "user_accounts"

    # Stored lowercase
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.EMPLOYEE.value)

    # Administrator accounts may have no linked employee
    employee_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )

    employee: Mapped["EmployeeORM | None"] = relationship(
        "EmployeeORM",
        back_populates="account",
        foreign_keys=[employee_id],
        lazy="select",
    )


# Import here to avoid circular import
from hr_api.models.orm.employee import EmployeeORM  # noqa: E402, F401
