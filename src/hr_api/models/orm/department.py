"""Department ORM model."""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_api.models.domain.roles import DepartmentStatus
from hr_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class DepartmentORM(Base, UUIDMixin, TimestampMixin):
    """Department database model."""

    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DepartmentStatus.ACTIVE.value
    )
    manager_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
    )

    manager: Mapped["EmployeeORM | None"] = relationship(
        "EmployeeORM",
        foreign_keys=[manager_id],
        lazy="select",
    )
    memberships: Mapped[list["EmployeeDepartmentORM"]] = relationship(
        "EmployeeDepartmentORM",
        back_populates="department",
        lazy="select",
    )

    __table_args__ = (Index("idx_departments_manager_id", "manager_id"),)


# Import here to avoid circular import
from hr_api.models.orm.employee import EmployeeORM  # noqa: E402, F401
from hr_api.models.orm.employee_department import EmployeeDepartmentORM  # noqa: E402, F401
