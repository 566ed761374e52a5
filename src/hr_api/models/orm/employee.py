"""Employee ORM model."""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_api.models.domain.roles import EmployeeStatus
from hr_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin):
    """Employee database model."""

    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    telephone: Mapped[str] = mapped_column(String(50), nullable=False)
    # Stored lowercase
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmployeeStatus.ACTIVE.value
    )

    manager_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships - lazy="select" for collections; load explicitly with
    # selectinload() when a response needs them
    manager: Mapped["EmployeeORM | None"] = relationship(
        "EmployeeORM",
        remote_side="EmployeeORM.id",
        foreign_keys=[manager_id],
        back_populates="direct_reports",
        lazy="select",
    )
    direct_reports: Mapped[list["EmployeeORM"]] = relationship(
        "EmployeeORM",
        foreign_keys=[manager_id],
        back_populates="manager",
        lazy="select",
    )
    memberships: Mapped[list["EmployeeDepartmentORM"]] = relationship(
        "EmployeeDepartmentORM",
        back_populates="employee",
        lazy="select",
        cascade="all, delete-orphan",
    )
    account: Mapped["UserAccountORM | None"] = relationship(
        "UserAccountORM",
        back_populates="employee",
        uselist=False,
        lazy="select",
    )

    __table_args__ = (
        Index("idx_employees_manager_id", "manager_id"),
        Index("idx_employees_status", "status"),
        Index("idx_employees_name", "last_name", "first_name"),
    )


# Import here to avoid circular import
from hr_api.models.orm.employee_department import EmployeeDepartmentORM  # noqa: E402, F401
from hr_api.models.orm.user_account import UserAccountORM  # noqa: E402, F401
