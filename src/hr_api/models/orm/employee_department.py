"""Employee-Department membership junction table ORM model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_api.models.orm.base import Base, utcnow


class EmployeeDepartmentORM(Base):
    """Employee-Department junction table."""

    __tablename__ = "employee_departments"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
    )
    department_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("departments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="memberships")
    department: Mapped["DepartmentORM"] = relationship("DepartmentORM", back_populates="memberships")

    __table_args__ = (
        Index("idx_employee_departments_employee_id", "employee_id"),
        Index("idx_employee_departments_department_id", "department_id"),
    )
