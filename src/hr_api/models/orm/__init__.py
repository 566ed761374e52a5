"""SQLAlchemy ORM models package."""

from hr_api.models.orm.base import Base
from hr_api.models.orm.department import DepartmentORM
from hr_api.models.orm.employee import EmployeeORM
from hr_api.models.orm.employee_department import EmployeeDepartmentORM
from hr_api.models.orm.user_account import UserAccountORM

__all__ = [
    "Base",
    "DepartmentORM",
    "EmployeeDepartmentORM",
    "EmployeeORM",
    "UserAccountORM",
]
