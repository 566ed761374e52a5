"""Repositories package."""

from hr_api.repositories.department_repository import DepartmentRepository
from hr_api.repositories.employee_repository import EmployeeRepository
from hr_api.repositories.user_account_repository import UserAccountRepository

__all__ = [
    "DepartmentRepository",
    "EmployeeRepository",
    "UserAccountRepository",
]
