"""Business logic services."""

from hr_api.services.department_service import DepartmentService
from hr_api.services.employee_service import EmployeeService

__all__ = [
    "DepartmentService",
    "EmployeeService",
]
