"""Filter compositor: caller filters ANDed onto the access scope."""

from hr_api.access.predicates import (
    Contains,
    Eq,
    Expr,
    In,
    MemberOfDepartments,
    MemberOfManagedDepartment,
    Or,
    Predicate,
    conjoin,
    where,
)
from hr_api.models.dto.department import DepartmentFilters
from hr_api.models.dto.employee import EmployeeFilters


def employee_filter_clauses(filters: EmployeeFilters | None) -> list[Expr]:
    """Translate employee filters into expression clauses.

    ``manager_id`` matches both direct reports of that manager and members
    of any department that manager runs.
    """
    if filters is None:
        return []

    clauses: list[Expr] = []

    if filters.first_name:
        clauses.append(Contains("first_name", filters.first_name))
    if filters.last_name:
        clauses.append(Contains("last_name", filters.last_name))
    if filters.email:
        clauses.append(Contains("email", filters.email))

    if filters.status:
        clauses.append(In("status", frozenset(s.value for s in filters.status)))

    if filters.department_ids:
        clauses.append(MemberOfDepartments(frozenset(filters.department_ids)))

    if filters.manager_id:
        clauses.append(
            Or(
                (
                    Eq("manager_id", filters.manager_id),
                    MemberOfManagedDepartment(filters.manager_id),
                )
            )
        )

    return clauses


def department_filter_clauses(filters: DepartmentFilters | None) -> list[Expr]:
    """Translate department filters into expression clauses."""
    if filters is None:
        return []

    clauses: list[Expr] = []

    if filters.name:
        clauses.append(Contains("name", filters.name))
    if filters.status:
        clauses.append(In("status", frozenset(s.value for s in filters.status)))
    if filters.manager_id:
        clauses.append(Eq("manager_id", filters.manager_id))

    return clauses


def apply_employee_filters(scope: Predicate, filters: EmployeeFilters | None) -> Predicate:
    """Narrow an employee scope by caller filters."""
    return conjoin(scope, where(*employee_filter_clauses(filters)))


def apply_department_filters(scope: Predicate, filters: DepartmentFilters | None) -> Predicate:
    """Narrow a department scope by caller filters."""
    return conjoin(scope, where(*department_filter_clauses(filters)))
