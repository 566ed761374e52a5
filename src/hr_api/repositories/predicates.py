"""Compile access predicates into SQLAlchemy boolean clauses."""

from typing import Any

from sqlalchemy import ColumnElement, and_, false, or_, select, true

from hr_api.access.predicates import (
    And,
    Contains,
    Eq,
    Expr,
    HasMember,
    In,
    MatchAll,
    MatchCondition,
    MatchIds,
    MatchNone,
    MemberOfDepartments,
    MemberOfManagedDepartment,
    Or,
    Predicate,
)
from hr_api.models.orm.department import DepartmentORM
from hr_api.models.orm.employee import EmployeeORM
from hr_api.models.orm.employee_department import EmployeeDepartmentORM

# Attributes a predicate may reference, per model
EMPLOYEE_FIELDS = frozenset({"id", "first_name", "last_name", "email", "telephone", "status", "manager_id"})
DEPARTMENT_FIELDS = frozenset({"id", "name", "status", "manager_id"})


class PredicateCompiler:
    """Translate a predicate into a WHERE clause for one model."""

    def __init__(self, model: Any, fields: frozenset[str]) -> None:
        self.model = model
        self.fields = fields

    def compile(self, predicate: Predicate) -> ColumnElement[bool]:
        """Compile a predicate variant."""
        if isinstance(predicate, MatchAll):
            return true()
        if isinstance(predicate, MatchNone):
            return false()
        if isinstance(predicate, MatchIds):
            if not predicate.ids:
                return false()
            return self.model.id.in_(list(predicate.ids))
        if isinstance(predicate, MatchCondition):
            return self.compile_expr(predicate.expr)
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    def compile_expr(self, expr: Expr) -> ColumnElement[bool]:
        """Compile an expression tree node."""
        if isinstance(expr, And):
            return and_(*(self.compile_expr(op) for op in expr.operands))
        if isinstance(expr, Or):
            return or_(*(self.compile_expr(op) for op in expr.operands))
        if isinstance(expr, Eq):
            column = self._column(expr.field)
            if expr.value is None:
                return column.is_(None)
            return column == expr.value
        if isinstance(expr, In):
            if not expr.values:
                return false()
            return self._column(expr.field).in_(list(expr.values))
        if isinstance(expr, Contains):
            return self._column(expr.field).contains(expr.value, autoescape=True)
        return self.compile_relation(expr)

    def compile_relation(self, expr: Expr) -> ColumnElement[bool]:
        """Compile relation leaves; subclasses add the ones they support."""
        raise TypeError(f"{type(expr).__name__} is not supported for {self.model.__name__}")

    def _column(self, field: str) -> Any:
        if field not in self.fields:
            raise ValueError(f"Unknown field for {self.model.__name__}: {field}")
        return getattr(self.model, field)


class EmployeePredicateCompiler(PredicateCompiler):
    """Employee predicates, including department membership leaves."""

    def __init__(self) -> None:
        super().__init__(EmployeeORM, EMPLOYEE_FIELDS)

    def compile_relation(self, expr: Expr) -> ColumnElement[bool]:
        if isinstance(expr, MemberOfDepartments):
            if not expr.department_ids:
                return false()
            members = select(EmployeeDepartmentORM.employee_id).where(
                EmployeeDepartmentORM.department_id.in_(list(expr.department_ids))
            )
            return EmployeeORM.id.in_(members)

        if isinstance(expr, MemberOfManagedDepartment):
            # Managed departments resolve at query time; none means no match
            members = (
                select(EmployeeDepartmentORM.employee_id)
                .join(DepartmentORM, DepartmentORM.id == EmployeeDepartmentORM.department_id)
                .where(DepartmentORM.manager_id == expr.manager_id)
            )
            return EmployeeORM.id.in_(members)

        return super().compile_relation(expr)


class DepartmentPredicateCompiler(PredicateCompiler):
    """Department predicates, including the membership leaf."""

    def __init__(self) -> None:
        super().__init__(DepartmentORM, DEPARTMENT_FIELDS)

    def compile_relation(self, expr: Expr) -> ColumnElement[bool]:
        if isinstance(expr, HasMember):
            departments = select(EmployeeDepartmentORM.department_id).where(
                EmployeeDepartmentORM.employee_id == expr.employee_id
            )
            return DepartmentORM.id.in_(departments)

        return super().compile_relation(expr)
