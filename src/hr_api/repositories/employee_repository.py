"""Employee repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import aliased, selectinload

from hr_api.access.paging import PageRequest
from hr_api.access.predicates import Predicate
from hr_api.models.dto.common import SortDirection
from hr_api.models.dto.employee import EmployeeSort, EmployeeSortField
from hr_api.models.orm.employee import EmployeeORM
from hr_api.models.orm.employee_department import EmployeeDepartmentORM
from hr_api.repositories.base import BaseRepository
from hr_api.repositories.predicates import EmployeePredicateCompiler

# Plain column sorts; manager and count sorts are built per query
_COLUMN_SORTS = {
    EmployeeSortField.FIRST_NAME: EmployeeORM.first_name,
    EmployeeSortField.LAST_NAME: EmployeeORM.last_name,
    EmployeeSortField.EMAIL: EmployeeORM.email,
    EmployeeSortField.STATUS: EmployeeORM.status,
    EmployeeSortField.CREATED_AT: EmployeeORM.created_at,
}

EmployeeRow = tuple[EmployeeORM, int, int]


def _directed(column, direction: SortDirection):
    if direction == SortDirection.DESC:
        return column.desc().nulls_last()
    return column.asc().nulls_last()


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations."""

    model = EmployeeORM

    def __init__(self, session) -> None:
        super().__init__(session)
        self.compiler = EmployeePredicateCompiler()

    async def list_scoped(
        self,
        predicate: Predicate,
        sort: EmployeeSort | None,
        page: PageRequest,
    ) -> tuple[list[EmployeeRow], int]:
        """List employees matching a predicate, sorted and paged.

        Args:
            predicate: Scope and filters, already combined
            sort: Requested ordering (default: last name, first name)
            page: Clamped page request

        Returns:
            Tuple of ((employee, department_count, report_count) rows, total_count)
        """
        clause = self.compiler.compile(predicate)

        department_counts = (
            select(
                EmployeeDepartmentORM.employee_id.label("employee_id"),
                func.count().label("department_count"),
            )
            .group_by(EmployeeDepartmentORM.employee_id)
            .subquery()
        )
        reports = aliased(EmployeeORM, name="report")
        report_counts = (
            select(
                reports.manager_id.label("manager_id"),
                func.count(reports.id).label("report_count"),
            )
            .where(reports.manager_id.isnot(None))
            .group_by(reports.manager_id)
            .subquery()
        )
        manager = aliased(EmployeeORM, name="manager")

        department_count = func.coalesce(department_counts.c.department_count, 0)
        report_count = func.coalesce(report_counts.c.report_count, 0)

        query = (
            select(
                EmployeeORM,
                department_count.label("department_count"),
                report_count.label("report_count"),
            )
            .outerjoin(department_counts, department_counts.c.employee_id == EmployeeORM.id)
            .outerjoin(report_counts, report_counts.c.manager_id == EmployeeORM.id)
            .outerjoin(manager, manager.id == EmployeeORM.manager_id)
            .where(clause)
            .options(selectinload(EmployeeORM.manager))
        )

        order_by = []
        if sort is not None:
            if sort.field == EmployeeSortField.MANAGER:
                # Employees without a manager sort last in both directions
                order_by += [
                    _directed(manager.last_name, sort.direction),
                    _directed(manager.first_name, sort.direction),
                ]
            elif sort.field == EmployeeSortField.DEPARTMENTS:
                order_by.append(_directed(department_count, sort.direction))
            elif sort.field == EmployeeSortField.REPORTS:
                order_by.append(_directed(report_count, sort.direction))
            else:
                order_by.append(_directed(_COLUMN_SORTS[sort.field], sort.direction))
        # Stable default and tie-breakers
        order_by += [EmployeeORM.last_name.asc(), EmployeeORM.first_name.asc(), EmployeeORM.id.asc()]

        query = query.order_by(*order_by).offset(page.offset).limit(page.limit)

        result = await self.session.execute(query)
        rows = [(emp, int(depts), int(reps)) for emp, depts, reps in result.all()]

        count_result = await self.session.execute(
            select(func.count()).select_from(EmployeeORM).where(clause)
        )
        total = count_result.scalar_one()

        return rows, total

    async def get_scoped(self, predicate: Predicate, employee_id: UUID) -> EmployeeORM | None:
        """Get one employee with relations, only if the predicate admits it.

        Args:
            predicate: Access scope of the caller
            employee_id: Employee UUID

        Returns:
            EmployeeORM or None if missing or out of scope
        """
        result = await self.session.execute(
            select(EmployeeORM)
            .where(EmployeeORM.id == employee_id, self.compiler.compile(predicate))
            .options(
                selectinload(EmployeeORM.manager),
                selectinload(EmployeeORM.account),
                selectinload(EmployeeORM.memberships).selectinload(EmployeeDepartmentORM.department),
                selectinload(EmployeeORM.direct_reports),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def is_visible(self, predicate: Predicate, employee_id: UUID) -> bool:
        """Check whether an employee exists within a scope."""
        result = await self.session.execute(
            select(func.count())
            .select_from(EmployeeORM)
            .where(EmployeeORM.id == employee_id, self.compiler.compile(predicate))
        )
        return result.scalar_one() > 0

    async def email_exists(self, email: str, exclude_id: UUID | None = None) -> bool:
        """Check if an email is used by an employee (case-insensitive).

        Args:
            email: Email to check
            exclude_id: Optionally exclude an employee ID from the check

        Returns:
            True if email exists, False otherwise
        """
        query = select(func.count()).select_from(EmployeeORM).where(
            func.lower(EmployeeORM.email) == email.lower()
        )
        if exclude_id:
            query = query.where(EmployeeORM.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def get_manager_id(self, employee_id: UUID) -> UUID | None:
        """Get the direct manager ID of an employee."""
        result = await self.session.execute(
            select(EmployeeORM.manager_id).where(EmployeeORM.id == employee_id)
        )
        return result.scalar_one_or_none()

    async def reports_to(self, employee_id: UUID, ancestor_id: UUID) -> bool:
        """Check whether ``ancestor_id`` is in the management chain above ``employee_id``.

        Walks manager links upward; stops on an existing loop.
        """
        seen: set[UUID] = set()
        current = await self.get_manager_id(employee_id)
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            current = await self.get_manager_id(current)
        return False

    async def replace_memberships(self, employee_id: UUID, department_ids: list[UUID]) -> None:
        """Replace all department memberships of an employee.

        Memberships kept by the new list are left untouched.

        Args:
            employee_id: Employee UUID
            department_ids: New full membership list (duplicates collapsed)
        """
        result = await self.session.execute(
            select(EmployeeDepartmentORM).where(EmployeeDepartmentORM.employee_id == employee_id)
        )
        current = {m.department_id: m for m in result.scalars().all()}
        wanted = list(dict.fromkeys(department_ids))

        for department_id, membership in current.items():
            if department_id not in wanted:
                await self.session.delete(membership)
        await self.add_memberships(employee_id, [d for d in wanted if d not in current])

    async def add_memberships(self, employee_id: UUID, department_ids: list[UUID]) -> None:
        """Insert membership rows for an employee."""
        for department_id in dict.fromkeys(department_ids):
            self.session.add(
                EmployeeDepartmentORM(employee_id=employee_id, department_id=department_id)
            )
        await self.session.flush()
