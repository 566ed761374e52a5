"""Department repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import aliased, selectinload

from hr_api.access.paging import PageRequest
from hr_api.access.predicates import Predicate
from hr_api.models.dto.common import SortDirection
from hr_api.models.dto.department import DepartmentSort, DepartmentSortField
from hr_api.models.orm.department import DepartmentORM
from hr_api.models.orm.employee import EmployeeORM
from hr_api.models.orm.employee_department import EmployeeDepartmentORM
from hr_api.repositories.base import BaseRepository
from hr_api.repositories.predicates import DepartmentPredicateCompiler

_COLUMN_SORTS = {
    DepartmentSortField.NAME: DepartmentORM.name,
    DepartmentSortField.STATUS: DepartmentORM.status,
    DepartmentSortField.CREATED_AT: DepartmentORM.created_at,
}


def _directed(column, direction: SortDirection):
    if direction == SortDirection.DESC:
        return column.desc().nulls_last()
    return column.asc().nulls_last()


class DepartmentRepository(BaseRepository[DepartmentORM]):
    """Repository for department operations."""

    model = DepartmentORM

    def __init__(self, session) -> None:
        super().__init__(session)
        self.compiler = DepartmentPredicateCompiler()

    async def list_scoped(
        self,
        predicate: Predicate,
        sort: DepartmentSort | None,
        page: PageRequest,
    ) -> tuple[list[tuple[DepartmentORM, int]], int]:
        """List departments matching a predicate, sorted and paged.

        Args:
            predicate: Scope and filters, already combined
            sort: Requested ordering (default: name)
            page: Clamped page request

        Returns:
            Tuple of ((department, employee_count) rows, total_count)
        """
        clause = self.compiler.compile(predicate)

        member_counts = (
            select(
                EmployeeDepartmentORM.department_id.label("department_id"),
                func.count().label("employee_count"),
            )
            .group_by(EmployeeDepartmentORM.department_id)
            .subquery()
        )
        manager = aliased(EmployeeORM, name="manager")
        employee_count = func.coalesce(member_counts.c.employee_count, 0)

        query = (
            select(DepartmentORM, employee_count.label("employee_count"))
            .outerjoin(member_counts, member_counts.c.department_id == DepartmentORM.id)
            .outerjoin(manager, manager.id == DepartmentORM.manager_id)
            .where(clause)
            .options(selectinload(DepartmentORM.manager))
        )

        order_by = []
        if sort is not None:
            if sort.field == DepartmentSortField.MANAGER:
                order_by += [
                    _directed(manager.last_name, sort.direction),
                    _directed(manager.first_name, sort.direction),
                ]
            else:
                order_by.append(_directed(_COLUMN_SORTS[sort.field], sort.direction))
        order_by += [DepartmentORM.name.asc(), DepartmentORM.id.asc()]

        query = query.order_by(*order_by).offset(page.offset).limit(page.limit)

        result = await self.session.execute(query)
        rows = [(dept, int(count)) for dept, count in result.all()]

        count_result = await self.session.execute(
            select(func.count()).select_from(DepartmentORM).where(clause)
        )
        total = count_result.scalar_one()

        return rows, total

    async def get_scoped(self, predicate: Predicate, department_id: UUID) -> DepartmentORM | None:
        """Get one department with manager and members, only if in scope."""
        result = await self.session.execute(
            select(DepartmentORM)
            .where(DepartmentORM.id == department_id, self.compiler.compile(predicate))
            .options(
                selectinload(DepartmentORM.manager),
                selectinload(DepartmentORM.memberships).selectinload(EmployeeDepartmentORM.employee),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Check if a department name is taken.

        Args:
            name: Department name
            exclude_id: Optionally exclude a department ID from the check

        Returns:
            True if the name is in use
        """
        query = select(func.count()).select_from(DepartmentORM).where(DepartmentORM.name == name)
        if exclude_id:
            query = query.where(DepartmentORM.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def count_members(self, department_id: UUID) -> int:
        """Count employee memberships of a department."""
        result = await self.session.execute(
            select(func.count())
            .select_from(EmployeeDepartmentORM)
            .where(EmployeeDepartmentORM.department_id == department_id)
        )
        return result.scalar_one()
