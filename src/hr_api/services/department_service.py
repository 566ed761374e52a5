"""Department service: scoped reads and administrator writes."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_api.access.filters import apply_department_filters
from hr_api.access.guard import require_admin, require_session
from hr_api.access.paging import clamp_page
from hr_api.access.predicates import MATCH_ALL, Predicate
from hr_api.access.scope import department_scope
from hr_api.config import Settings, get_settings
from hr_api.exceptions import (
    DepartmentNameExistsError,
    DepartmentNotEmptyError,
    DepartmentNotFoundError,
    InvalidManagerError,
)
from hr_api.models.domain.roles import UserRole
from hr_api.models.domain.session import SessionContext
from hr_api.models.dto.common import DeleteResponse, EmployeeSummary
from hr_api.models.dto.department import (
    DepartmentCreate,
    DepartmentFilters,
    DepartmentListItem,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentSort,
    DepartmentUpdate,
)
from hr_api.models.orm.department import DepartmentORM
from hr_api.repositories.department_repository import DepartmentRepository
from hr_api.repositories.employee_repository import EmployeeRepository
from hr_api.repositories.user_account_repository import UserAccountRepository
from hr_api.services.employee_service import manager_summary

logger = logging.getLogger(__name__)


class DepartmentService:
    """Service for departments."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize service with database session."""
        self.session = session
        self.settings = settings or get_settings()
        self.department_repo = DepartmentRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.account_repo = UserAccountRepository(session)

    def _build_department_response(self, department: DepartmentORM) -> DepartmentResponse:
        members = sorted(
            (m.employee for m in department.memberships),
            key=lambda e: (e.last_name, e.first_name, str(e.id)),
        )
        return DepartmentResponse(
            id=department.id,
            name=department.name,
            status=department.status,
            created_at=department.created_at,
            updated_at=department.updated_at,
            manager=manager_summary(department.manager),
            employees=[EmployeeSummary.model_validate(e) for e in members],
        )

    async def _load(self, scope: Predicate, department_id: UUID) -> DepartmentResponse:
        department = await self.department_repo.get_scoped(scope, department_id)
        if department is None:
            raise DepartmentNotFoundError(department_id)
        return self._build_department_response(department)

    async def list_departments(
        self,
        ctx: SessionContext | None,
        filters: DepartmentFilters | None = None,
        sort: DepartmentSort | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> DepartmentListResponse:
        """List departments visible to the caller.

        Args:
            ctx: Caller session
            filters: Optional filters, ANDed onto the caller's scope
            sort: Optional ordering (default: name)
            page: Page number (clamped to >= 1)
            page_size: Page size (clamped to 1..max_page_size)

        Returns:
            DepartmentListResponse with the page and the total match count
        """
        ctx = require_session(ctx)
        predicate = apply_department_filters(department_scope(ctx), filters)
        page_request = clamp_page(
            page,
            page_size,
            default_page_size=self.settings.default_page_size,
            max_page_size=self.settings.max_page_size,
        )

        rows, total = await self.department_repo.list_scoped(predicate, sort, page_request)

        items = [
            DepartmentListItem(
                id=department.id,
                name=department.name,
                status=department.status,
                created_at=department.created_at,
                manager=manager_summary(department.manager),
                employee_count=employee_count,
            )
            for department, employee_count in rows
        ]

        return DepartmentListResponse(
            items=items,
            total=total,
            page=page_request.page,
            page_size=page_request.page_size,
        )

    async def get_department(self, ctx: SessionContext | None, department_id: UUID) -> DepartmentResponse:
        """Get one department with its manager and members.

        Raises:
            DepartmentNotFoundError: If missing or outside the caller's scope
        """
        ctx = require_session(ctx)
        return await self._load(department_scope(ctx), department_id)

    async def _check_manager(self, manager_id: UUID) -> None:
        if not await self.employee_repo.exists(manager_id):
            raise InvalidManagerError("Manager does not exist")

    async def _promote_manager(self, employee_id: UUID) -> None:
        """Give the department manager's account the MANAGER role.

        Only EMPLOYEE accounts are promoted; administrators keep their role
        and employees without an account are left alone.
        """
        account = await self.account_repo.get_by_employee_id(employee_id)
        if account is None or account.role != UserRole.EMPLOYEE:
            return
        await self.account_repo.update(account, role=UserRole.MANAGER.value)
        logger.info(f"Promoted account {account.id} to {UserRole.MANAGER.value}")

    async def create_department(self, ctx: SessionContext | None, data: DepartmentCreate) -> DepartmentResponse:
        """Create a department.

        Args:
            ctx: Caller session (HR administrator only)
            data: Department creation data

        Returns:
            Created DepartmentResponse

        Raises:
            AdminRequiredError: If the caller is not an HR administrator
            DepartmentNameExistsError: If the name is taken
            InvalidManagerError: If the manager does not exist
        """
        ctx = require_admin(ctx)

        if await self.department_repo.name_exists(data.name):
            raise DepartmentNameExistsError(data.name)
        if data.manager_id is not None:
            await self._check_manager(data.manager_id)

        try:
            department = await self.department_repo.create(
                name=data.name,
                status=data.status.value,
                manager_id=data.manager_id,
            )
            if data.manager_id is not None:
                await self._promote_manager(data.manager_id)
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("Department creation failed, transaction rolled back")
            raise

        logger.info(f"Account {ctx.account_id} created department {department.id}")
        return await self._load(MATCH_ALL, department.id)

    async def update_department(
        self,
        ctx: SessionContext | None,
        department_id: UUID,
        data: DepartmentUpdate,
    ) -> DepartmentResponse:
        """Apply a partial update to a department.

        Args:
            ctx: Caller session (HR administrator only)
            department_id: Department UUID
            data: Fields to change; ``manager_id: null`` clears the manager

        Returns:
            Updated DepartmentResponse

        Raises:
            AdminRequiredError: If the caller is not an HR administrator
            DepartmentNotFoundError: If the department does not exist
            DepartmentNameExistsError: If the new name is taken
            InvalidManagerError: If the manager does not exist
        """
        ctx = require_admin(ctx)

        department = await self.department_repo.get_by_id(department_id)
        if department is None:
            raise DepartmentNotFoundError(department_id)

        fields = data.model_fields_set
        updates: dict = {}

        if "name" in fields and data.name != department.name:
            if await self.department_repo.name_exists(data.name, exclude_id=department_id):
                raise DepartmentNameExistsError(data.name)
            updates["name"] = data.name

        if "status" in fields:
            updates["status"] = data.status.value

        if "manager_id" in fields:
            if data.manager_id is not None:
                await self._check_manager(data.manager_id)
            updates["manager_id"] = data.manager_id

        try:
            if updates:
                await self.department_repo.update(department, **updates)
            if updates.get("manager_id") is not None:
                await self._promote_manager(updates["manager_id"])
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception(f"Update of department {department_id} failed, transaction rolled back")
            raise

        logger.info(f"Account {ctx.account_id} updated department {department_id}: {sorted(fields)}")
        return await self._load(MATCH_ALL, department_id)

    async def delete_department(self, ctx: SessionContext | None, department_id: UUID) -> DeleteResponse:
        """Delete a department that has no members.

        Raises:
            AdminRequiredError: If the caller is not an HR administrator
            DepartmentNotFoundError: If the department does not exist
            DepartmentNotEmptyError: If employees are still assigned
        """
        ctx = require_admin(ctx)

        department = await self.department_repo.get_by_id(department_id)
        if department is None:
            raise DepartmentNotFoundError(department_id)

        member_count = await self.department_repo.count_members(department_id)
        if member_count:
            raise DepartmentNotEmptyError(member_count)

        await self.department_repo.delete(department)
        logger.info(f"Account {ctx.account_id} deleted department {department_id}")
        return DeleteResponse(message="Department deleted")
