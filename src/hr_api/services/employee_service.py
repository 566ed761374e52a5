"""Employee service: scoped reads and guarded writes."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_api.access.filters import apply_employee_filters
from hr_api.access.guard import (
    check_employee_update_fields,
    normalize_email,
    require_admin,
    require_session,
)
from hr_api.access.paging import clamp_page
from hr_api.access.predicates import MATCH_ALL, Predicate
from hr_api.access.scope import employee_scope
from hr_api.config import Settings, get_settings
from hr_api.exceptions import (
    ConfigurationError,
    EmailAlreadyExistsError,
    EmployeeNotFoundError,
    ForbiddenError,
    InvalidManagerError,
    NullFieldError,
    UnknownDepartmentError,
)
from hr_api.models.domain.roles import EmployeeStatus, UserRole
from hr_api.models.domain.session import SessionContext
from hr_api.models.dto.common import (
    AccountSummary,
    DepartmentSummary,
    EmployeeSummary,
    ManagerSummary,
)
from hr_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeCreateResponse,
    EmployeeFilters,
    EmployeeListItem,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeSort,
    EmployeeUpdate,
)
from hr_api.models.dto.session import SessionResponse
from hr_api.models.orm.employee import EmployeeORM
from hr_api.repositories.department_repository import DepartmentRepository
from hr_api.repositories.employee_repository import EmployeeRepository
from hr_api.repositories.user_account_repository import UserAccountRepository
from hr_api.security.password import PasswordService

logger = logging.getLogger(__name__)


def manager_summary(manager: EmployeeORM | None) -> ManagerSummary | None:
    """Build the embedded manager info, if any."""
    if manager is None:
        return None
    return ManagerSummary.model_validate(manager)


class EmployeeService:
    """Service for employee records."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        password_service: PasswordService | None = None,
    ) -> None:
        """Initialize service with database session."""
        self.session = session
        self.settings = settings or get_settings()
        self.password_service = password_service or PasswordService()
        self.employee_repo = EmployeeRepository(session)
        self.department_repo = DepartmentRepository(session)
        self.account_repo = UserAccountRepository(session)

    def _build_employee_response(self, employee: EmployeeORM) -> EmployeeResponse:
        """Build an EmployeeResponse from a fully loaded ORM object."""
        departments = sorted(
            (m.department for m in employee.memberships),
            key=lambda d: (d.name, str(d.id)),
        )
        reports = sorted(
            employee.direct_reports,
            key=lambda e: (e.last_name, e.first_name, str(e.id)),
        )
        return EmployeeResponse(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            telephone=employee.telephone,
            status=employee.status,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
            manager=manager_summary(employee.manager),
            account=AccountSummary.model_validate(employee.account) if employee.account else None,
            departments=[DepartmentSummary.model_validate(d) for d in departments],
            direct_reports=[EmployeeSummary.model_validate(e) for e in reports],
        )

    async def _load(self, scope: Predicate, employee_id: UUID) -> EmployeeResponse:
        employee = await self.employee_repo.get_scoped(scope, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return self._build_employee_response(employee)

    async def list_employees(
        self,
        ctx: SessionContext | None,
        filters: EmployeeFilters | None = None,
        sort: EmployeeSort | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> EmployeeListResponse:
        """List employees visible to the caller.

        Args:
            ctx: Caller session
            filters: Optional filters, ANDed onto the caller's scope
            sort: Optional ordering (default: last name, first name)
            page: Page number (clamped to >= 1)
            page_size: Page size (clamped to 1..max_page_size)

        Returns:
            EmployeeListResponse with the page and the total match count
        """
        ctx = require_session(ctx)
        predicate = apply_employee_filters(employee_scope(ctx), filters)
        page_request = clamp_page(
            page,
            page_size,
            default_page_size=self.settings.default_page_size,
            max_page_size=self.settings.max_page_size,
        )

        rows, total = await self.employee_repo.list_scoped(predicate, sort, page_request)

        items = [
            EmployeeListItem(
                id=employee.id,
                first_name=employee.first_name,
                last_name=employee.last_name,
                email=employee.email,
                telephone=employee.telephone,
                status=employee.status,
                created_at=employee.created_at,
                manager=manager_summary(employee.manager),
                department_count=department_count,
                report_count=report_count,
            )
            for employee, department_count, report_count in rows
        ]

        return EmployeeListResponse(
            items=items,
            total=total,
            page=page_request.page,
            page_size=page_request.page_size,
        )

    async def get_employee(self, ctx: SessionContext | None, employee_id: UUID) -> EmployeeResponse:
        """Get one employee with manager, account, departments and reports.

        Raises:
            EmployeeNotFoundError: If missing or outside the caller's scope
        """
        ctx = require_session(ctx)
        return await self._load(employee_scope(ctx), employee_id)

    async def _check_email_available(
        self,
        email: str,
        employee_id: UUID | None = None,
        account_id: UUID | None = None,
    ) -> None:
        if await self.employee_repo.email_exists(email, exclude_id=employee_id):
            raise EmailAlreadyExistsError()
        if await self.account_repo.email_exists(email, exclude_id=account_id):
            raise EmailAlreadyExistsError()

    async def _check_departments(self, department_ids: list[UUID]) -> None:
        if not department_ids:
            return
        found = await self.department_repo.existing_ids(set(department_ids))
        missing = set(department_ids) - found
        if missing:
            raise UnknownDepartmentError(list(missing))

    async def _check_manager(self, manager_id: UUID, employee_id: UUID | None = None) -> None:
        """Validate a manager reference for a new or existing employee.

        Raises:
            InvalidManagerError: If the manager is missing, is the employee
                itself, or already reports to the employee
        """
        if employee_id is not None and manager_id == employee_id:
            raise InvalidManagerError("An employee cannot manage themselves")
        if not await self.employee_repo.exists(manager_id):
            raise InvalidManagerError("Manager does not exist")
        if employee_id is not None and await self.employee_repo.reports_to(manager_id, employee_id):
            raise InvalidManagerError("Manager assignment would create a reporting cycle")

    async def create_employee(
        self,
        ctx: SessionContext | None,
        data: EmployeeCreate,
    ) -> EmployeeCreateResponse:
        """Create an employee together with its login account.

        All checks run before the first write; the account, the employee,
        the link between them and the department memberships are then
        written in one transaction.

        Args:
            ctx: Caller session (HR administrator only)
            data: Employee creation data

        Returns:
            EmployeeCreateResponse with the employee and its account summary

        Raises:
            AdminRequiredError: If the caller is not an HR administrator
            EmailAlreadyExistsError: If the email is used by an employee or account
            UnknownDepartmentError: If a department does not exist
            InvalidManagerError: If the manager does not exist
            ConfigurationError: If no default password is configured
        """
        require_admin(ctx)

        email = normalize_email(data.email)
        department_ids = list(dict.fromkeys(data.department_ids or []))

        await self._check_email_available(email)
        await self._check_departments(department_ids)
        if data.manager_id is not None:
            await self._check_manager(data.manager_id)

        if not self.settings.default_password:
            logger.error("Employee creation refused: DEFAULT_PASSWORD is not configured")
            raise ConfigurationError("default_password")

        password_hash = self.password_service.hash_password(self.settings.default_password)

        try:
            employee = await self.employee_repo.create(
                first_name=data.first_name,
                last_name=data.last_name,
                telephone=data.telephone,
                email=email,
                status=data.status.value,
                manager_id=data.manager_id,
            )
            account = await self.account_repo.create(
                email=email,
                password_hash=password_hash,
                role=UserRole.EMPLOYEE.value,
                employee_id=employee.id,
            )
            if department_ids:
                await self.employee_repo.add_memberships(employee.id, department_ids)
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("Employee creation failed, transaction rolled back")
            raise

        logger.info(f"Created employee {employee.id} with account {account.id}")

        return EmployeeCreateResponse(
            employee=await self._load(MATCH_ALL, employee.id),
            account=AccountSummary.model_validate(account),
        )

    async def update_employee(
        self,
        ctx: SessionContext | None,
        employee_id: UUID,
        data: EmployeeUpdate,
    ) -> EmployeeResponse:
        """Apply a partial update to an employee.

        Non-administrators may only change their own name, telephone and
        email. Sending any privileged field fails the whole request.

        Args:
            ctx: Caller session
            employee_id: Employee UUID
            data: Fields to change (presence is significant)

        Returns:
            Updated EmployeeResponse

        Raises:
            EmployeeNotFoundError: If missing or outside the caller's scope
            ForbiddenError: If the caller may see but not change the employee
            RestrictedFieldError: If a non-administrator sends privileged fields
            EmailAlreadyExistsError: If the new email is taken
            InvalidManagerError: If the manager is invalid
            NullFieldError: If an administrator sends status or department_ids as null
            UnknownDepartmentError: If a department does not exist
        """
        ctx = require_session(ctx)
        scope = employee_scope(ctx)

        if not await self.employee_repo.is_visible(scope, employee_id):
            raise EmployeeNotFoundError(employee_id)
        if not ctx.is_admin() and not ctx.is_self(employee_id):
            logger.warning(f"Account {ctx.account_id} denied update of employee {employee_id}")
            raise ForbiddenError("You can only update your own record")

        fields = data.model_fields_set
        check_employee_update_fields(ctx, fields)
        cleared = [name for name in ("status", "department_ids") if name in fields and getattr(data, name) is None]
        if cleared:
            raise NullFieldError(cleared)

        employee = await self.employee_repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        account = await self.account_repo.get_by_employee_id(employee_id)

        updates: dict = {}
        for name in ("first_name", "last_name", "telephone"):
            if name in fields:
                updates[name] = getattr(data, name)

        new_email: str | None = None
        if "email" in fields:
            new_email = normalize_email(data.email)
            await self._check_email_available(
                new_email,
                employee_id=employee_id,
                account_id=account.id if account else None,
            )
            updates["email"] = new_email

        if "status" in fields:
            updates["status"] = data.status.value

        if "manager_id" in fields:
            if data.manager_id is not None:
                await self._check_manager(data.manager_id, employee_id)
            updates["manager_id"] = data.manager_id

        department_ids: list[UUID] | None = None
        if "department_ids" in fields:
            department_ids = list(dict.fromkeys(data.department_ids))
            await self._check_departments(department_ids)

        try:
            if updates:
                await self.employee_repo.update(employee, **updates)
            if new_email is not None and account is not None and account.email != new_email:
                await self.account_repo.update(account, email=new_email)
            if department_ids is not None:
                await self.employee_repo.replace_memberships(employee_id, department_ids)
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception(f"Update of employee {employee_id} failed, transaction rolled back")
            raise

        logger.info(f"Account {ctx.account_id} updated employee {employee_id}: {sorted(fields)}")

        return await self._load(scope, employee_id)

    async def deactivate_employee(self, ctx: SessionContext | None, employee_id: UUID) -> EmployeeResponse:
        """Set an employee's status to INACTIVE.

        Raises:
            AdminRequiredError: If the caller is not an HR administrator
            EmployeeNotFoundError: If the employee does not exist
        """
        ctx = require_admin(ctx)

        employee = await self.employee_repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        if employee.status != EmployeeStatus.INACTIVE:
            await self.employee_repo.update(employee, status=EmployeeStatus.INACTIVE.value)
            logger.info(f"Account {ctx.account_id} deactivated employee {employee_id}")

        return await self._load(MATCH_ALL, employee_id)

    async def describe_session(self, ctx: SessionContext | None) -> SessionResponse:
        """Describe the caller's session together with its linked employee."""
        ctx = require_session(ctx)
        employee = None
        if ctx.employee_id is not None:
            linked = await self.employee_repo.get_by_id(ctx.employee_id)
            if linked is not None:
                employee = EmployeeSummary.model_validate(linked)
        return SessionResponse(
            account_id=ctx.account_id,
            role=ctx.role,
            employee_id=ctx.employee_id,
            employee=employee,
        )
