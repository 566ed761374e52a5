"""Department create, update and delete, including manager promotion."""

from uuid import uuid4

import pytest

from conftest import EMAIL_DOMAIN, account_for, add_employee, count_rows, session_for
from hr_api.exceptions import (
    AdminRequiredError,
    DepartmentNameExistsError,
    DepartmentNotEmptyError,
    DepartmentNotFoundError,
    InvalidManagerError,
)
from hr_api.models.domain.roles import DepartmentStatus, UserRole
from hr_api.models.dto.department import DepartmentCreate, DepartmentUpdate
from hr_api.models.dto.employee import EmployeeCreate, EmployeeUpdate
from hr_api.models.orm import DepartmentORM


class TestCreateDepartment:
    """Department creation (HR administrators only)."""

    async def test_admin_creates_department(self, department_service, org) -> None:
        result = await department_service.create_department(org.admin, DepartmentCreate(name="  Legal "))
        assert result.name == "Legal"
        assert result.status == DepartmentStatus.ACTIVE
        assert result.manager is None
        assert result.employees == []

    @pytest.mark.parametrize("name", ["mallory", "frank"])
    async def test_non_admin_is_forbidden(self, department_service, org, db, name: str) -> None:
        with pytest.raises(AdminRequiredError):
            await department_service.create_department(org.ctx(name), DepartmentCreate(name="Legal"))
        assert await count_rows(db, DepartmentORM) == 3

    async def test_duplicate_name_conflicts(self, department_service, org) -> None:
        with pytest.raises(DepartmentNameExistsError):
            await department_service.create_department(org.admin, DepartmentCreate(name="Sales"))

    async def test_unknown_manager_is_rejected(self, department_service, org, db) -> None:
        with pytest.raises(InvalidManagerError):
            await department_service.create_department(
                org.admin, DepartmentCreate(name="Legal", manager_id=uuid4())
            )
        assert await count_rows(db, DepartmentORM) == 3

    async def test_manager_account_is_promoted(self, department_service, org, db) -> None:
        result = await department_service.create_department(
            org.admin, DepartmentCreate(name="Legal", manager_id=org.dave.id)
        )
        assert result.manager.id == org.dave.id

        account = await account_for(db, org.dave.id)
        assert account.role == UserRole.MANAGER

    def test_blank_name_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            DepartmentCreate(name="   ")


class TestUpdateDepartment:
    """Department updates and the manager promotion side effect."""

    async def test_rename(self, department_service, org) -> None:
        result = await department_service.update_department(
            org.admin, org.support.id, DepartmentUpdate(name="Customer Support")
        )
        assert result.name == "Customer Support"

    async def test_rename_to_taken_name_conflicts(self, department_service, org) -> None:
        with pytest.raises(DepartmentNameExistsError):
            await department_service.update_department(org.admin, org.support.id, DepartmentUpdate(name="Sales"))

    async def test_keeping_own_name_is_not_a_conflict(self, department_service, org) -> None:
        result = await department_service.update_department(
            org.admin, org.sales.id, DepartmentUpdate(name="Sales", status=DepartmentStatus.INACTIVE)
        )
        assert result.name == "Sales"
        assert result.status == DepartmentStatus.INACTIVE

    async def test_assigning_manager_promotes_employee_account(self, department_service, org, db) -> None:
        await department_service.update_department(
            org.admin, org.support.id, DepartmentUpdate(manager_id=org.erin.id)
        )
        account = await account_for(db, org.erin.id)
        assert account.role == UserRole.MANAGER

    async def test_promotion_is_idempotent(self, department_service, org, db) -> None:
        for _ in range(2):
            result = await department_service.update_department(
                org.admin, org.support.id, DepartmentUpdate(manager_id=org.erin.id)
            )
        assert result.manager.id == org.erin.id
        account = await account_for(db, org.erin.id)
        assert account.role == UserRole.MANAGER

    async def test_admin_account_is_never_downgraded(self, department_service, org, db) -> None:
        hr_lead = await add_employee(db, "Hana", "Lead", role=UserRole.HRADMIN)
        await db.commit()

        await department_service.update_department(org.admin, org.support.id, DepartmentUpdate(manager_id=hr_lead.id))

        account = await account_for(db, hr_lead.id)
        assert account.role == UserRole.HRADMIN

    async def test_manager_without_account_is_accepted(self, department_service, org, db) -> None:
        result = await department_service.update_department(
            org.admin, org.support.id, DepartmentUpdate(manager_id=org.nina.id)
        )
        assert result.manager.id == org.nina.id
        assert await account_for(db, org.nina.id) is None

    async def test_clearing_manager_keeps_role(self, department_service, org, db) -> None:
        result = await department_service.update_department(
            org.admin, org.engineering.id, DepartmentUpdate(manager_id=None)
        )
        assert result.manager is None
        account = await account_for(db, org.mallory.id)
        assert account.role == UserRole.MANAGER

    async def test_unknown_manager_is_rejected(self, department_service, org) -> None:
        with pytest.raises(InvalidManagerError):
            await department_service.update_department(
                org.admin, org.support.id, DepartmentUpdate(manager_id=uuid4())
            )

    async def test_missing_department_is_not_found(self, department_service, org) -> None:
        with pytest.raises(DepartmentNotFoundError):
            await department_service.update_department(org.admin, uuid4(), DepartmentUpdate(name="Ghost"))

    async def test_manager_cannot_update_own_department(self, department_service, org) -> None:
        with pytest.raises(AdminRequiredError):
            await department_service.update_department(
                org.ctx("mallory"), org.engineering.id, DepartmentUpdate(name="R&D")
            )

    @pytest.mark.parametrize("field", ["name", "status"])
    def test_null_is_rejected_for_required_fields(self, field: str) -> None:
        with pytest.raises(ValueError):
            DepartmentUpdate(**{field: None})


class TestDeleteDepartment:
    """Deletion only of departments without members."""

    async def test_delete_with_members_is_rejected(self, department_service, org, db) -> None:
        with pytest.raises(DepartmentNotEmptyError) as exc_info:
            await department_service.delete_department(org.admin, org.sales.id)
        assert exc_info.value.details == {"member_count": 1}
        assert await count_rows(db, DepartmentORM) == 3

    async def test_delete_after_last_member_leaves(self, department_service, employee_service, org, db) -> None:
        await employee_service.update_employee(org.admin, org.frank.id, EmployeeUpdate(department_ids=[]))

        result = await department_service.delete_department(org.admin, org.sales.id)
        assert result.success is True
        assert await count_rows(db, DepartmentORM) == 2

        with pytest.raises(DepartmentNotFoundError):
            await department_service.get_department(org.admin, org.sales.id)

    async def test_non_admin_is_forbidden(self, department_service, org) -> None:
        with pytest.raises(AdminRequiredError):
            await department_service.delete_department(org.ctx("oscar"), org.sales.id)

    async def test_missing_department_is_not_found(self, department_service, org) -> None:
        with pytest.raises(DepartmentNotFoundError):
            await department_service.delete_department(org.admin, uuid4())


class TestManagerPromotionScenario:
    """End-to-end: a new employee becomes a department manager."""

    async def test_new_department_manager_sees_members(self, department_service, employee_service, org, db) -> None:
        platform = await department_service.create_department(org.admin, DepartmentCreate(name="Platform"))

        created = await employee_service.create_employee(
            org.admin,
            EmployeeCreate(
                first_name="Eve",
                last_name="Employee",
                telephone="+1 555 0177",
                email=f"eve@{EMAIL_DOMAIN}",
                department_ids=[platform.id],
            ),
        )
        eve_id = created.employee.id
        assert created.account.role == UserRole.EMPLOYEE
        assert created.employee.account.id == created.account.id

        colleague = await add_employee(db, "Carl", "Colleague")
        await employee_service.update_employee(
            org.admin, colleague.id, EmployeeUpdate(department_ids=[platform.id])
        )

        updated = await department_service.update_department(
            org.admin, platform.id, DepartmentUpdate(manager_id=eve_id)
        )
        assert updated.manager.id == eve_id

        account = await account_for(db, eve_id)
        assert account.role == UserRole.MANAGER

        listing = await employee_service.list_employees(session_for(account))
        visible = {item.id for item in listing.items}
        assert {eve_id, colleague.id} <= visible
        assert org.frank.id not in visible
