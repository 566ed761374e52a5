"""Shared fixtures: an in-memory SQLite database seeded with a small organization.

Organization used throughout the suite::

    Engineering  (managed by Mallory)  members: Erin
    Sales        (managed by Oscar)    members: Frank
    Support      (no manager)          members: Nina

    Dave  reports to Mallory
    Frank reports to Oscar

Accounts: an HR administrator without an employee record, MANAGER accounts
for Mallory and Oscar, EMPLOYEE accounts for Dave, Erin and Frank. Nina has
no login account.
"""

from dataclasses import dataclass, field
from uuid import UUID

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hr_api.config import Settings
from hr_api.database import create_session_maker, install_sqlite_pragmas
from hr_api.models.domain.roles import UserRole
from hr_api.models.domain.session import SessionContext
from hr_api.models.orm import (
    Base,
    DepartmentORM,
    EmployeeDepartmentORM,
    EmployeeORM,
    UserAccountORM,
)
from hr_api.security.password import PasswordService
from hr_api.services.department_service import DepartmentService
from hr_api.services.employee_service import EmployeeService

TEST_JWT_SECRET = "unit-test-signing-key-7f3a9c1e5b2d8046-XyZ"
TEST_DEFAULT_PASSWORD = "Welcome-Aboard-2026"
EMAIL_DOMAIN = "acme-corp.com"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_JWT_SECRET,
        default_password=TEST_DEFAULT_PASSWORD,
    )


@pytest.fixture
async def engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    install_sqlite_pragmas(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(engine)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def password_service() -> PasswordService:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordService(rounds=4)


@pytest.fixture
def employee_service(db, settings, password_service) -> EmployeeService:
    return EmployeeService(db, settings, password_service)


@pytest.fixture
def department_service(db, settings) -> DepartmentService:
    return DepartmentService(db, settings)


def make_email(first_name: str, last_name: str) -> str:
    return f"{first_name}.{last_name}@{EMAIL_DOMAIN}".lower()


async def add_department(db: AsyncSession, name: str, manager: EmployeeORM | None = None) -> DepartmentORM:
    department = DepartmentORM(name=name, manager_id=manager.id if manager else None)
    db.add(department)
    await db.flush()
    return department


async def add_employee(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    *,
    manager: EmployeeORM | None = None,
    departments: tuple[DepartmentORM, ...] = (),
    role: UserRole | None = UserRole.EMPLOYEE,
) -> EmployeeORM:
    """Insert an employee, its memberships and (optionally) its login account."""
    employee = EmployeeORM(
        first_name=first_name,
        last_name=last_name,
        telephone="+1 555 0100",
        email=make_email(first_name, last_name),
        manager_id=manager.id if manager else None,
    )
    db.add(employee)
    await db.flush()

    for department in departments:
        db.add(EmployeeDepartmentORM(employee_id=employee.id, department_id=department.id))
    if role is not None:
        db.add(UserAccountORM(email=employee.email, role=role.value, employee_id=employee.id))
    await db.flush()
    return employee


async def add_membership(db: AsyncSession, employee: EmployeeORM, department: DepartmentORM) -> None:
    db.add(EmployeeDepartmentORM(employee_id=employee.id, department_id=department.id))
    await db.flush()


async def account_for(db: AsyncSession, employee_id: UUID) -> UserAccountORM | None:
    result = await db.execute(
        select(UserAccountORM)
        .where(UserAccountORM.employee_id == employee_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def count_rows(db: AsyncSession, model, **criteria) -> int:
    query = select(func.count()).select_from(model)
    for name, value in criteria.items():
        query = query.where(getattr(model, name) == value)
    result = await db.execute(query)
    return result.scalar_one()


def session_for(account: UserAccountORM) -> SessionContext:
    return SessionContext(account_id=account.id, role=account.role, employee_id=account.employee_id)


@dataclass
class Org:
    """Handles on the seeded organization."""

    admin_account: UserAccountORM
    engineering: DepartmentORM
    sales: DepartmentORM
    support: DepartmentORM
    mallory: EmployeeORM
    oscar: EmployeeORM
    dave: EmployeeORM
    erin: EmployeeORM
    frank: EmployeeORM
    nina: EmployeeORM
    accounts: dict[str, UserAccountORM] = field(default_factory=dict)

    @property
    def admin(self) -> SessionContext:
        return session_for(self.admin_account)

    def ctx(self, name: str) -> SessionContext:
        """Session context of a seeded employee's account."""
        return session_for(self.accounts[name])

    @property
    def employees(self) -> list[EmployeeORM]:
        return [self.mallory, self.oscar, self.dave, self.erin, self.frank, self.nina]


@pytest.fixture
async def org(db) -> Org:
    admin_account = UserAccountORM(email=f"hradmin@{EMAIL_DOMAIN}", role=UserRole.HRADMIN.value)
    db.add(admin_account)
    await db.flush()

    mallory = await add_employee(db, "Mallory", "Manager", role=UserRole.MANAGER)
    oscar = await add_employee(db, "Oscar", "Owner", role=UserRole.MANAGER)

    engineering = await add_department(db, "Engineering", manager=mallory)
    sales = await add_department(db, "Sales", manager=oscar)
    support = await add_department(db, "Support")

    dave = await add_employee(db, "Dave", "Direct", manager=mallory)
    erin = await add_employee(db, "Erin", "Engineer", departments=(engineering,))
    frank = await add_employee(db, "Frank", "Field", manager=oscar, departments=(sales,))
    nina = await add_employee(db, "Nina", "Noaccount", departments=(support,), role=None)

    await db.commit()

    accounts = {}
    for name, employee in (
        ("mallory", mallory),
        ("oscar", oscar),
        ("dave", dave),
        ("erin", erin),
        ("frank", frank),
    ):
        accounts[name] = await account_for(db, employee.id)

    return Org(
        admin_account=admin_account,
        engineering=engineering,
        sales=sales,
        support=support,
        mallory=mallory,
        oscar=oscar,
        dave=dave,
        erin=erin,
        frank=frank,
        nina=nina,
        accounts=accounts,
    )
