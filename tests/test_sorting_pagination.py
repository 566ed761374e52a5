"""Filter, sort and paging behavior of the list operations."""

import pytest

from hr_api.access.paging import MAX_OFFSET, MAX_PAGE_SIZE, clamp_page, max_page
from hr_api.models.domain.roles import EmployeeStatus
from hr_api.models.dto.common import SortDirection
from hr_api.models.dto.department import DepartmentSort, DepartmentSortField
from hr_api.models.dto.employee import EmployeeFilters, EmployeeSort, EmployeeSortField


def names(listing) -> list[str]:
    return [item.first_name for item in listing.items]


class TestClampPage:
    """Server-side paging bounds."""

    def test_defaults(self) -> None:
        page = clamp_page(None, None)
        assert (page.page, page.page_size) == (1, 50)

    @pytest.mark.parametrize("requested", [0, -3])
    def test_page_below_one_becomes_one(self, requested: int) -> None:
        assert clamp_page(requested, 10).page == 1

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(0, 1), (-5, 1), (1, 1), (200, 200), (201, MAX_PAGE_SIZE), (10_000, MAX_PAGE_SIZE)],
    )
    def test_page_size_is_clamped(self, requested: int, expected: int) -> None:
        assert clamp_page(1, requested).page_size == expected

    def test_offset(self) -> None:
        page = clamp_page(3, 25)
        assert (page.offset, page.limit) == (50, 25)

    @pytest.mark.parametrize("page_size", [1, 10, MAX_PAGE_SIZE])
    def test_huge_page_is_capped(self, page_size: int) -> None:
        page = clamp_page(10**20, page_size)
        assert page.page == max_page(page_size)
        assert page.offset <= MAX_OFFSET
        assert page.offset + page.limit < 2**63


class TestEmployeeFilters:
    """Filter semantics on the admin (unrestricted) scope."""

    async def test_text_filter_is_case_sensitive_substring(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, EmployeeFilters(first_name="Er"))
        assert names(result) == ["Erin"]

        result = await employee_service.list_employees(org.admin, EmployeeFilters(first_name="er"))
        assert result.total == 0

    async def test_like_wildcards_are_literal(self, employee_service, org) -> None:
        for pattern in ("%", "_", "M%r"):
            result = await employee_service.list_employees(org.admin, EmployeeFilters(last_name=pattern))
            assert result.total == 0

    async def test_email_filter(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, EmployeeFilters(email="frank."))
        assert names(result) == ["Frank"]

    async def test_filters_combine_with_and(self, employee_service, org) -> None:
        filters = EmployeeFilters(last_name="er", first_name="O")
        result = await employee_service.list_employees(org.admin, filters)
        assert names(result) == ["Oscar"]

    async def test_department_filter_matches_any_membership(self, employee_service, org) -> None:
        filters = EmployeeFilters(department_ids=[org.sales.id, org.support.id])
        result = await employee_service.list_employees(org.admin, filters)
        assert names(result) == ["Frank", "Nina"]

    async def test_manager_filter_includes_department_members(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, EmployeeFilters(manager_id=org.mallory.id))
        assert names(result) == ["Dave", "Erin"]

    async def test_status_filter_accepts_a_set(self, employee_service, org) -> None:
        await employee_service.deactivate_employee(org.admin, org.nina.id)

        inactive = await employee_service.list_employees(
            org.admin, EmployeeFilters(status=[EmployeeStatus.INACTIVE])
        )
        assert names(inactive) == ["Nina"]

        both = await employee_service.list_employees(
            org.admin, EmployeeFilters(status=[EmployeeStatus.ACTIVE, EmployeeStatus.INACTIVE])
        )
        assert both.total == 6


class TestEmployeeSorting:
    """Ordering, including the computed sort fields."""

    async def test_default_order_is_last_then_first_name(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin)
        assert names(result) == ["Dave", "Erin", "Frank", "Mallory", "Nina", "Oscar"]

    async def test_first_name_descending(self, employee_service, org) -> None:
        sort = EmployeeSort(field=EmployeeSortField.FIRST_NAME, direction=SortDirection.DESC)
        result = await employee_service.list_employees(org.admin, sort=sort)
        assert names(result) == ["Oscar", "Nina", "Mallory", "Frank", "Erin", "Dave"]

    async def test_manager_sort_puts_unmanaged_last(self, employee_service, org) -> None:
        ascending = await employee_service.list_employees(
            org.admin, sort=EmployeeSort(field=EmployeeSortField.MANAGER)
        )
        assert names(ascending) == ["Dave", "Frank", "Erin", "Mallory", "Nina", "Oscar"]

        descending = await employee_service.list_employees(
            org.admin,
            sort=EmployeeSort(field=EmployeeSortField.MANAGER, direction=SortDirection.DESC),
        )
        assert names(descending) == ["Frank", "Dave", "Erin", "Mallory", "Nina", "Oscar"]

    async def test_report_count_sort(self, employee_service, org) -> None:
        sort = EmployeeSort(field=EmployeeSortField.REPORTS, direction=SortDirection.DESC)
        result = await employee_service.list_employees(org.admin, sort=sort)
        assert names(result) == ["Mallory", "Oscar", "Dave", "Erin", "Frank", "Nina"]
        assert [item.report_count for item in result.items] == [1, 1, 0, 0, 0, 0]

    async def test_department_count_sort(self, employee_service, org) -> None:
        sort = EmployeeSort(field=EmployeeSortField.DEPARTMENTS, direction=SortDirection.DESC)
        result = await employee_service.list_employees(org.admin, sort=sort)
        assert names(result) == ["Erin", "Frank", "Nina", "Dave", "Mallory", "Oscar"]
        assert [item.department_count for item in result.items] == [1, 1, 1, 0, 0, 0]

    async def test_list_items_embed_manager(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, EmployeeFilters(first_name="Dave"))
        assert result.items[0].manager.last_name == "Manager"


class TestEmployeePaging:
    """Paging is deterministic and complete."""

    @pytest.mark.parametrize("field", list(EmployeeSortField))
    @pytest.mark.parametrize("page_size", [1, 2, 4])
    async def test_pages_reconstruct_full_listing(
        self, employee_service, org, field: EmployeeSortField, page_size: int
    ) -> None:
        sort = EmployeeSort(field=field)
        full = await employee_service.list_employees(org.admin, sort=sort, page_size=MAX_PAGE_SIZE)

        collected = []
        page = 1
        while len(collected) < full.total:
            chunk = await employee_service.list_employees(org.admin, sort=sort, page=page, page_size=page_size)
            assert chunk.total == full.total
            collected.extend(item.id for item in chunk.items)
            page += 1

        assert collected == [item.id for item in full.items]
        assert len(set(collected)) == full.total

    async def test_page_beyond_end_is_empty(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, page=5, page_size=2)
        assert result.items == []
        assert result.total == 6
        assert result.page == 5

    async def test_huge_page_is_empty(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, page=10**20, page_size=10)
        assert result.items == []
        assert result.total == 6
        assert result.page == max_page(10)

    async def test_huge_department_page_is_empty(self, department_service, org) -> None:
        result = await department_service.list_departments(org.admin, page=10**20, page_size=10)
        assert result.items == []
        assert result.total == 3

    async def test_response_reports_clamped_values(self, employee_service, org) -> None:
        result = await employee_service.list_employees(org.admin, page=0, page_size=5000)
        assert (result.page, result.page_size) == (1, MAX_PAGE_SIZE)


class TestDepartmentSorting:
    """Department ordering and counts."""

    async def test_manager_sort(self, department_service, org) -> None:
        ascending = await department_service.list_departments(
            org.admin, sort=DepartmentSort(field=DepartmentSortField.MANAGER)
        )
        assert [d.name for d in ascending.items] == ["Engineering", "Sales", "Support"]

        descending = await department_service.list_departments(
            org.admin,
            sort=DepartmentSort(field=DepartmentSortField.MANAGER, direction=SortDirection.DESC),
        )
        assert [d.name for d in descending.items] == ["Sales", "Engineering", "Support"]

    async def test_name_descending(self, department_service, org) -> None:
        sort = DepartmentSort(field=DepartmentSortField.NAME, direction=SortDirection.DESC)
        result = await department_service.list_departments(org.admin, sort=sort)
        assert [d.name for d in result.items] == ["Support", "Sales", "Engineering"]

    async def test_items_carry_member_count(self, department_service, org) -> None:
        result = await department_service.list_departments(org.admin)
        assert [d.employee_count for d in result.items] == [1, 1, 1]

    async def test_department_paging(self, department_service, org) -> None:
        first = await department_service.list_departments(org.admin, page=1, page_size=2)
        second = await department_service.list_departments(org.admin, page=2, page_size=2)
        assert first.total == second.total == 3
        assert [d.name for d in first.items + second.items] == ["Engineering", "Sales", "Support"]
