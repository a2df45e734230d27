import pytest

from hr_core.common.errors import NotFound
from hr_core.employees.models import EmployeeStatus
from hr_core.employees.selectors import (
    EmployeeFilters,
    InvalidPageRequest,
    PageRequest,
    SortDirection,
    SortKey,
    get_employee,
    list_direct_reports,
    search_employees,
)
from hr_core.employees.services import EmployeeService

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff(ctx, employee_factory):
    people = [
        employee_factory(first_name="Alice", last_name="Smith", department="Engineering"),
        employee_factory(first_name="Bob", last_name="Smithers", department="Engineering"),
        employee_factory(first_name="Carol", last_name="Jones", department="Sales"),
        employee_factory(first_name="Alina", last_name="Adams", department="Sales"),
        employee_factory(first_name="Dan", last_name="Brown", department="Engineering"),
    ]
    EmployeeService.set_status(context=ctx, employee_id=people[1].id, status=EmployeeStatus.INACTIVE)
    return people


def test_no_filters_returns_everyone(staff):
    page = search_employees()
    assert page.total == 5
    assert [e.last_name for e in page.items] == ["Adams", "Brown", "Jones", "Smith", "Smithers"]


def test_filters_are_anded(staff):
    page = search_employees(
        filters=EmployeeFilters(last_name_contains="smith", department_equals="Engineering", status_equals="ACTIVE")
    )
    assert [e.first_name for e in page.items] == ["Alice"]


def test_first_name_contains_is_case_insensitive(staff):
    page = search_employees(filters=EmployeeFilters(first_name_contains="AL"))
    assert sorted(e.first_name for e in page.items) == ["Alice", "Alina"]


def test_blank_filters_impose_no_constraint(staff):
    page = search_employees(filters=EmployeeFilters(first_name_contains="  ", department_equals=""))
    assert page.total == 5


def test_paging_is_zero_based_and_stable(staff):
    req = PageRequest(size=2, index=0, sort=SortKey.DEPARTMENT, direction=SortDirection.ASC)
    first = search_employees(page=req)
    second = search_employees(page=PageRequest(size=2, index=1, sort=SortKey.DEPARTMENT))
    third = search_employees(page=PageRequest(size=2, index=2, sort=SortKey.DEPARTMENT))

    assert first.pages == 3
    assert first.has_next and not first.has_previous
    assert not third.has_next

    ids = [e.id for p in (first, second, third) for e in p.items]
    assert len(ids) == len(set(ids)) == 5
    assert ids == [e.id for e in search_employees(page=PageRequest(size=5, sort=SortKey.DEPARTMENT)).items]


def test_descending_sort(staff):
    page = search_employees(page=PageRequest(size=10, sort=SortKey.FIRST_NAME, direction=SortDirection.DESC))
    assert [e.first_name for e in page.items] == ["Dan", "Carol", "Bob", "Alina", "Alice"]


def test_page_past_the_end_is_empty(staff):
    page = search_employees(page=PageRequest(size=10, index=3))
    assert page.items == []
    assert page.total == 5


@pytest.mark.parametrize("req", [PageRequest(size=0), PageRequest(index=-1), PageRequest(sort="nickname")])
def test_invalid_page_requests(req):
    with pytest.raises(InvalidPageRequest):
        search_employees(page=req)


def test_page_size_is_capped(settings, staff):
    settings.HR_CORE = {**settings.HR_CORE, "SEARCH_MAX_PAGE_SIZE": 2}
    page = search_employees(page=PageRequest(size=50))
    assert page.size == 2
    assert len(page.items) == 2


def test_get_employee_and_direct_reports(employee_factory):
    boss = employee_factory(last_name="Boss")
    r1 = employee_factory(last_name="Zed", supervisor_id=boss.id)
    r2 = employee_factory(last_name="Abe", supervisor_id=boss.id)

    assert get_employee(employee_id=str(boss.id)) == boss
    assert list(list_direct_reports(employee_id=boss.id)) == [r2, r1]


def test_get_employee_malformed_id_is_not_found(db):
    with pytest.raises(NotFound):
        get_employee(employee_id="not-a-uuid")
