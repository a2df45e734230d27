# hr_core/employees/selectors.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db.models import QuerySet

from hr_core.common.db import as_uuid
from hr_core.common.errors import NotFound
from hr_core.employees.models import Employee

DEFAULT_MAX_PAGE_SIZE = 200


class InvalidPageRequest(ValueError):
    pass


class SortKey(str, enum.Enum):
    EMPLOYEE_CODE = "employee_code"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    DEPARTMENT = "department"
    HIRE_DATE = "hire_date"
    SALARY = "salary"
    CREATED_AT = "created_at"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class EmployeeFilters:
    first_name_contains: Optional[str] = None
    last_name_contains: Optional[str] = None
    department_equals: Optional[str] = None
    status_equals: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    size: int = 20
    index: int = 0
    sort: SortKey = SortKey.LAST_NAME
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class EmployeePage:
    items: list[Employee]
    total: int
    index: int
    size: int
    sort: SortKey = SortKey.LAST_NAME
    direction: SortDirection = SortDirection.ASC
    pages: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "pages", (self.total + self.size - 1) // self.size if self.total else 0)

    @property
    def has_next(self) -> bool:
        return self.index + 1 < self.pages

    @property
    def has_previous(self) -> bool:
        return self.index > 0


def _max_page_size() -> int:
    cfg = getattr(settings, "HR_CORE", {}) or {}
    return int(cfg.get("SEARCH_MAX_PAGE_SIZE") or DEFAULT_MAX_PAGE_SIZE)


def get_employee(*, employee_id: UUID | str) -> Employee:
    try:
        return Employee.objects.get(pk=as_uuid(employee_id))
    except Employee.DoesNotExist:
        raise NotFound(f"Employee {employee_id} not found.")


def filter_employees(filters: EmployeeFilters) -> QuerySet[Employee]:
    """
    AND of the optional predicates; blank values impose no constraint.
    """
    qs = Employee.objects.all()

    first = (filters.first_name_contains or "").strip()
    if first:
        qs = qs.filter(first_name__icontains=first)

    last = (filters.last_name_contains or "").strip()
    if last:
        qs = qs.filter(last_name__icontains=last)

    department = (filters.department_equals or "").strip()
    if department:
        qs = qs.filter(department=department)

    status = (filters.status_equals or "").strip()
    if status:
        qs = qs.filter(status=status)

    return qs


def search_employees(*, filters: EmployeeFilters | None = None, page: PageRequest | None = None) -> EmployeePage:
    filters = filters or EmployeeFilters()
    page = page or PageRequest()

    try:
        sort = SortKey(page.sort)
        direction = SortDirection(page.direction)
    except ValueError as e:
        raise InvalidPageRequest(str(e))

    if not isinstance(page.size, int) or page.size < 1:
        raise InvalidPageRequest("page size must be a positive integer.")
    if not isinstance(page.index, int) or page.index < 0:
        raise InvalidPageRequest("page index must be zero or greater.")

    size = min(page.size, _max_page_size())
    prefix = "-" if direction == SortDirection.DESC else ""

    # id breaks ties so a page boundary never depends on storage order
    qs = filter_employees(filters).order_by(f"{prefix}{sort.value}", f"{prefix}id")

    total = qs.count()
    offset = page.index * size
    items = list(qs[offset:offset + size])

    return EmployeePage(items=items, total=total, index=page.index, size=size, sort=sort, direction=direction)


def list_direct_reports(*, employee_id: UUID | str) -> QuerySet[Employee]:
    employee = get_employee(employee_id=employee_id)
    return Employee.objects.filter(supervisor_id=employee.pk).order_by("last_name", "first_name", "id")
