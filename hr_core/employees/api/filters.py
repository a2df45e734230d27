# hr_core/employees/api/filters.py
from __future__ import annotations

import django_filters
from rest_framework.exceptions import ValidationError

from hr_core.employees.models import Employee, EmployeeStatus
from hr_core.employees.selectors import EmployeeFilters


class EmployeeSearchFilterSet(django_filters.FilterSet):
    """
    Query-string contract for employee search. Only parses/validates; the
    actual querying is done by selectors.search_employees.
    """
    first_name = django_filters.CharFilter(field_name="first_name", lookup_expr="icontains")
    last_name = django_filters.CharFilter(field_name="last_name", lookup_expr="icontains")
    department = django_filters.CharFilter(field_name="department", lookup_expr="exact")
    status = django_filters.ChoiceFilter(field_name="status", choices=EmployeeStatus.choices)

    class Meta:
        model = Employee
        fields = ["first_name", "last_name", "department", "status"]


def filters_from_params(params) -> EmployeeFilters:
    fs = EmployeeSearchFilterSet(data=params, queryset=Employee.objects.none())
    if not fs.is_valid():
        raise ValidationError(fs.errors)

    data = fs.form.cleaned_data
    return EmployeeFilters(
        first_name_contains=data.get("first_name") or None,
        last_name_contains=data.get("last_name") or None,
        department_equals=data.get("department") or None,
        status_equals=data.get("status") or None,
    )
