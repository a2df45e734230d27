# hr_core/employees/snapshot.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from hr_core.employees.models import Employee

SNAPSHOT_FIELDS = (
    "id",
    "employee_code",
    "first_name",
    "last_name",
    "email",
    "phone",
    "job_title",
    "department",
    "salary",
    "hire_date",
    "status",
    "supervisor_id",
    "version",
    "created_by",
    "created_at",
    "modified_by",
    "modified_at",
)


def _money(value) -> str | None:
    if value is None:
        return None
    return str(Decimal(value).quantize(Decimal("0.01")))


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def employee_snapshot(employee: Employee) -> Dict[str, Any]:
    """
    JSON-native copy of every tracked attribute.

    Field list is explicit: adding a column to Employee does not change what
    history records until it is added here.
    """
    return {
        "id": str(employee.id),
        "employee_code": employee.employee_code,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "email": employee.email,
        "phone": employee.phone,
        "job_title": employee.job_title,
        "department": employee.department,
        "salary": _money(employee.salary),
        "hire_date": _iso(employee.hire_date),
        "status": str(employee.status),
        "supervisor_id": str(employee.supervisor_id) if employee.supervisor_id else None,
        "version": employee.version,
        "created_by": employee.created_by,
        "created_at": _iso(employee.created_at),
        "modified_by": employee.modified_by,
        "modified_at": _iso(employee.modified_at),
    }
