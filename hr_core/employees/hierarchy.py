# hr_core/employees/hierarchy.py
from __future__ import annotations

from typing import Iterator, Optional
from uuid import UUID

from hr_core.common.db import as_uuid
from hr_core.common.errors import IntegrityViolation, NotFound
from hr_core.employees.models import Employee, EmployeeStatus


def _supervisor_of(employee_id: UUID, *, lock: bool) -> tuple[bool, Optional[UUID]]:
    qs = Employee.objects.filter(pk=employee_id)
    if lock:
        qs = qs.select_for_update()
    rows = list(qs.values_list("supervisor_id", flat=True)[:1])
    if not rows:
        return False, None
    return True, rows[0]


def _walk_up(start_id: UUID, *, lock: bool) -> Iterator[UUID]:
    """
    Yields start_id and then each supervisor above it, root last.

    The number of steps is bounded by the number of employees; a longer walk
    can only mean the existing graph already contains a cycle.
    """
    bound = Employee.objects.count()
    current: Optional[UUID] = start_id
    steps = 0

    while current is not None:
        steps += 1
        if steps > bound:
            raise IntegrityViolation(
                f"Supervision chain starting at {start_id} exceeds {bound} steps.",
                start_id=str(start_id),
            )

        exists, supervisor_id = _supervisor_of(current, lock=lock)
        if not exists:
            return
        yield current
        current = supervisor_id


def would_create_cycle(*, employee_id, proposed_supervisor_id, lock: bool = False) -> bool:
    """
    True if making proposed_supervisor_id the supervisor of employee_id would
    let employee_id (transitively) supervise itself.

    With lock=True every row on the walked chain is locked (select_for_update)
    until the surrounding transaction ends.
    """
    employee_id = as_uuid(employee_id)
    proposed = as_uuid(proposed_supervisor_id)

    if proposed is None:
        return False
    if proposed == employee_id:
        return True

    for ancestor_id in _walk_up(proposed, lock=lock):
        if ancestor_id == employee_id:
            return True
    return False


def active_dependent_count(*, employee_id) -> int:
    return Employee.objects.filter(
        supervisor_id=as_uuid(employee_id),
        status=EmployeeStatus.ACTIVE,
    ).count()


def reporting_chain(*, employee_id) -> list[UUID]:
    """
    Supervisors above employee_id, nearest first.
    """
    employee_id = as_uuid(employee_id)
    if not Employee.objects.filter(pk=employee_id).exists():
        raise NotFound()

    chain = list(_walk_up(employee_id, lock=False))
    return chain[1:]
