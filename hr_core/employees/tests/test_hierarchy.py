import pytest

from hr_core.common.errors import CycleDetected, IntegrityViolation, NotFound
from hr_core.employees.hierarchy import active_dependent_count, reporting_chain, would_create_cycle
from hr_core.employees.models import Employee, EmployeeStatus
from hr_core.employees.services import EmployeeService
from hr_core.revisions.selectors import list_revisions

pytestmark = pytest.mark.django_db


def _chain(employee_factory, n):
    """Root first; each next employee reports to the previous one."""
    out = [employee_factory()]
    for _ in range(n - 1):
        out.append(employee_factory(supervisor_id=out[-1].id))
    return out


def test_self_supervision_is_a_cycle(employee_factory):
    e = employee_factory()
    assert would_create_cycle(employee_id=e.id, proposed_supervisor_id=e.id) is True


def test_no_supervisor_is_never_a_cycle(employee_factory):
    e = employee_factory()
    assert would_create_cycle(employee_id=e.id, proposed_supervisor_id=None) is False


def test_descendant_as_supervisor_is_a_cycle(employee_factory):
    a, b, c, d = _chain(employee_factory, 4)

    assert would_create_cycle(employee_id=a.id, proposed_supervisor_id=d.id) is True
    assert would_create_cycle(employee_id=b.id, proposed_supervisor_id=c.id) is True
    assert would_create_cycle(employee_id=d.id, proposed_supervisor_id=a.id) is False


def test_update_rejects_cycle_and_keeps_state(ctx, employee_factory):
    e1 = employee_factory()
    e2 = employee_factory(supervisor_id=e1.id)

    with pytest.raises(CycleDetected):
        EmployeeService.update(context=ctx, employee_id=e1.id, expected_version=0, changes={"supervisor_id": e2.id})

    e1.refresh_from_db()
    assert e1.supervisor_id is None
    assert e1.version == 0
    assert list_revisions(employee_id=e1.id).count() == 1


def test_update_rejects_self_reference(ctx, employee_factory):
    e = employee_factory()

    with pytest.raises(CycleDetected):
        EmployeeService.update(context=ctx, employee_id=e.id, expected_version=0, changes={"supervisor_id": e.id})


def test_update_accepts_reparenting_within_forest(ctx, employee_factory):
    a, b, c = _chain(employee_factory, 3)
    other = employee_factory()

    moved = EmployeeService.update(context=ctx, employee_id=b.id, expected_version=0, changes={"supervisor_id": other.id})

    assert moved.supervisor_id == other.id
    assert reporting_chain(employee_id=c.id) == [b.id, other.id]


def test_clearing_supervisor_is_allowed(ctx, employee_factory):
    boss = employee_factory()
    e = employee_factory(supervisor_id=boss.id)

    e = EmployeeService.update(context=ctx, employee_id=e.id, expected_version=0, changes={"supervisor_id": None})

    assert e.supervisor_id is None
    assert reporting_chain(employee_id=e.id) == []


def test_walk_over_corrupted_cycle_raises_integrity_violation(employee_factory):
    a, b = _chain(employee_factory, 2)
    outsider = employee_factory()
    # bypass the service to plant a cycle a -> b -> a
    Employee.objects.filter(pk=a.id).update(supervisor_id=b.id)

    with pytest.raises(IntegrityViolation):
        would_create_cycle(employee_id=outsider.id, proposed_supervisor_id=a.id)
    with pytest.raises(IntegrityViolation):
        reporting_chain(employee_id=b.id)


def test_active_dependent_count_ignores_non_active(ctx, employee_factory):
    boss = employee_factory()
    r1 = employee_factory(supervisor_id=boss.id)
    employee_factory(supervisor_id=boss.id)
    employee_factory()

    assert active_dependent_count(employee_id=boss.id) == 2

    EmployeeService.set_status(context=ctx, employee_id=r1.id, status=EmployeeStatus.INACTIVE)
    assert active_dependent_count(employee_id=boss.id) == 1


def test_reporting_chain_nearest_first(employee_factory):
    a, b, c = _chain(employee_factory, 3)

    assert reporting_chain(employee_id=c.id) == [b.id, a.id]
    assert reporting_chain(employee_id=a.id) == []


def test_reporting_chain_unknown_employee(employee_factory):
    import uuid

    with pytest.raises(NotFound):
        reporting_chain(employee_id=uuid.uuid4())
