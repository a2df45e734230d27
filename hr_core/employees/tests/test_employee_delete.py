import uuid

import pytest

from hr_core.common.errors import CycleDetected, DependentsExist, NotFound, VersionConflict
from hr_core.employees.models import Employee, EmployeeStatus
from hr_core.employees.services import EmployeeService
from hr_core.revisions.models import OperationKind, RevisionKind
from hr_core.revisions.selectors import last_revision, list_revisions

pytestmark = pytest.mark.django_db


def test_full_lifecycle_with_hierarchy_guards(ctx):
    e1 = EmployeeService.create(
        context=ctx, employee_code="E001", first_name="Eve", last_name="One", email="e1@x.com"
    )
    assert e1.version == 0
    assert list_revisions(employee_id=e1.id).count() == 1

    e1 = EmployeeService.update(context=ctx, employee_id=e1.id, expected_version=0, changes={"job_title": "Lead"})
    assert e1.version == 1
    assert list_revisions(employee_id=e1.id).count() == 2

    with pytest.raises(VersionConflict):
        EmployeeService.update(context=ctx, employee_id=e1.id, expected_version=0, changes={"job_title": "Boss"})
    e1.refresh_from_db()
    assert e1.version == 1
    assert list_revisions(employee_id=e1.id).count() == 2

    e2 = EmployeeService.create(
        context=ctx,
        employee_code="E002",
        first_name="Ed",
        last_name="Two",
        email="e2@x.com",
        supervisor_id=e1.id,
    )
    with pytest.raises(CycleDetected):
        EmployeeService.update(context=ctx, employee_id=e1.id, expected_version=1, changes={"supervisor_id": e2.id})

    with pytest.raises(DependentsExist) as exc:
        EmployeeService.delete(context=ctx, employee_id=e1.id)
    assert exc.value.count == 1

    EmployeeService.set_status(context=ctx, employee_id=e2.id, status=EmployeeStatus.INACTIVE)
    EmployeeService.delete(context=ctx, employee_id=e1.id)

    assert not Employee.objects.filter(pk=e1.id).exists()
    revs = list(list_revisions(employee_id=e1.id))
    assert [r.kind for r in revs] == [RevisionKind.CREATE, RevisionKind.UPDATE, RevisionKind.DELETE]
    assert revs[-1].entity_version == 2
    assert revs[-1].snapshot["job_title"] == "Lead"
    assert revs[-1].changed_fields == []


def test_delete_detaches_non_active_dependents_with_their_own_revision(ctx, employee_factory):
    boss = employee_factory()
    report = employee_factory(supervisor_id=boss.id)
    EmployeeService.set_status(context=ctx, employee_id=report.id, status=EmployeeStatus.TERMINATED)

    EmployeeService.delete(context=ctx, employee_id=boss.id)

    report.refresh_from_db()
    assert report.supervisor_id is None
    assert report.version == 2

    rev = last_revision(employee_id=report.id)
    assert rev.kind == RevisionKind.UPDATE
    assert rev.operation == OperationKind.DETACH
    assert rev.changed_fields == ["supervisor_id"]

    boss_rev = last_revision(employee_id=boss.id)
    assert boss_rev.operation == OperationKind.DELETE
    assert boss_rev.committed_at == rev.committed_at
    assert rev.revision_number < boss_rev.revision_number


def test_delete_unknown_is_not_found(ctx):
    with pytest.raises(NotFound):
        EmployeeService.delete(context=ctx, employee_id=uuid.uuid4())


def test_delete_twice_is_not_found_and_history_survives(ctx, employee_factory):
    e = employee_factory()
    EmployeeService.delete(context=ctx, employee_id=e.id)

    with pytest.raises(NotFound):
        EmployeeService.delete(context=ctx, employee_id=e.id)

    assert list_revisions(employee_id=e.id).count() == 2


def test_delete_with_stale_version_conflicts(ctx, employee_factory):
    e = employee_factory()
    EmployeeService.update(context=ctx, employee_id=e.id, expected_version=0, changes={"phone": "555"})

    with pytest.raises(VersionConflict):
        EmployeeService.delete(context=ctx, employee_id=e.id, expected_version=0)

    assert Employee.objects.filter(pk=e.id).exists()


def test_deleted_business_key_can_be_reused(ctx, employee_factory):
    old = employee_factory(employee_code="E777", email="reuse@example.com")
    EmployeeService.delete(context=ctx, employee_id=old.id)

    new = employee_factory(employee_code="E777", email="reuse@example.com")

    assert new.id != old.id
    assert list_revisions(employee_id=old.id).count() == 2
    assert list_revisions(employee_id=new.id).count() == 1
