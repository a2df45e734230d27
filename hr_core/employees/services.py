# hr_core/employees/services.py
from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from hr_core.common.db import as_uuid, translate_storage_errors
from hr_core.common.errors import (
    CycleDetected,
    DependentsExist,
    DuplicateKey,
    InvalidChange,
    NotFound,
    VersionConflict,
)
from hr_core.employees.hierarchy import active_dependent_count, would_create_cycle
from hr_core.employees.models import Employee, EmployeeStatus
from hr_core.employees.snapshot import employee_snapshot
from hr_core.revisions.context import RevisionContext, RevisionMetadata
from hr_core.revisions.models import OperationKind, RevisionKind
from hr_core.revisions.services import RevisionLog

MUTABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "job_title",
        "department",
        "salary",
        "hire_date",
        "supervisor_id",
    }
)

# Never writable through update(); status goes through set_status().
PROTECTED_FIELDS = frozenset(
    {
        "id",
        "employee_code",
        "status",
        "version",
        "created_by",
        "created_at",
        "modified_by",
        "modified_at",
    }
)


def _normalize_email(value: Any) -> str:
    return (str(value or "")).strip().lower()


def _clean_value(name: str, value: Any) -> Any:
    """
    Coerce and validate one attribute with the model field (type, length,
    email format, decimal places). Field errors surface as InvalidChange.
    """
    field = Employee._meta.get_field(name)
    try:
        return field.clean(value, None)
    except DjangoValidationError as e:
        raise InvalidChange(f"Invalid value for {name}.", field=name, errors=e.messages)


def _lock(employee_id) -> Employee:
    try:
        return Employee.objects.select_for_update().get(pk=as_uuid(employee_id))
    except Employee.DoesNotExist:
        raise NotFound(f"Employee {employee_id} not found.")


def _lock_supervisor(supervisor_id) -> Employee:
    try:
        return Employee.objects.select_for_update().get(pk=as_uuid(supervisor_id))
    except (Employee.DoesNotExist, NotFound):
        raise NotFound(f"Supervisor {supervisor_id} not found.", field="supervisor_id")


def _assert_unique(*, employee_code: str | None = None, email: str | None = None, exclude_id: UUID | None = None) -> None:
    qs = Employee.objects.all()
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)

    if employee_code is not None and qs.filter(employee_code=employee_code).exists():
        raise DuplicateKey(field="employee_code", value=employee_code)
    if email is not None and qs.filter(email=email).exists():
        raise DuplicateKey(field="email", value=email)


def _expected_version(employee: Employee, expected_version: Optional[int]) -> int:
    """
    None means "whatever is stored now" (the row is already locked).
    """
    if expected_version is None:
        return employee.version
    try:
        expected = int(expected_version)
    except (TypeError, ValueError):
        raise InvalidChange("expected_version must be an integer.", expected_version=expected_version)
    if expected != employee.version:
        raise VersionConflict(expected=expected, actual=employee.version)
    return expected


def _commit_change(
    employee: Employee,
    *,
    expected_version: int,
    fields: Mapping[str, Any],
    metadata: RevisionMetadata,
) -> Employee:
    """
    Compare-and-swap write of `fields` plus an UPDATE revision.

    The WHERE version = expected guard holds even where select_for_update is
    a no-op (SQLite).
    """
    values = dict(fields)
    values.update(
        version=expected_version + 1,
        modified_by=metadata.actor_id,
        modified_at=metadata.committed_at,
    )

    try:
        with transaction.atomic():
            updated = Employee.objects.filter(pk=employee.pk, version=expected_version).update(**values)
    except IntegrityError:
        _assert_unique(email=values.get("email"), exclude_id=employee.pk)
        raise

    if updated != 1:
        current = Employee.objects.filter(pk=employee.pk).values_list("version", flat=True).first()
        if current is None:
            raise NotFound(f"Employee {employee.pk} not found.")
        raise VersionConflict(expected=expected_version, actual=current)

    employee.refresh_from_db()
    RevisionLog.append(
        employee_id=employee.pk,
        kind=RevisionKind.UPDATE,
        entity_version=employee.version,
        snapshot=employee_snapshot(employee),
        metadata=metadata,
    )
    return employee


class EmployeeService:
    """
    Write-model operations for employees.

    Every method is one transaction: the current-state write and its revision
    append commit together or not at all. The caller's RevisionContext is
    passed explicitly; nothing is read from request globals.
    """

    # ----------------------------
    # Create
    # ----------------------------
    @staticmethod
    @translate_storage_errors
    @transaction.atomic
    def create(
        *,
        context: RevisionContext,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        phone: str = "",
        job_title: str = "",
        department: str = "",
        salary=None,
        hire_date=None,
        supervisor_id: UUID | str | None = None,
    ) -> Employee:
        employee_code = (employee_code or "").strip()
        email = _normalize_email(email)
        if not employee_code:
            raise InvalidChange("employee_code is required.", field="employee_code")
        if not email:
            raise InvalidChange("email is required.", field="email")
        for name, value in (("first_name", first_name), ("last_name", last_name)):
            if not (value or "").strip():
                raise InvalidChange(f"{name} cannot be blank.", field=name)

        values = {
            name: _clean_value(name, value)
            for name, value in (
                ("employee_code", employee_code),
                ("first_name", first_name),
                ("last_name", last_name),
                ("email", email),
                ("phone", phone or ""),
                ("job_title", job_title or ""),
                ("department", department or ""),
                ("salary", salary),
                ("hire_date", hire_date),
            )
        }

        _assert_unique(employee_code=employee_code, email=email)

        supervisor = _lock_supervisor(supervisor_id) if supervisor_id else None

        meta = context.metadata(OperationKind.CREATE)
        employee = Employee(
            **values,
            status=EmployeeStatus.ACTIVE,
            supervisor=supervisor,
            version=0,
            created_by=meta.actor_id,
            created_at=meta.committed_at,
            modified_by=meta.actor_id,
            modified_at=meta.committed_at,
        )

        try:
            with transaction.atomic():
                employee.save(force_insert=True)
        except IntegrityError:
            # lost a race against a concurrent insert with the same key
            _assert_unique(employee_code=employee_code, email=email)
            raise

        employee.refresh_from_db()
        RevisionLog.append(
            employee_id=employee.pk,
            kind=RevisionKind.CREATE,
            entity_version=employee.version,
            snapshot=employee_snapshot(employee),
            metadata=meta,
        )
        return employee

    # ----------------------------
    # Update (optimistic concurrency)
    # ----------------------------
    @staticmethod
    @translate_storage_errors
    @transaction.atomic
    def update(
        *,
        context: RevisionContext,
        employee_id: UUID | str,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> Employee:
        changes = dict(changes or {})
        if not changes:
            raise InvalidChange("No fields to change.")
        if "supervisor" in changes:
            changes["supervisor_id"] = changes.pop("supervisor")

        protected = sorted(set(changes) & PROTECTED_FIELDS)
        if protected:
            raise InvalidChange(f"Fields cannot be changed: {', '.join(protected)}.", fields=protected)
        unknown = sorted(set(changes) - MUTABLE_FIELDS)
        if unknown:
            raise InvalidChange(f"Unknown fields: {', '.join(unknown)}.", fields=unknown)
        if expected_version is None:
            raise InvalidChange("expected_version is required.", field="expected_version")

        employee = _lock(employee_id)
        expected = _expected_version(employee, expected_version)

        if "email" in changes:
            changes["email"] = _normalize_email(changes["email"])
            if not changes["email"]:
                raise InvalidChange("email is required.", field="email")
            if changes["email"] != employee.email:
                _assert_unique(email=changes["email"], exclude_id=employee.pk)

        for name in ("first_name", "last_name"):
            if name in changes and not (changes[name] or "").strip():
                raise InvalidChange(f"{name} cannot be blank.", field=name)

        for name in ("phone", "job_title", "department"):
            if name in changes and changes[name] is None:
                changes[name] = ""

        for name in changes:
            if name != "supervisor_id":
                changes[name] = _clean_value(name, changes[name])

        if "supervisor_id" in changes:
            changes["supervisor_id"] = as_uuid(changes["supervisor_id"]) if changes["supervisor_id"] else None

        # only fields whose value actually differs are written
        changes = {name: value for name, value in changes.items() if getattr(employee, name) != value}
        if not changes:
            raise InvalidChange("No effective change.", expected_version=expected)

        if "supervisor_id" in changes:
            new_supervisor_id = changes["supervisor_id"]

            if new_supervisor_id is not None:
                _lock_supervisor(new_supervisor_id)
                if would_create_cycle(
                    employee_id=employee.pk,
                    proposed_supervisor_id=new_supervisor_id,
                    lock=True,
                ):
                    raise CycleDetected(
                        employee_id=str(employee.pk),
                        proposed_supervisor_id=str(new_supervisor_id),
                    )

        return _commit_change(
            employee,
            expected_version=expected,
            fields=changes,
            metadata=context.metadata(OperationKind.UPDATE),
        )

    # ----------------------------
    # Status transitions
    # ----------------------------
    @staticmethod
    @translate_storage_errors
    @transaction.atomic
    def set_status(
        *,
        context: RevisionContext,
        employee_id: UUID | str,
        status: str,
        expected_version: Optional[int] = None,
    ) -> Employee:
        if status not in EmployeeStatus.values:
            raise InvalidChange(f"Unknown status {status!r}.", field="status", allowed=list(EmployeeStatus.values))

        employee = _lock(employee_id)
        expected = _expected_version(employee, expected_version)

        return _commit_change(
            employee,
            expected_version=expected,
            fields={"status": status},
            metadata=context.metadata(OperationKind.STATUS_CHANGE),
        )

    @staticmethod
    def terminate(*, context: RevisionContext, employee_id, expected_version: Optional[int] = None) -> Employee:
        return EmployeeService.set_status(
            context=context,
            employee_id=employee_id,
            status=EmployeeStatus.TERMINATED,
            expected_version=expected_version,
        )

    @staticmethod
    def reactivate(*, context: RevisionContext, employee_id, expected_version: Optional[int] = None) -> Employee:
        return EmployeeService.set_status(
            context=context,
            employee_id=employee_id,
            status=EmployeeStatus.ACTIVE,
            expected_version=expected_version,
        )

    # ----------------------------
    # Delete
    # ----------------------------
    @staticmethod
    @translate_storage_errors
    @transaction.atomic
    def delete(
        *,
        context: RevisionContext,
        employee_id: UUID | str,
        expected_version: Optional[int] = None,
    ) -> None:
        """
        Remove the current-state row and append a DELETE revision carrying the
        last snapshot. Non-active direct reports are detached first, each as
        its own UPDATE revision in this same transaction.
        """
        employee = _lock(employee_id)
        expected = _expected_version(employee, expected_version)

        active = active_dependent_count(employee_id=employee.pk)
        if active:
            raise DependentsExist(count=active)

        # re-check on locked rows: a dependent may have been reactivated meanwhile
        dependents = list(
            Employee.objects.select_for_update().filter(supervisor_id=employee.pk).order_by("id")
        )
        active = sum(1 for d in dependents if d.status == EmployeeStatus.ACTIVE)
        if active:
            raise DependentsExist(count=active)

        meta = context.metadata(OperationKind.DELETE)
        detach_meta = context.metadata(OperationKind.DETACH, committed_at=meta.committed_at)
        for dependent in dependents:
            _commit_change(
                dependent,
                expected_version=dependent.version,
                fields={"supervisor_id": None},
                metadata=detach_meta,
            )

        snapshot = employee_snapshot(employee)
        deleted, _ = Employee.objects.filter(pk=employee.pk, version=expected).delete()
        if not deleted:
            current = Employee.objects.filter(pk=employee.pk).values_list("version", flat=True).first()
            if current is None:
                raise NotFound(f"Employee {employee.pk} not found.")
            raise VersionConflict(expected=expected, actual=current)

        RevisionLog.append(
            employee_id=employee.pk,
            kind=RevisionKind.DELETE,
            entity_version=expected + 1,
            snapshot=snapshot,
            metadata=meta,
        )
