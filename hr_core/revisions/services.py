# hr_core/revisions/services.py
from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from django.db import InterfaceError, OperationalError, transaction

from hr_core.common.errors import StorageUnavailable
from hr_core.revisions.context import RevisionMetadata
from hr_core.revisions.models import EmployeeRevision, RevisionKind


# bookkeeping keys change on every commit
_UNTRACKED_KEYS = {"version", "modified_at", "modified_by"}


def _changed_fields(previous: Dict[str, Any] | None, current: Dict[str, Any], kind: str) -> list[str]:
    if kind == RevisionKind.DELETE:
        return []
    keys = set(current) - _UNTRACKED_KEYS
    if previous is None:
        return sorted(keys)
    keys |= set(previous) - _UNTRACKED_KEYS
    return sorted(k for k in keys if previous.get(k) != current.get(k))


class RevisionLog:
    """
    Append-only writer for employee history.

    append() is meant to run inside the caller's transaction.atomic block so
    that the state change and its revision commit (or roll back) together.
    """

    @staticmethod
    @transaction.atomic
    def append(
        *,
        employee_id: UUID,
        kind: str,
        entity_version: int,
        snapshot: Dict[str, Any],
        metadata: RevisionMetadata,
    ) -> int:
        try:
            previous = (
                EmployeeRevision.objects.filter(employee_id=employee_id)
                .order_by("-revision_number")
                .values_list("snapshot", flat=True)
                .first()
            )

            rev = EmployeeRevision.objects.create(
                employee_id=employee_id,
                kind=kind,
                entity_version=entity_version,
                snapshot=snapshot,
                changed_fields=_changed_fields(previous, snapshot, kind),
                actor_id=metadata.actor_id,
                actor_role=metadata.actor_role,
                origin_address=metadata.origin_address,
                operation=metadata.operation,
                committed_at=metadata.committed_at,
            )
        except (OperationalError, InterfaceError) as e:
            raise StorageUnavailable(str(e)) from e

        return rev.revision_number
