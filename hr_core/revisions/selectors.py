# hr_core/revisions/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from hr_core.revisions.models import EmployeeRevision


def list_revisions(*, employee_id: UUID) -> QuerySet[EmployeeRevision]:
    return EmployeeRevision.objects.filter(employee_id=employee_id).order_by("revision_number")


def get_revision(*, employee_id: UUID, revision_number: int) -> EmployeeRevision | None:
    return EmployeeRevision.objects.filter(
        employee_id=employee_id,
        revision_number=revision_number,
    ).first()


def last_revision(*, employee_id: UUID) -> EmployeeRevision | None:
    return EmployeeRevision.objects.filter(employee_id=employee_id).order_by("-revision_number").first()


def list_revisions_by_actor(*, actor_id: str) -> QuerySet[EmployeeRevision]:
    """
    Everything one actor changed, newest first.
    """
    return EmployeeRevision.objects.filter(actor_id=actor_id).order_by("-revision_number")
