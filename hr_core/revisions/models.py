# hr_core/revisions/models.py
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from hr_core.common.errors import ImmutableRevisionError


class RevisionKind(models.TextChoices):
    CREATE = "CREATE", "Create"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"


class OperationKind(models.TextChoices):
    """
    The verb that triggered the revision (independent of HTTP method).
    """
    CREATE = "CREATE", "Create"
    UPDATE = "UPDATE", "Update"
    STATUS_CHANGE = "STATUS_CHANGE", "Status change"
    DETACH = "DETACH", "Supervisor detached"
    DELETE = "DELETE", "Delete"


class RevisionQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ImmutableRevisionError()

    def delete(self):
        raise ImmutableRevisionError()


class EmployeeRevision(models.Model):
    """
    Immutable record of one committed employee mutation.

    employee_id is deliberately a plain column (not a FK): the history must
    outlive the current-state row.
    """
    revision_number = models.BigAutoField(primary_key=True)

    employee_id = models.UUIDField(db_index=True)
    kind = models.CharField(max_length=16, choices=RevisionKind.choices)
    entity_version = models.PositiveIntegerField()

    snapshot = models.JSONField(encoder=DjangoJSONEncoder)
    changed_fields = models.JSONField(default=list, blank=True)

    actor_id = models.CharField(max_length=255)
    actor_role = models.CharField(max_length=64)
    origin_address = models.CharField(max_length=64)
    operation = models.CharField(max_length=32, choices=OperationKind.choices)
    committed_at = models.DateTimeField(db_index=True)

    objects = RevisionQuerySet.as_manager()

    class Meta:
        db_table = "revisions_employee_revision"
        ordering = ["revision_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee_id", "entity_version"],
                name="uq_revision_employee_version",
            ),
        ]
        indexes = [
            models.Index(fields=["employee_id", "revision_number"], name="revision_employee_rev_idx"),
            models.Index(fields=["actor_id", "committed_at"], name="revision_actor_time_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRevisionError()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRevisionError()

    def __str__(self) -> str:
        return f"#{self.revision_number} {self.kind} {self.employee_id} v{self.entity_version}"
