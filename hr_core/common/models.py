# hr_core/common/models.py
from __future__ import annotations

import uuid

from django.db import models


class ProvenanceModel(models.Model):
    """
    Creation/modification provenance for current-state entities.

    Stamped explicitly by the write services from the caller's revision
    context (no auto_now: the timestamp must equal the revision commit time).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    created_by = models.CharField(max_length=255)
    created_at = models.DateTimeField(db_index=True)
    modified_by = models.CharField(max_length=255)
    modified_at = models.DateTimeField()

    class Meta:
        abstract = True
