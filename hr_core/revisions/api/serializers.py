# hr_core/revisions/api/serializers.py
from rest_framework import serializers

from hr_core.revisions.models import EmployeeRevision


class EmployeeRevisionSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeRevision
        fields = [
            "revision_number",
            "employee_id",
            "kind",
            "entity_version",
            "snapshot",
            "changed_fields",
            "actor_id",
            "actor_role",
            "origin_address",
            "operation",
            "committed_at",
        ]
        read_only_fields = fields
