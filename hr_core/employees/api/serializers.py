# hr_core/employees/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hr_core.employees.models import Employee, EmployeeStatus


class EmployeeCreateSerializer(serializers.Serializer):
    employee_code = serializers.CharField(max_length=32)
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(max_length=254)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    job_title = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    department = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, default=None)
    hire_date = serializers.DateField(required=False, allow_null=True, default=None)
    supervisor_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class EmployeeUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PATCH). `version` may be sent here instead of
    an If-Match header.
    """
    version = serializers.IntegerField(required=False, min_value=0)

    first_name = serializers.CharField(max_length=100, required=False)
    last_name = serializers.CharField(max_length=100, required=False)
    email = serializers.EmailField(max_length=254, required=False)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    job_title = serializers.CharField(max_length=128, required=False, allow_blank=True)
    department = serializers.CharField(max_length=128, required=False, allow_blank=True)
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    hire_date = serializers.DateField(required=False, allow_null=True)
    supervisor_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if not {k for k in attrs if k != "version"}:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class EmployeeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EmployeeStatus.choices)
    version = serializers.IntegerField(required=False, min_value=0)


class EmployeeSerializer(serializers.ModelSerializer):
    supervisor_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Employee
        fields = [
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
        ]
        read_only_fields = fields


class ReportingChainSerializer(serializers.Serializer):
    employee_id = serializers.UUIDField()
    chain = serializers.ListField(child=serializers.UUIDField())
