# hr_core/employees/models.py
from django.db import models

from hr_core.common.models import ProvenanceModel


class EmployeeStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    TERMINATED = "TERMINATED", "Terminated"


class Employee(ProvenanceModel):
    """
    Current state of one employee.

    History lives in revisions.EmployeeRevision; every committed change to
    this row is mirrored there by EmployeeService.
    """
    # business key, immutable after creation
    employee_code = models.CharField(max_length=32, unique=True)

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=32, blank=True)

    job_title = models.CharField(max_length=128, blank=True)
    department = models.CharField(max_length=128, blank=True, db_index=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    hire_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=EmployeeStatus.choices,
        default=EmployeeStatus.ACTIVE,
        db_index=True,
    )

    supervisor = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        related_name="direct_reports",
        null=True,
        blank=True,
    )

    version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "employees_employee"
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="employee_name_idx"),
            models.Index(fields=["supervisor", "status"], name="employee_supervisor_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.employee_code})"
