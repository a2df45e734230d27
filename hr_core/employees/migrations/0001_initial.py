import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_by", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(db_index=True)),
                ("modified_by", models.CharField(max_length=255)),
                ("modified_at", models.DateTimeField()),
                ("employee_code", models.CharField(max_length=32, unique=True)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("job_title", models.CharField(blank=True, max_length=128)),
                ("department", models.CharField(blank=True, db_index=True, max_length=128)),
                ("salary", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("hire_date", models.DateField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("ACTIVE", "Active"), ("INACTIVE", "Inactive"), ("TERMINATED", "Terminated")],
                        db_index=True,
                        default="ACTIVE",
                        max_length=16,
                    ),
                ),
                ("version", models.PositiveIntegerField(default=0)),
                (
                    "supervisor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="direct_reports",
                        to="employees.employee",
                    ),
                ),
            ],
            options={
                "db_table": "employees_employee",
            },
        ),
        migrations.AddIndex(
            model_name="employee",
            index=models.Index(fields=["last_name", "first_name"], name="employee_name_idx"),
        ),
        migrations.AddIndex(
            model_name="employee",
            index=models.Index(fields=["supervisor", "status"], name="employee_supervisor_status_idx"),
        ),
    ]
