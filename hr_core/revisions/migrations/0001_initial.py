import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EmployeeRevision",
            fields=[
                ("revision_number", models.BigAutoField(primary_key=True, serialize=False)),
                ("employee_id", models.UUIDField(db_index=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[("CREATE", "Create"), ("UPDATE", "Update"), ("DELETE", "Delete")],
                        max_length=16,
                    ),
                ),
                ("entity_version", models.PositiveIntegerField()),
                ("snapshot", models.JSONField(encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("changed_fields", models.JSONField(blank=True, default=list)),
                ("actor_id", models.CharField(max_length=255)),
                ("actor_role", models.CharField(max_length=64)),
                ("origin_address", models.CharField(max_length=64)),
                (
                    "operation",
                    models.CharField(
                        choices=[
                            ("CREATE", "Create"),
                            ("UPDATE", "Update"),
                            ("STATUS_CHANGE", "Status change"),
                            ("DETACH", "Supervisor detached"),
                            ("DELETE", "Delete"),
                        ],
                        max_length=32,
                    ),
                ),
                ("committed_at", models.DateTimeField(db_index=True)),
            ],
            options={
                "db_table": "revisions_employee_revision",
                "ordering": ["revision_number"],
            },
        ),
        migrations.AddConstraint(
            model_name="employeerevision",
            constraint=models.UniqueConstraint(
                fields=("employee_id", "entity_version"),
                name="uq_revision_employee_version",
            ),
        ),
        migrations.AddIndex(
            model_name="employeerevision",
            index=models.Index(fields=["employee_id", "revision_number"], name="revision_employee_rev_idx"),
        ),
        migrations.AddIndex(
            model_name="employeerevision",
            index=models.Index(fields=["actor_id", "committed_at"], name="revision_actor_time_idx"),
        ),
    ]
