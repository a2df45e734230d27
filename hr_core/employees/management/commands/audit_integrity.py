# hr_core/employees/management/commands/audit_integrity.py

from django.core.management.base import BaseCommand, CommandError

from hr_core.common.errors import IntegrityViolation
from hr_core.employees.hierarchy import reporting_chain
from hr_core.employees.models import Employee
from hr_core.revisions.models import RevisionKind
from hr_core.revisions.selectors import last_revision


class Command(BaseCommand):
    help = (
        "Check supervision chains for cycles and that every employee's latest "
        "revision matches its stored version. Read-only."
    )

    def handle(self, *args, **options):
        problems = 0

        for employee_id, version in Employee.objects.order_by("id").values_list("id", "version"):
            try:
                reporting_chain(employee_id=employee_id)
            except IntegrityViolation as e:
                problems += 1
                self.stdout.write(self.style.ERROR(f"{employee_id}: {e.message}"))

            rev = last_revision(employee_id=employee_id)
            if rev is None:
                problems += 1
                self.stdout.write(self.style.ERROR(f"{employee_id}: no revision history"))
            elif rev.kind == RevisionKind.DELETE or rev.entity_version != version:
                problems += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"{employee_id}: stored version {version}, "
                        f"latest revision #{rev.revision_number} is {rev.kind} v{rev.entity_version}"
                    )
                )

        if problems:
            raise CommandError(f"{problems} integrity problem(s) found.")

        self.stdout.write(self.style.SUCCESS("No integrity problems found."))
