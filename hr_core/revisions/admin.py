# hr_core/revisions/admin.py
from django.contrib import admin

from hr_core.revisions.models import EmployeeRevision


@admin.register(EmployeeRevision)
class EmployeeRevisionAdmin(admin.ModelAdmin):
    list_display = (
        "revision_number",
        "employee_id",
        "kind",
        "operation",
        "entity_version",
        "actor_id",
        "actor_role",
        "committed_at",
    )
    list_filter = ("kind", "operation", "actor_role")
    search_fields = ("employee_id", "actor_id")
    ordering = ("-revision_number",)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
