# hr_core/employees/admin.py
from django.contrib import admin

from hr_core.employees.models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    """
    Browse-only in admin: writes must go through EmployeeService so that
    every change carries a version bump and a revision.
    """
    list_display = (
        "employee_code",
        "last_name",
        "first_name",
        "email",
        "department",
        "status",
        "supervisor",
        "version",
        "modified_at",
    )
    list_filter = ("status", "department")
    search_fields = ("employee_code", "first_name", "last_name", "email")
    ordering = ("last_name", "first_name")
    raw_id_fields = ("supervisor",)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
