# hr_core/employees/apps.py
from django.apps import AppConfig


class EmployeesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hr_core.employees"
