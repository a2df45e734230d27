# hr_core/revisions/apps.py
from django.apps import AppConfig


class RevisionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hr_core.revisions"
