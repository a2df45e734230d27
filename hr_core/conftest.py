# hr_core/conftest.py
import itertools

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from hr_core.revisions.context import RevisionContext

_codes = itertools.count(1)


@pytest.fixture
def ctx():
    return RevisionContext(actor_id="hr.tester", actor_role="HR", origin_address="10.0.0.1")


@pytest.fixture
def employee_factory(db, ctx):
    """
    Creates employees through EmployeeService so each one starts with a
    CREATE revision at version 0.
    """
    from hr_core.employees.services import EmployeeService

    def make(**overrides):
        n = next(_codes)
        data = {
            "employee_code": f"E{n:04d}",
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email": f"employee{n}@example.com",
            "department": "Engineering",
        }
        data.update(overrides)
        context = data.pop("context", ctx)
        return EmployeeService.create(context=context, **data)

    return make


def _user_with_role(username: str, role: str | None):
    User = get_user_model()
    user = User.objects.create_user(username=username, password="testpass", is_active=True)
    if role:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


@pytest.fixture
def user(db):
    """HR user; may create, update and delete employees."""
    return _user_with_role("hruser", "HR")


@pytest.fixture
def readonly_user(db):
    return _user_with_role("viewer", None)


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def readonly_client(readonly_user):
    c = APIClient()
    c.force_authenticate(user=readonly_user)
    return c
