# hr_core/common/permissions.py
from __future__ import annotations

from typing import Set

from rest_framework.permissions import SAFE_METHODS, BasePermission

# Group/role names (Django auth Group names)
ROLE_ADMIN = "ADMIN"
ROLE_HR = "HR"
ROLE_MANAGER = "MANAGER"
ROLE_READONLY = "READONLY"

ALL_ROLES = {ROLE_ADMIN, ROLE_HR, ROLE_MANAGER, ROLE_READONLY}


def user_roles(user) -> Set[str]:
    """
    Resolve roles from Django groups (superuser counts as ADMIN).
    Authenticated users without any group are READONLY.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if not roles:
        roles.add(ROLE_READONLY)

    return roles


class BaseRolePermission(BasePermission):
    """
    Role-based access control keyed by ViewSet action.

    - ADMIN bypass.
    - Unknown SAFE actions fall back to list/retrieve.
    - Unknown unsafe actions are denied.
    """
    message = "You do not have permission to perform this action."

    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = user_roles(user)
        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return bool(roles & allowed)

        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class EmployeePermission(BaseRolePermission):
    """Permissions for employee records"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "direct_reports": ALL_ROLES,
        "reporting_chain": ALL_ROLES,
        "create": {ROLE_ADMIN, ROLE_HR},
        "partial_update": {ROLE_ADMIN, ROLE_HR},
        "set_status": {ROLE_ADMIN, ROLE_HR, ROLE_MANAGER},
        "destroy": {ROLE_ADMIN, ROLE_HR},
    }


class RevisionPermission(BaseRolePermission):
    """History is readable by HR/ADMIN/MANAGER only; it is never writable."""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_HR, ROLE_MANAGER},
        "retrieve": {ROLE_ADMIN, ROLE_HR, ROLE_MANAGER},
        "latest": {ROLE_ADMIN, ROLE_HR, ROLE_MANAGER},
    }
