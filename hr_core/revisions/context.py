# hr_core/revisions/context.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from django.conf import settings
from django.utils import timezone

DEFAULT_ACTOR = "anonymous"
DEFAULT_ROLE = "USER"
DEFAULT_ORIGIN = "unknown"

SYSTEM_ACTOR = "system"
SYSTEM_ROLE = "SYSTEM"

HDR_ACTOR = "X-Actor-Id"
HDR_ROLE = "X-Actor-Role"
HDR_FORWARDED_FOR = "X-Forwarded-For"


@dataclass(frozen=True)
class RevisionMetadata:
    actor_id: str
    actor_role: str
    origin_address: str
    operation: str
    committed_at: datetime


@dataclass(frozen=True)
class RevisionContext:
    """
    Who is changing data, and from where.

    Passed explicitly into every write; never read from thread-locals.
    """
    actor_id: str = DEFAULT_ACTOR
    actor_role: str = DEFAULT_ROLE
    origin_address: str = DEFAULT_ORIGIN

    @classmethod
    def system(cls) -> "RevisionContext":
        return cls(actor_id=SYSTEM_ACTOR, actor_role=SYSTEM_ROLE, origin_address=DEFAULT_ORIGIN)

    def metadata(self, operation: str, committed_at: datetime | None = None) -> RevisionMetadata:
        return RevisionMetadata(
            actor_id=self.actor_id,
            actor_role=self.actor_role,
            origin_address=self.origin_address,
            operation=str(operation),
            committed_at=committed_at or timezone.now(),
        )


def _defaults() -> RevisionContext:
    try:
        cfg = getattr(settings, "HR_CORE", {}) or {}
        return RevisionContext(
            actor_id=cfg.get("REVISION_DEFAULT_ACTOR") or DEFAULT_ACTOR,
            actor_role=cfg.get("REVISION_DEFAULT_ROLE") or DEFAULT_ROLE,
            origin_address=cfg.get("REVISION_DEFAULT_ORIGIN") or DEFAULT_ORIGIN,
        )
    except Exception:
        return RevisionContext()


def _clean(value: Any, max_length: int) -> str | None:
    if value is None:
        return None
    v = str(value).strip()
    if not v:
        return None
    return v[:max_length]


def _get_header(request, name: str) -> str | None:
    """
    request.headers is case-insensitive; fallback to META for RequestFactory/pytest.
    """
    try:
        v = request.headers.get(name)
        if v:
            return v
    except Exception:
        pass

    meta = getattr(request, "META", None) or {}
    return meta.get("HTTP_" + name.upper().replace("-", "_"))


def _user_role(user) -> str | None:
    if getattr(user, "is_superuser", False):
        return "ADMIN"
    groups = getattr(user, "groups", None)
    if groups is not None:
        names = sorted(groups.values_list("name", flat=True))
        if names:
            return names[0]
    if getattr(user, "is_staff", False):
        return "ADMIN"
    return None


def _trust_forwarded_for() -> bool:
    cfg = getattr(settings, "HR_CORE", {}) or {}
    return bool(cfg.get("TRUST_X_FORWARDED_FOR", False))


def _origin_from_request(request) -> str | None:
    # X-Forwarded-For is client-controlled unless a trusted proxy sets it
    forwarded = _get_header(request, HDR_FORWARDED_FOR) if _trust_forwarded_for() else None
    if forwarded:
        # client, proxy1, proxy2 -> client
        return forwarded.split(",")[0]
    meta = getattr(request, "META", None) or {}
    return meta.get("REMOTE_ADDR")


def _from_request(request, base: RevisionContext) -> RevisionContext:
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        # authenticated identity is never overridden by headers
        actor = _clean(user.get_username(), 255)
        role = _clean(_user_role(user), 64)
    else:
        actor = _clean(_get_header(request, HDR_ACTOR), 255)
        role = _clean(_get_header(request, HDR_ROLE), 64)

    return RevisionContext(
        actor_id=actor or base.actor_id,
        actor_role=role or base.actor_role,
        origin_address=_clean(_origin_from_request(request), 64) or base.origin_address,
    )


def _from_mapping(data: Mapping, base: RevisionContext) -> RevisionContext:
    actor = _clean(data.get("actor_id") or data.get("actor"), 255)
    role = _clean(data.get("actor_role") or data.get("role"), 64)
    origin = _clean(
        data.get("origin_address") or data.get("origin") or data.get("remote_addr"),
        64,
    )
    return RevisionContext(
        actor_id=actor or base.actor_id,
        actor_role=role or base.actor_role,
        origin_address=origin or base.origin_address,
    )


def capture_revision_context(ambient: Any = None) -> RevisionContext:
    """
    Build a RevisionContext from whatever the caller has at hand:
    None, a plain mapping, or a Django/DRF request.

    Never raises. Anything missing or unreadable resolves to the configured
    defaults (anonymous / USER / unknown).
    """
    base = _defaults()
    if ambient is None:
        return base
    if isinstance(ambient, RevisionContext):
        return ambient

    try:
        if isinstance(ambient, Mapping):
            return _from_mapping(ambient, base)
        return _from_request(ambient, base)
    except Exception:
        return base
