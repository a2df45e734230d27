# hr_core/common/api/params.py
from __future__ import annotations

from rest_framework.exceptions import ValidationError


def int_param(params, name: str, default: int, *, minimum: int | None = None) -> int:
    """
    Integer query parameter; absent or empty means `default`.
    Anything unparseable or below `minimum` is a 400, never silently replaced.
    """
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be an integer."})
    if minimum is not None and value < minimum:
        raise ValidationError({name: f"Must be {minimum} or greater."})
    return value
