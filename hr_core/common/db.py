# hr_core/common/db.py
from __future__ import annotations

import functools
from typing import Optional
from uuid import UUID

from django.db import InterfaceError, OperationalError

from hr_core.common.errors import NotFound, StorageUnavailable


def as_uuid(value) -> Optional[UUID]:
    """
    Normalise str/UUID ids. Malformed ids cannot match any row -> NotFound.
    """
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise NotFound(f"Unknown employee id {value!r}.")


def translate_storage_errors(func):
    """
    Surface driver-level connectivity failures as StorageUnavailable.

    Apply OUTSIDE transaction.atomic so failures raised while committing are
    translated too.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            raise StorageUnavailable(str(e)) from e

    return wrapper
