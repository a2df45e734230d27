# hr_core/common/errors.py
from __future__ import annotations

from typing import Any


class HRCoreError(Exception):
    """
    Base class for every typed failure raised by the write/read core.
    The API layer maps `code` onto the error envelope; the core never logs.
    """
    code = "error"
    default_message = "Request failed."

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = details or None
        super().__init__(self.message)


class NotFound(HRCoreError):
    code = "not_found"
    default_message = "Employee not found."


class DuplicateKey(HRCoreError):
    code = "duplicate_key"
    default_message = "An employee with this value already exists."

    def __init__(self, *, field: str, value: Any):
        super().__init__(f"An employee with {field}={value!r} already exists.", field=field, value=value)
        self.field = field
        self.value = value


class VersionConflict(HRCoreError):
    """
    Optimistic concurrency mismatch. Recoverable: re-fetch and retry.
    """
    code = "version_conflict"

    def __init__(self, *, expected: int, actual: int | None):
        super().__init__(
            f"Stale version: expected {expected}, stored version is {actual}.",
            expected_version=expected,
            current_version=actual,
        )
        self.expected = expected
        self.actual = actual


class CycleDetected(HRCoreError):
    code = "cycle_detected"
    default_message = "Proposed supervisor would make the employee supervise itself."


class DependentsExist(HRCoreError):
    code = "dependents_exist"

    def __init__(self, *, count: int):
        super().__init__(f"Employee still supervises {count} active employee(s).", active_dependents=count)
        self.count = count


class IntegrityViolation(HRCoreError):
    """
    Corrupted supervision graph. Fatal; needs operator attention.
    """
    code = "integrity_violation"
    default_message = "Supervision graph is corrupted."


class StorageUnavailable(HRCoreError):
    """
    Persistence unreachable. Retry with backoff.
    """
    code = "storage_unavailable"
    default_message = "Storage is temporarily unavailable."


class InvalidChange(HRCoreError):
    code = "validation_error"
    default_message = "Invalid change."


class ImmutableRevisionError(HRCoreError):
    code = "immutable_revision"
    default_message = "Revisions are append-only."
