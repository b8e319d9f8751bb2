"""Error types raised by the binding list and snapshot helpers."""

from __future__ import annotations

__all__ = [
    "BindingListError",
    "InvalidArgumentError",
    "FieldAccessError",
    "SnapshotFormatError",
    "SnapshotMismatchError",
]


class BindingListError(Exception):
    """Base class for all errors raised by this package."""


class InvalidArgumentError(BindingListError, ValueError):
    """Raised when a field descriptor or sort direction is missing or unknown."""


class FieldAccessError(BindingListError, RuntimeError):
    """Raised when a record field cannot be read while sorting."""

    def __init__(self, field_name: str, record: object, cause: BaseException) -> None:
        super().__init__(f"Cannot read field '{field_name}' from {record!r}: {cause}")
        self.field_name = field_name
        self.record = record


class SnapshotFormatError(BindingListError, ValueError):
    """Raised when a snapshot file line does not match the Path,Size format."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class SnapshotMismatchError(BindingListError, AssertionError):
    """Raised on request when two snapshots differ."""
