"""Observable, sortable record lists with change notifications."""

from __future__ import annotations

__all__ = [
    "ObservableSortableList",
    "FieldDescriptor",
    "FieldComparator",
    "SortDirection",
    "describe_fields",
    "ListChangeKind",
    "ListChangedEvent",
    "ListenerRegistry",
    "Subscription",
    "BindingListError",
    "InvalidArgumentError",
    "FieldAccessError",
    "SnapshotFormatError",
    "SnapshotMismatchError",
]

__version__ = "0.1.0"

from .errors import (
    BindingListError,
    FieldAccessError,
    InvalidArgumentError,
    SnapshotFormatError,
    SnapshotMismatchError,
)
from .events import ListChangedEvent, ListChangeKind, ListenerRegistry, Subscription
from .fields import FieldComparator, FieldDescriptor, SortDirection, describe_fields
from .observable_list import ObservableSortableList
