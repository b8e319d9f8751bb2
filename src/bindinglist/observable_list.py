"""Observable, sortable list of records.

``ObservableSortableList`` keeps an ordered list of caller records, sorts it
in place by one field on request, can restore the construction order and
notifies listeners about structural changes.

Batch operations (construction, ``apply_sort``, ``remove_sort``, ``clear``,
``reverse``) run inside a suppression scope and are announced with a single
``LIST_RESET`` once the outermost scope exits. Single-item mutations emit
``ITEM_ADDED`` / ``ITEM_REMOVED`` / ``ITEM_CHANGED`` with the affected index,
or are folded into the pending reset while a scope is open.

Caller-visible behaviour:
 - adding an item while sorted appends it; the list is not re-sorted
 - ``remove_sort`` rebuilds from the construction sequence, so items added
   or removed afterwards are discarded
 - sorting is stable; records with equal keys keep their relative order

Usage:
    files = ObservableSortableList(entries, listeners=[on_change])
    files.apply_sort("size", SortDirection.DESCENDING)
    with files.suppress_notifications():
        files.add(extra_a)
        files.add(extra_b)  # one LIST_RESET after the block
    files.remove_sort()
"""

from __future__ import annotations

import dataclasses
import logging
import operator
from contextlib import contextmanager
from functools import cmp_to_key
from types import MappingProxyType
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableSequence,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .errors import InvalidArgumentError
from .events import ListChangedEvent, ListChangeKind, ListenerRegistry, ListListener, Subscription
from .fields import FieldComparator, FieldDescriptor, SortDirection, describe_fields

__all__ = ["ObservableSortableList", "FieldSpec"]

log = logging.getLogger(__name__)

T = TypeVar("T")
FieldSpec = Union[FieldDescriptor[Any], str]


class ObservableSortableList(MutableSequence[T]):
    """List of records with runtime-selectable single-field sorting.

    Parameters
    ----------
    source: Iterable[T]
        Initial records. Consumed once and copied; later changes to the
        source object do not affect the list.
    fields: Mapping[str, FieldDescriptor] | Iterable[FieldDescriptor] | None
        Accessor table used to resolve field names passed to
        ``apply_sort``. Derived from the record type when omitted and the
        first record is a dataclass or namedtuple.
    listeners: Iterable[callable]
        Listeners registered before the construction ``LIST_RESET``.
    """

    def __init__(
        self,
        source: Iterable[T] = (),
        *,
        fields: Mapping[str, FieldDescriptor[Any]] | Iterable[FieldDescriptor[Any]] | None = None,
        listeners: Iterable[ListListener] = (),
    ) -> None:
        if source is None:
            raise InvalidArgumentError("source must not be None")
        self._listeners = ListenerRegistry()
        for listener in listeners:
            self._listeners.add(listener)
        self._original: Tuple[T, ...] = tuple(source)
        self._items: List[T] = []
        self._fields: Dict[str, FieldDescriptor[Any]] = self._build_field_table(fields)
        self._sort_field: Optional[FieldDescriptor[Any]] = None
        self._sort_direction = SortDirection.ASCENDING
        self._suppress_depth = 0
        self._reset_pending = False
        self._reset_items()

    def _build_field_table(self, fields: Any) -> Dict[str, FieldDescriptor[Any]]:
        if fields is None:
            if self._original:
                first = self._original[0]
                is_namedtuple = isinstance(first, tuple) and hasattr(first, "_fields")
                if dataclasses.is_dataclass(first) or is_namedtuple:
                    return describe_fields(first)
            return {}
        items = fields.values() if isinstance(fields, Mapping) else fields
        table: Dict[str, FieldDescriptor[Any]] = {}
        for descriptor in items:
            if not isinstance(descriptor, FieldDescriptor):
                raise InvalidArgumentError(f"Expected FieldDescriptor, got {type(descriptor).__name__}")
            table[descriptor.name] = descriptor
        return table

    # ------------------------------------------------------------------
    # Notification plumbing
    # ------------------------------------------------------------------
    @contextmanager
    def suppress_notifications(self) -> Iterator[None]:
        """Pause per-item notifications for the duration of the block.

        Scopes nest. When the outermost scope exits (normally or through an
        exception) and anything changed inside it, one ``LIST_RESET`` is
        emitted.
        """
        self._suppress_depth += 1
        try:
            yield
        finally:
            self._suppress_depth -= 1
            if self._suppress_depth == 0 and self._reset_pending:
                self._reset_pending = False
                self._listeners.emit(ListChangedEvent.reset())

    @property
    def notifications_enabled(self) -> bool:
        return self._suppress_depth == 0

    def _notify(self, kind: ListChangeKind, index: int) -> None:
        if self._suppress_depth:
            self._reset_pending = True
            return
        self._listeners.emit(ListChangedEvent(kind, index))

    def add_listener(self, listener: ListListener) -> Subscription:
        return self._listeners.add(listener)

    def remove_listener(self, target: ListListener | Subscription) -> bool:
        return self._listeners.remove(target)

    @property
    def listeners(self) -> ListenerRegistry:
        return self._listeners

    def reset_bindings(self) -> None:
        """Tell listeners to re-read the whole list."""
        with self.suppress_notifications():
            self._reset_pending = True

    def reset_item(self, index: int) -> None:
        """Announce that the record at ``index`` was mutated in place."""
        i = self._normalize_index(index)
        self._notify(ListChangeKind.ITEM_CHANGED, i)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    @property
    def supports_sorting(self) -> bool:
        return True

    @property
    def is_sorted(self) -> bool:
        return self._sort_field is not None

    @property
    def sort_field(self) -> Optional[FieldDescriptor[Any]]:
        return self._sort_field

    @property
    def sort_direction(self) -> SortDirection:
        """Last direction passed to ``apply_sort`` (kept after ``remove_sort``)."""
        return self._sort_direction

    @property
    def fields(self) -> Mapping[str, FieldDescriptor[Any]]:
        return MappingProxyType(self._fields)

    def _resolve_field(self, field: FieldSpec | None) -> FieldDescriptor[Any]:
        if field is None:
            raise InvalidArgumentError("field must not be None")
        if isinstance(field, FieldDescriptor):
            return field
        if isinstance(field, str):
            try:
                return self._fields[field]
            except KeyError:
                known = ", ".join(sorted(self._fields)) or "none"
                raise InvalidArgumentError(f"Unknown field '{field}' (known: {known})") from None
        raise InvalidArgumentError(f"Expected field name or FieldDescriptor, got {type(field).__name__}")

    def apply_sort(
        self, field: FieldSpec, direction: SortDirection | str | bool = SortDirection.ASCENDING
    ) -> None:
        """Sort the records in place by ``field``.

        Field values are read and ordered before anything is committed: an
        invalid field or an accessor failure (``FieldAccessError``) leaves
        both the records and the sort state untouched.
        """
        descriptor = self._resolve_field(field)
        comparator = FieldComparator(descriptor, direction)
        decorated = [(comparator.read(item), item) for item in self._items]
        decorated.sort(key=cmp_to_key(lambda a, b: comparator.compare_values(a[0], b[0])))
        log.debug(
            "Sorting %d items by %s (%s)", len(decorated), descriptor.name, comparator.direction.value
        )
        with self.suppress_notifications():
            self._sort_field = descriptor
            self._sort_direction = comparator.direction
            self._items[:] = [item for _, item in decorated]
            self._reset_pending = True

    def remove_sort(self) -> None:
        """Restore the construction order and clear the sort field."""
        log.debug("Removing sort (field=%s)", self._sort_field.name if self._sort_field else None)
        with self.suppress_notifications():
            self._reset_items()
            self._sort_field = None

    def _reset_items(self) -> None:
        with self.suppress_notifications():
            self._items[:] = self._original
            self._reset_pending = True

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    def _normalize_index(self, index: int) -> int:
        if isinstance(index, slice):
            raise TypeError("slice assignment and deletion are not supported")
        i = operator.index(index)
        n = len(self._items)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError("list index out of range")
        return i

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __getitem__(self, index):  # type: ignore[override]
        return self._items[index]

    def __setitem__(self, index, value: T) -> None:  # type: ignore[override]
        i = self._normalize_index(index)
        self._items[i] = value
        self._notify(ListChangeKind.ITEM_CHANGED, i)

    def __delitem__(self, index) -> None:  # type: ignore[override]
        i = self._normalize_index(index)
        del self._items[i]
        self._notify(ListChangeKind.ITEM_REMOVED, i)

    def insert(self, index: int, value: T) -> None:
        n = len(self._items)
        i = operator.index(index)
        if i < 0:
            i = max(0, i + n)
        i = min(i, n)
        self._items.insert(i, value)
        self._notify(ListChangeKind.ITEM_ADDED, i)

    def add(self, value: T) -> None:
        self.insert(len(self._items), value)

    def remove_at(self, index: int) -> None:
        del self[index]

    def clear(self) -> None:
        with self.suppress_notifications():
            self._items.clear()
            self._reset_pending = True

    def reverse(self) -> None:
        with self.suppress_notifications():
            self._items.reverse()
            self._reset_pending = True

    def to_list(self) -> List[T]:
        return list(self._items)

    def __repr__(self) -> str:
        state = (
            f"sorted by {self._sort_field.name} {self._sort_direction.value}"
            if self._sort_field is not None
            else "unsorted"
        )
        return f"ObservableSortableList({self._items!r}, {state})"
