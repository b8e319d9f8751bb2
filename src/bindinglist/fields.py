"""Field descriptors and the single-field comparator used for sorting.

A ``FieldDescriptor`` pairs a field name with an accessor callable. The
list resolves a descriptor once per ``apply_sort`` call and hands it to a
``FieldComparator`` which orders records by the accessor's values.

Ordering policy:
 - ``None`` and absent values (accessor raises ``AttributeError``,
   ``KeyError`` or ``IndexError``) sort before every present value
 - values that cannot be ordered with ``<`` compare as ties
 - descending order only flips the sign, so ties stay ties and a stable
   sort keeps their relative order in both directions

Usage:
    size = FieldDescriptor.attribute("size")
    cmp = FieldComparator(size, SortDirection.DESCENDING)
    rows.sort(key=cmp.sort_key())
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from operator import attrgetter, itemgetter
from typing import Any, Callable, Dict, Generic, Hashable, TypeVar

from .errors import FieldAccessError, InvalidArgumentError

__all__ = [
    "SortDirection",
    "FieldDescriptor",
    "FieldComparator",
    "describe_fields",
    "natural_order",
    "ABSENT",
]

T = TypeVar("T")
Accessor = Callable[[Any], Any]

_ABSENT_ERRORS = (AttributeError, KeyError, IndexError)


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - debug aid
        return "<absent>"


ABSENT = _Absent()


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def sign(self) -> int:
        return -1 if self is SortDirection.DESCENDING else 1

    @classmethod
    def coerce(cls, value: "SortDirection | str | bool") -> "SortDirection":
        """Accept an enum member, its string value or an ``ascending`` flag."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.ASCENDING if value else cls.DESCENDING
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise InvalidArgumentError(f"Unknown sort direction: {value!r}")


@dataclass(frozen=True)
class FieldDescriptor(Generic[T]):
    name: str
    accessor: Accessor

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Field descriptor requires a non-empty name")
        if not callable(self.accessor):
            raise InvalidArgumentError(f"Accessor for field '{self.name}' is not callable")

    def get_value(self, record: T) -> Any:
        return self.accessor(record)

    @classmethod
    def attribute(cls, name: str) -> "FieldDescriptor[Any]":
        """Descriptor reading ``getattr(record, name)`` (dotted paths allowed)."""
        return cls(name, attrgetter(name))

    @classmethod
    def item(cls, key: Hashable, *, name: str | None = None) -> "FieldDescriptor[Any]":
        """Descriptor reading ``record[key]`` from mappings or sequences."""
        return cls(name or str(key), itemgetter(key))


def natural_order(x: Any, y: Any) -> int:
    """Three-way compare two already-read field values.

    ``ABSENT`` is the minimum. Values without a natural order tie.
    """
    if x is ABSENT or y is ABSENT:
        if x is y:
            return 0
        return -1 if x is ABSENT else 1
    try:
        if x < y:
            return -1
        if y < x:
            return 1
    except TypeError:
        return 0
    return 0


class FieldComparator(Generic[T]):
    """Orders two records by one field, honoring the sort direction.

    Immutable after construction. ``compare(x, y)`` returns
    ``direction.sign * natural_order(field(x), field(y))``.
    """

    def __init__(
        self, field: FieldDescriptor[T], direction: SortDirection | str | bool = SortDirection.ASCENDING
    ) -> None:
        if field is None:
            raise InvalidArgumentError("field must not be None")
        if not isinstance(field, FieldDescriptor):
            raise InvalidArgumentError(f"Expected FieldDescriptor, got {type(field).__name__}")
        self._field = field
        self._direction = SortDirection.coerce(direction)

    @property
    def field(self) -> FieldDescriptor[T]:
        return self._field

    @property
    def direction(self) -> SortDirection:
        return self._direction

    def read(self, record: T) -> Any:
        """Return the field value of ``record`` or ``ABSENT``.

        Accessor failures other than a missing attribute/key/index are
        wrapped in ``FieldAccessError``.
        """
        try:
            value = self._field.get_value(record)
        except _ABSENT_ERRORS:
            return ABSENT
        except Exception as exc:
            raise FieldAccessError(self._field.name, record, exc) from exc
        return ABSENT if value is None else value

    def compare_values(self, x_value: Any, y_value: Any) -> int:
        return self._direction.sign * natural_order(x_value, y_value)

    def compare(self, x: T, y: T) -> int:
        return self.compare_values(self.read(x), self.read(y))

    __call__ = compare

    def sort_key(self) -> Callable[[T], Any]:
        return cmp_to_key(self.compare)

    def __repr__(self) -> str:
        return f"FieldComparator({self._field.name!r}, {self._direction.value})"


def describe_fields(record_or_type: Any) -> Dict[str, FieldDescriptor[Any]]:
    """Build an accessor table for a dataclass or namedtuple record type.

    Accepts either the type or an instance. Raises ``InvalidArgumentError``
    for anything else; callers with other record shapes pass their own
    descriptors.
    """
    cls = record_or_type if isinstance(record_or_type, type) else type(record_or_type)
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    elif issubclass(cls, tuple) and hasattr(cls, "_fields"):
        names = list(cls._fields)  # type: ignore[attr-defined]
    else:
        raise InvalidArgumentError(f"Cannot derive fields from {cls.__name__}")
    return {name: FieldDescriptor.attribute(name) for name in names}
