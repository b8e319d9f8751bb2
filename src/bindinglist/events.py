"""List change notifications.

Synchronous listener registry used by ``ObservableSortableList`` to announce
structural changes.

Goals:
 - Copy-first dispatch: listeners may subscribe, unsubscribe or mutate the
   list while being notified
 - Error isolation: one failing listener does not stop the others; the
   failure is logged and kept in a bounded ``errors`` buffer
 - Unsubscribe handles (``Subscription.cancel``)
 - Optional tracing of recent events in a ring buffer

Non-goals:
 - Thread-safety (a list and its listeners belong to one thread)
 - Async / queued dispatch
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Deque, List, Protocol, Tuple

from config.settings import EVENT_TRACE_CAPACITY, LISTENER_ERROR_CAPACITY

__all__ = [
    "ListChangeKind",
    "ListChangedEvent",
    "ListListener",
    "Subscription",
    "ListenerRegistry",
    "TraceEntry",
]

log = logging.getLogger(__name__)


class ListChangeKind(str, Enum):
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    ITEM_CHANGED = "item_changed"
    LIST_RESET = "list_reset"


@dataclass(frozen=True)
class ListChangedEvent:
    kind: ListChangeKind
    index: int  # -1 for LIST_RESET

    @classmethod
    def reset(cls) -> "ListChangedEvent":
        return cls(ListChangeKind.LIST_RESET, -1)


class ListListener(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: ListChangedEvent) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    listener: ListListener
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(frozen=True)
class TraceEntry:
    kind: ListChangeKind
    index: int
    timestamp: float


class ListenerRegistry:
    """Ordered set of list listeners with isolated, synchronous dispatch."""

    def __init__(
        self,
        *,
        error_capacity: int = LISTENER_ERROR_CAPACITY,
        trace_capacity: int = EVENT_TRACE_CAPACITY,
    ) -> None:
        self._subs: List[Subscription] = []
        self._errors: Deque[Tuple[ListChangedEvent, BaseException]] = deque(maxlen=error_capacity)
        self._tracing_enabled = False
        self._traces: Deque[TraceEntry] = deque(maxlen=trace_capacity)

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def add(self, listener: ListListener) -> Subscription:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        sub = Subscription(listener)
        self._subs.append(sub)
        return sub

    def remove(self, target: ListListener | Subscription) -> bool:
        """Remove by subscription handle or by listener; return whether found."""
        for i, existing in enumerate(self._subs):
            if existing is target or existing.listener == target:
                self._subs.pop(i)
                existing.active = False
                return True
        return False

    def clear(self) -> None:
        for sub in self._subs:
            sub.active = False
        self._subs.clear()
        self._errors.clear()

    def __len__(self) -> int:
        return sum(1 for s in self._subs if s.active)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def emit(self, event: ListChangedEvent) -> None:
        if self._tracing_enabled:
            self._traces.append(TraceEntry(event.kind, event.index, perf_counter()))
        subs = list(self._subs)
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.listener(event)
            except Exception as exc:  # noqa: BLE001 - capture any listener failure
                log.exception("List listener %r failed on %s", sub.listener, event.kind.value)
                self._errors.append((event, exc))
        # Drop subscriptions cancelled through their handle
        if any(not s.active for s in self._subs):
            self._subs = [s for s in self._subs if s.active]

    @property
    def errors(self) -> list[tuple[ListChangedEvent, BaseException]]:
        return list(self._errors)

    # ------------------------------------------------------------------
    # Tracing API
    # ------------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True) -> None:
        self._tracing_enabled = enabled

    @property
    def tracing_enabled(self) -> bool:
        return self._tracing_enabled

    def recent_traces(self) -> list[TraceEntry]:
        return list(self._traces)

    def clear_traces(self) -> None:
        self._traces.clear()
