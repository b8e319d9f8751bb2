import logging

import pytest

from bindinglist import ObservableSortableList, SortDirection
from bindinglist.events import ListChangedEvent, ListChangeKind
from tests.factories import FileRow


def test_construction_emits_single_reset(rows, recorder):
    ObservableSortableList(rows, listeners=[recorder])
    assert recorder.events == [ListChangedEvent(ListChangeKind.LIST_RESET, -1)]


def test_construction_from_empty_still_resets(recorder):
    lst = ObservableSortableList([], listeners=[recorder])
    assert recorder.resets() == 1
    assert not lst.is_sorted


def test_sort_and_remove_sort_emit_one_reset_each(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    lst.apply_sort("size", SortDirection.DESCENDING)
    assert recorder.kinds == [ListChangeKind.LIST_RESET]
    lst.remove_sort()
    assert recorder.kinds == [ListChangeKind.LIST_RESET] * 2
    assert all(e.index == -1 for e in recorder.events)


def test_item_mutations_carry_indices(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    lst.add(FileRow("a.dll", 1))
    lst.insert(0, FileRow("b.dll", 2))
    lst.insert(-1, FileRow("c.dll", 3))
    lst.insert(100, FileRow("d.dll", 4))
    lst[1] = FileRow("e.dll", 5)
    lst.remove_at(-1)
    lst.pop(0)
    assert [(e.kind, e.index) for e in recorder.events] == [
        (ListChangeKind.ITEM_ADDED, 4),
        (ListChangeKind.ITEM_ADDED, 0),
        (ListChangeKind.ITEM_ADDED, 5),
        (ListChangeKind.ITEM_ADDED, 7),
        (ListChangeKind.ITEM_CHANGED, 1),
        (ListChangeKind.ITEM_REMOVED, 7),
        (ListChangeKind.ITEM_REMOVED, 0),
    ]
    assert len(lst) == 6


def test_remove_by_value_and_index_errors(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    lst.remove(rows[2])
    assert recorder.events == [ListChangedEvent(ListChangeKind.ITEM_REMOVED, 2)]
    with pytest.raises(IndexError):
        lst[10] = FileRow("x", 0)
    with pytest.raises(IndexError):
        lst.remove_at(-10)
    with pytest.raises(TypeError):
        del lst[0:2]
    assert len(recorder.events) == 1


def test_clear_and_extend(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    lst.clear()
    assert recorder.kinds == [ListChangeKind.LIST_RESET]
    lst.extend([FileRow("a", 1), FileRow("b", 2)])
    assert recorder.kinds[1:] == [ListChangeKind.ITEM_ADDED, ListChangeKind.ITEM_ADDED]
    assert [e.index for e in recorder.events[1:]] == [0, 1]


def test_suppression_scope_coalesces_into_one_reset(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    with lst.suppress_notifications():
        assert not lst.notifications_enabled
        lst.add(FileRow("a", 1))
        lst.remove_at(0)
        lst[0] = FileRow("b", 2)
        assert recorder.events == []
    assert lst.notifications_enabled
    assert recorder.kinds == [ListChangeKind.LIST_RESET]


def test_nested_scopes_and_batch_operations_flush_once(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    with lst.suppress_notifications():
        lst.apply_sort("name")
        with lst.suppress_notifications():
            lst.add(FileRow("z", 0))
        lst.remove_sort()
        assert recorder.events == []
    assert recorder.resets() == 1
    assert len(recorder.events) == 1


def test_empty_scope_emits_nothing(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    with lst.suppress_notifications():
        pass
    assert recorder.events == []


def test_scope_restored_and_flushed_on_error(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    with pytest.raises(RuntimeError):
        with lst.suppress_notifications():
            lst.add(FileRow("a", 1))
            raise RuntimeError("bulk update failed")
    assert lst.notifications_enabled
    assert recorder.kinds == [ListChangeKind.LIST_RESET]
    lst.add(FileRow("b", 2))
    assert recorder.kinds[-1] is ListChangeKind.ITEM_ADDED


def test_reset_bindings_and_reset_item(rows, recorder):
    lst = ObservableSortableList(rows)
    lst.add_listener(recorder)
    lst.reset_bindings()
    lst[1].size = 999
    lst.reset_item(1)
    assert [(e.kind, e.index) for e in recorder.events] == [
        (ListChangeKind.LIST_RESET, -1),
        (ListChangeKind.ITEM_CHANGED, 1),
    ]


def test_remove_listener_by_callback_and_handle(rows, recorder):
    lst = ObservableSortableList(rows)
    other = []
    sub = lst.add_listener(other.append)
    lst.add_listener(recorder)
    assert lst.remove_listener(recorder)
    assert not lst.remove_listener(recorder)
    sub.cancel()
    lst.add(FileRow("a", 1))
    assert recorder.events == []
    assert other == []
    assert len(lst.listeners) == 0


def test_failing_listener_is_isolated(rows, recorder, caplog):
    def bad(_event):
        raise ValueError("listener bug")

    lst = ObservableSortableList(rows)
    lst.add_listener(bad)
    lst.add_listener(recorder)
    with caplog.at_level(logging.ERROR, logger="bindinglist.events"):
        lst.add(FileRow("a", 1))
    assert recorder.kinds == [ListChangeKind.ITEM_ADDED]
    errors = lst.listeners.errors
    assert len(errors) == 1
    assert isinstance(errors[0][1], ValueError)
    assert "listener" in caplog.text


def test_listener_sees_completed_sort(rows):
    lst = ObservableSortableList(rows)
    seen = []
    lst.add_listener(lambda e: seen.append([r.size for r in lst]))
    lst.apply_sort("size")
    assert seen == [[120, 120, 2048, 90000]]


def test_listener_may_mutate_during_dispatch(rows, recorder):
    lst = ObservableSortableList(rows)

    def append_once(event):
        if event.kind is ListChangeKind.LIST_RESET:
            lst.add(FileRow("added-by-listener", 0))

    lst.add_listener(append_once)
    lst.add_listener(recorder)
    lst.clear()
    assert [r.name for r in lst] == ["added-by-listener"]
    assert recorder.kinds == [ListChangeKind.ITEM_ADDED, ListChangeKind.LIST_RESET]


def test_tracing_records_recent_events(rows):
    lst = ObservableSortableList(rows)
    lst.listeners.enable_tracing()
    lst.apply_sort("name")
    lst.add(FileRow("a", 1))
    traces = lst.listeners.recent_traces()
    assert [t.kind for t in traces] == [ListChangeKind.LIST_RESET, ListChangeKind.ITEM_ADDED]
    lst.listeners.clear_traces()
    assert lst.listeners.recent_traces() == []
