import pytest

from mandala.drawing.geometry import Point, build_path
from mandala.drawing.history import ActionLog, FilledRegion, HistoryListener, PendingStroke, Stroke


class RecordingListener(HistoryListener):
    def __init__(self):
        self.events = []

    def undo_availability_changed(self, available):
        self.events.append(("undo", available))

    def redo_availability_changed(self, available):
        self.events.append(("redo", available))

    def display_changed(self):
        self.events.append(("display",))


def _stroke(offset=0, closed=True):
    points = tuple(Point(x + offset, y) for x, y in [(0, 0), (10, 0), (10, 10), (0, 10)])
    return Stroke(points=points, color=(0, 0, 0), width=5.0, closed=closed)


def _fill(stroke, color=(255, 0, 0)):
    return FilledRegion(boundary=build_path(stroke.points, closed=True), color=color)


def test_pending_stroke_freezes_into_immutable_stroke():
    pending = PendingStroke(color=(1, 2, 3), width=2.0)
    pending.add_point((1, 1))
    pending.add_point(Point(2, 2))
    stroke = pending.freeze(closed=True)
    pending.add_point((3, 3))

    assert stroke.points == (Point(1, 1), Point(2, 2))
    assert stroke.closed
    with pytest.raises(AttributeError):
        stroke.closed = False


def test_append_notifies_undo_available_and_no_redo():
    log = ActionLog()
    listener = RecordingListener()
    log.add_listener(listener)

    log.append(_stroke())

    assert listener.events == [("undo", True), ("redo", False), ("display",)]
    assert log.strokes == log.committed
    assert log.can_undo


@pytest.mark.parametrize("count", [1, 3, 7])
def test_n_draws_then_n_undos_returns_to_empty(count):
    log = ActionLog()
    listener = RecordingListener()
    log.add_listener(listener)
    for idx in range(count):
        log.append(_stroke(offset=idx))

    for _ in range(count):
        log.undo()

    assert log.committed == ()
    assert log.strokes == ()
    assert log.fills == ()
    assert len(log.undone) == count
    assert not log.can_undo
    assert listener.events[-3:] == [("undo", False), ("redo", True), ("display",)]


def test_undos_then_redos_restore_log_and_visible_state():
    log = ActionLog()
    first = _stroke(0)
    second = _stroke(20)
    log.append(first)
    log.append(_fill(first))
    log.append(second)
    before = (log.committed, log.strokes, log.fills)

    for _ in range(3):
        log.undo()
    for _ in range(3):
        log.redo()

    assert (log.committed, log.strokes, log.fills) == before
    assert log.undone == ()
    assert not log.can_redo


def test_redo_notifies_remaining_redo_availability():
    log = ActionLog()
    log.append(_stroke(0))
    log.append(_stroke(20))
    log.undo()
    log.undo()
    listener = RecordingListener()
    log.add_listener(listener)

    log.redo()
    assert listener.events == [("undo", True), ("redo", True), ("display",)]
    log.redo()
    assert listener.events[-3:] == [("undo", True), ("redo", False), ("display",)]


def test_undo_on_empty_log_is_silent_noop():
    log = ActionLog()
    listener = RecordingListener()
    log.add_listener(listener)

    assert log.undo() is None
    assert listener.events == []
    assert log.committed == ()


def test_redo_on_empty_undone_log_is_silent_noop():
    log = ActionLog()
    log.append(_stroke())
    listener = RecordingListener()
    log.add_listener(listener)

    assert log.redo() is None
    assert listener.events == []
    assert len(log.committed) == 1


def test_undo_removes_matching_primitive_kind():
    log = ActionLog()
    stroke = _stroke()
    fill = _fill(stroke)
    log.append(stroke)
    log.append(fill)

    assert log.undo() is fill
    assert log.fills == ()
    assert log.strokes == (stroke,)
    assert log.undone == (fill,)


def test_append_does_not_clear_undone():
    log = ActionLog()
    first = _stroke(0)
    log.append(first)
    log.undo()
    listener = RecordingListener()
    log.add_listener(listener)

    fresh = _stroke(20)
    log.append(fresh)

    assert listener.events[:2] == [("undo", True), ("redo", False)]
    assert log.undone == (first,)
    assert log.can_redo
    assert log.redo() is first
    assert log.committed == (fresh, first)


def test_closed_strokes_filters_open_strokes():
    log = ActionLog()
    closed = _stroke(0, closed=True)
    log.append(_stroke(10, closed=False))
    log.append(closed)
    assert log.closed_strokes() == [closed]


def test_append_rejects_unknown_action_without_recording_it():
    log = ActionLog()
    with pytest.raises(TypeError):
        log.append("not an action")
    assert log.committed == ()


def test_removed_listener_stops_receiving():
    log = ActionLog()
    listener = RecordingListener()
    log.add_listener(listener)
    log.remove_listener(listener)
    log.append(_stroke())
    assert listener.events == []
