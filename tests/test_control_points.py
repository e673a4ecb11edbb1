"""
Tests for control point editing.

Covers insertion by projection, removal, the three-point cap, drag sessions
and group moves.
"""

import pytest

from canvaslink.editing.control_points import ControlPointEditor, live_points
from canvaslink.editing.pointer import (
    POINTER_CANCEL,
    POINTER_MOVE,
    POINTER_UP,
    PointerEvent,
    ViewportTransform,
)
from canvaslink.scene.abstraction import Point


@pytest.fixture
def editor(linked, transform, hub):
    nodes, connections, _ = linked
    return ControlPointEditor(nodes, connections, transform, hub)


class TestAddRemove:
    """Test double-activate insertion and removal."""

    def test_add_before_existing_point(self, editor, linked):
        _, _, connection = linked
        result = editor.add_point("ab", Point(459, 102))

        assert result.success is True
        assert result.modified_ids == ["ab"]
        assert len(connection.control_points) == 2
        assert connection.control_points[0].x < 709
        assert connection.control_points[1] == Point(709, 209)

    def test_add_after_existing_point(self, editor, linked):
        _, _, connection = linked
        editor.add_point("ab", Point(959, 316))

        assert connection.control_points[0] == Point(709, 209)
        assert connection.control_points[1].x > 709

    def test_added_point_lies_on_curve(self, editor, linked):
        nodes, _, connection = linked
        before = live_points(nodes, connection)
        editor.add_point("ab", Point(459, 150))

        inserted = connection.control_points[0]
        # Before insertion the curve is a straight line through both anchors
        start, end = before[0], before[-1]
        slope = (end.y - start.y) / (end.x - start.x)
        assert inserted.y == pytest.approx(start.y + slope * (inserted.x - start.x), abs=1e-6)

    def test_add_in_screen_coordinates(self, linked, hub):
        nodes, connections, connection = linked
        editor = ControlPointEditor(nodes, connections, ViewportTransform(100, 50, 2.0), hub)
        editor.add_point_at_screen("ab", 100 + 459 * 2, 50 + 102 * 2)
        assert len(connection.control_points) == 2

    def test_three_point_cap(self, editor, linked):
        _, connections, connection = linked
        connections.update_connection(
            "ab", control_points=[(400, 80), (709, 209), (1000, 330)]
        )
        before = list(connection.control_points)
        result = editor.add_point("ab", Point(550, 150))

        assert result.success is False
        assert connection.control_points == before

    def test_add_to_missing_connection(self, editor):
        assert editor.add_point("missing", Point(0, 0)).success is False

    def test_add_with_missing_endpoint(self, editor, linked):
        nodes, _, connection = linked
        nodes.remove("b")
        assert editor.add_point("ab", Point(459, 102)).success is False
        assert len(connection.control_points) == 1

    def test_remove_point(self, editor, linked):
        _, _, connection = linked
        result = editor.remove_point("ab", 0)
        assert result.success is True
        assert connection.control_points == []

    def test_remove_out_of_range(self, editor, linked):
        assert editor.remove_point("ab", 3).success is False


class TestDragSession:
    """Test scoped drag sessions over the pointer hub."""

    def test_drag_moves_point(self, editor, linked, hub):
        _, _, connection = linked
        session = editor.begin_drag("ab", 0)
        assert hub.listener_count() == 3

        hub.dispatch(PointerEvent(POINTER_MOVE, 100, 200))
        assert connection.control_points[0] == Point(100, 200)

        hub.dispatch(PointerEvent(POINTER_UP, 100, 200))
        assert hub.listener_count() == 0
        assert not session.is_active
        assert editor.active_drag is None

        hub.dispatch(PointerEvent(POINTER_MOVE, 300, 300))
        assert connection.control_points[0] == Point(100, 200)

    def test_cancel_detaches(self, editor, hub):
        editor.begin_drag("ab", 0)
        hub.dispatch(PointerEvent(POINTER_CANCEL, 0, 0))
        assert hub.listener_count() == 0

    def test_context_manager_detaches(self, editor, hub, linked):
        _, _, connection = linked
        with editor.begin_drag("ab", 0):
            hub.dispatch(PointerEvent(POINTER_MOVE, 10, 20))
        assert hub.listener_count() == 0
        assert connection.control_points[0] == Point(10, 20)

    def test_end_is_idempotent(self, editor, hub):
        session = editor.begin_drag("ab", 0)
        session.end()
        session.end()
        editor.end_drag()
        assert hub.listener_count() == 0

    def test_new_drag_ends_previous(self, editor, hub):
        first = editor.begin_drag("ab", 0)
        second = editor.begin_drag("ab", 0)
        assert not first.is_active
        assert second.is_active
        assert hub.listener_count() == 3
        assert editor.active_drag is second

    def test_handler_exception_detaches(self, linked, hub):
        nodes, connections, _ = linked
        broken = ControlPointEditor(nodes, connections, ViewportTransform(scale=0), hub)
        broken.begin_drag("ab", 0)

        with pytest.raises(ValueError):
            hub.dispatch(PointerEvent(POINTER_MOVE, 1, 1))
        assert hub.listener_count() == 0
        assert broken.active_drag is None

    def test_drag_of_deleted_connection(self, editor, linked, hub):
        _, connections, _ = linked
        editor.begin_drag("ab", 0)
        connections.remove_connection("ab")
        hub.dispatch(PointerEvent(POINTER_MOVE, 5, 5))
        hub.dispatch(PointerEvent(POINTER_UP, 5, 5))
        assert hub.listener_count() == 0


class TestGroupMove:
    """Test control point snapshots for multi-node drags."""

    def test_snapshots_only_fully_moving_connections(self, editor, linked):
        _, connections, _ = linked
        connections.add_connection("a", 2, "card", 1, control_points=[(50, 600)])
        snapshots = editor.collect_snapshots(["a", "b"])
        assert [s.connection_id for s in snapshots] == ["ab"]

    def test_apply_group_move(self, editor, linked):
        _, _, connection = linked
        snapshots = editor.collect_snapshots(["a", "b"])
        editor.apply_group_move(snapshots, 10, 5)
        editor.apply_group_move(snapshots, 20, 10)  # relative to the snapshot
        assert connection.control_points == [Point(729, 219)]

    def test_empty_selection(self, editor):
        assert editor.collect_snapshots([]) == []
