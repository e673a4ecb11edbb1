"""Tests for the node and connection stores."""

import pytest

from canvaslink.scene.abstraction import Node, NodeKind, Point
from canvaslink.scene.stores import (
    MAX_ANIMATION_DURATION_MS,
    MIN_ANIMATION_DURATION_MS,
    ConnectionStore,
    NodeStore,
    clamp_animation_duration,
)


class TestClampAnimationDuration:

    def test_clamps_into_range(self):
        assert clamp_animation_duration(100) == MIN_ANIMATION_DURATION_MS
        assert clamp_animation_duration(5000) == 5000
        assert clamp_animation_duration(10 ** 7) == MAX_ANIMATION_DURATION_MS

    def test_non_numeric_falls_back_to_minimum(self):
        assert clamp_animation_duration("fast") == MIN_ANIMATION_DURATION_MS
        assert clamp_animation_duration(None) == MIN_ANIMATION_DURATION_MS
        assert clamp_animation_duration(float("nan")) == MIN_ANIMATION_DURATION_MS


class TestConnectionStore:
    """Test connection store writes."""

    def test_add_uses_defaults(self, connections):
        connection = connections.add_connection("a", 1, "b", 6)
        assert connection.color == "#0f62fe"
        assert connection.thickness == 5.0
        assert connection.control_points == []
        assert connection.animation_duration_ms is None
        assert connections.get(connection.id) is connection

    def test_generated_ids_are_unique(self, connections):
        first = connections.add_connection("a", 1, "b", 6)
        second = connections.add_connection("a", 2, "b", 7)
        assert first.id != second.id
        assert len(connections) == 2

    def test_duplicate_id_rejected(self, connections):
        connections.add_connection("a", 1, "b", 6, connection_id="x")
        with pytest.raises(ValueError):
            connections.add_connection("a", 1, "b", 6, connection_id="x")

    def test_accepts_point_like_values(self, connections):
        connection = connections.add_connection(
            "a", 1, "b", 6, control_points=[{"x": 1, "y": 2}, (3, 4), Point(5, 6)]
        )
        assert connection.control_points == [Point(1, 2), Point(3, 4), Point(5, 6)]

    def test_control_point_cap_on_add(self, connections):
        with pytest.raises(ValueError):
            connections.add_connection("a", 1, "b", 6, control_points=[(0, 0)] * 4)
        assert len(connections) == 0

    def test_control_point_cap_on_update(self, linked):
        _, connections, connection = linked
        with pytest.raises(ValueError):
            connections.update_connection(connection.id, control_points=[(0, 0)] * 4)
        assert connection.control_points == [Point(709, 209)]

    def test_update_missing_connection(self, connections):
        with pytest.raises(KeyError):
            connections.update_connection("missing", color="#000000")

    def test_update_unknown_attribute(self, linked):
        _, connections, connection = linked
        with pytest.raises(ValueError):
            connections.update_connection(connection.id, from_node_id="c")

    def test_update_clamps_duration(self, linked):
        _, connections, connection = linked
        connections.update_connection(connection.id, animation_duration_ms=500)
        assert connection.animation_duration_ms == MIN_ANIMATION_DURATION_MS
        connections.update_connection(connection.id, animation_duration_ms=None)
        assert connection.animation_duration_ms is None

    def test_remove_connections_for_node(self, connections):
        connections.add_connection("a", 1, "b", 6)
        connections.add_connection("b", 2, "c", 1)
        connections.add_connection("c", 3, "d", 1)
        assert connections.remove_connections_for_node("b") == 2
        assert len(connections) == 1
        assert connections.remove_connection("missing") is False

    def test_set_default_parameters(self, connections):
        connections.set_default_parameters(color="#ff0000", thickness=9, animation_duration_ms=1)
        assert connections.default_color == "#ff0000"
        assert connections.default_thickness == 9
        assert connections.default_animation_duration_ms == MIN_ANIMATION_DURATION_MS
        connections.set_default_parameters(color="", thickness=float("nan"))
        assert connections.default_color == "#ff0000"
        assert connections.default_thickness == 9

    def test_subscribers_notified(self, connections):
        calls = []
        unsubscribe = connections.subscribe(lambda: calls.append(len(connections)))
        connection = connections.add_connection("a", 1, "b", 6)
        connections.update_connection(connection.id, color="#123456")
        unsubscribe()
        connections.remove_connection(connection.id)
        assert calls == [1, 1]


class TestNodeStore:
    """Test the node store's narrow write surface."""

    def test_update_user_data(self, nodes):
        assert nodes.update_node_user_data("a", {"personal_id": "A-17", "name": "Ann"})
        assert nodes.get("a").personal_id == "A-17"
        assert nodes.get("a").user_data["name"] == "Ann"

    def test_reset_user_data(self, nodes):
        nodes.update_node_user_data("a", {"personal_id": "A-17"})
        assert nodes.update_node_user_data("a", None)
        assert nodes.get("a").user_data is None
        assert nodes.get("a").personal_id == ""

    def test_update_missing_node(self, nodes):
        assert nodes.update_node_user_data("ghost", {"personal_id": "1"}) is False

    def test_deselect_all(self, nodes):
        nodes.select(["a", "b", "ghost"])
        assert nodes.selected_ids == ["a", "b"]
        nodes.deselect_all()
        assert nodes.selected_ids == []

    def test_remove_leaves_connections(self, linked):
        nodes, connections, connection = linked
        assert nodes.remove("b")
        assert connections.get(connection.id) is connection

    def test_put_replaces(self):
        store = NodeStore()
        store.put(Node(id="n", kind=NodeKind.LICENSE))
        store.put(Node(id="n", kind=NodeKind.SMALL_STICKER, x=5))
        assert [n.kind for n in store.nodes()] == [NodeKind.SMALL_STICKER]
