"""
Node and connection stores.

The stores own the node and connection collections. The editor never touches
the collections directly: nodes are read through snapshots and the only writes
are the narrow entry points below, so each collection has a single writer.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional

from .abstraction import (
    MAX_CONTROL_POINTS,
    Connection,
    Node,
    Point,
)

logger = logging.getLogger(__name__)

MIN_ANIMATION_DURATION_MS = 2000
MAX_ANIMATION_DURATION_MS = 999000

# Attributes update_connection() accepts
UPDATABLE_ATTRS = {
    "control_points",
    "color",
    "thickness",
    "highlight_type",
    "animation_duration_ms",
}

Listener = Callable[[], None]


def clamp_animation_duration(duration: Any) -> int:
    """Clamp an animation duration (ms) into the supported range."""
    if not isinstance(duration, (int, float)) or isinstance(duration, bool):
        return MIN_ANIMATION_DURATION_MS
    if duration != duration:  # NaN
        return MIN_ANIMATION_DURATION_MS
    return int(min(max(duration, MIN_ANIMATION_DURATION_MS), MAX_ANIMATION_DURATION_MS))


def _normalize_points(points: Iterable[Any]) -> List[Point]:
    normalized = []
    for point in points:
        if isinstance(point, Point):
            normalized.append(point)
        elif isinstance(point, dict):
            normalized.append(Point(float(point["x"]), float(point["y"])))
        else:
            x, y = point
            normalized.append(Point(float(x), float(y)))
    if len(normalized) > MAX_CONTROL_POINTS:
        raise ValueError(
            f"A connection holds at most {MAX_CONTROL_POINTS} control points, "
            f"got {len(normalized)}"
        )
    return normalized


class _Observable:
    """Minimal publish/subscribe mixin for store change notification."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener()


class NodeStore(_Observable):
    """In-memory node store.

    Holds a read-only view of the board's nodes plus the two write calls the
    editor relies on (user data updates and clearing selection).
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        super().__init__()
        self._nodes: Dict[str, Node] = {}
        self.selected_ids: List[str] = []
        for node in nodes or []:
            self._nodes[node.id] = node

    def get(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def nodes(self) -> List[Node]:
        """Snapshot of all nodes in insertion order."""
        return list(self._nodes.values())

    def put(self, node: Node):
        """Insert or replace a node (host-side write)."""
        self._nodes[node.id] = node
        self._notify()

    def remove(self, node_id: str) -> bool:
        """Remove a node (host-side write). Connections are left untouched."""
        if self._nodes.pop(node_id, None) is None:
            return False
        self._notify()
        return True

    def select(self, node_ids: Iterable[str]):
        self.selected_ids = [nid for nid in node_ids if nid in self._nodes]
        self._notify()

    def update_node_user_data(self, node_id: str, data: Optional[Dict[str, Any]]) -> bool:
        """Attach or clear detail-modal data on a node."""
        node = self._nodes.get(node_id)
        if node is None:
            logger.warning(f"Cannot update user data: node {node_id} not found")
            return False
        node.user_data = dict(data) if data is not None else None
        node.personal_id = str(data.get("personal_id", "")) if data else ""
        self._notify()
        return True

    def deselect_all(self):
        if self.selected_ids:
            self.selected_ids = []
            self._notify()


class ConnectionStore(_Observable):
    """In-memory connection store with default style parameters."""

    def __init__(
        self,
        default_color: str = "#0f62fe",
        default_thickness: float = 5.0,
        default_animation_duration_ms: int = MIN_ANIMATION_DURATION_MS,
    ):
        super().__init__()
        self._connections: Dict[str, Connection] = {}
        self.default_color = default_color
        self.default_thickness = default_thickness
        self.default_highlight_type: Optional[str] = None
        self.default_animation_duration_ms = clamp_animation_duration(
            default_animation_duration_ms
        )

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def connections(self) -> List[Connection]:
        """Snapshot of all connections in creation order."""
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)

    def add_connection(
        self,
        from_node_id: str,
        from_anchor: int,
        to_node_id: str,
        to_anchor: int,
        control_points: Iterable[Any] = (),
        color: Optional[str] = None,
        thickness: Optional[float] = None,
        highlight_type: Optional[str] = None,
        animation_duration_ms: Optional[int] = None,
        connection_id: Optional[str] = None,
    ) -> Connection:
        """Create a connection between two node anchors.

        Missing style attributes fall back to the store defaults.
        """
        connection = Connection(
            id=connection_id or uuid.uuid4().hex,
            from_node_id=from_node_id,
            from_anchor=from_anchor,
            to_node_id=to_node_id,
            to_anchor=to_anchor,
            control_points=_normalize_points(control_points),
            color=color or self.default_color,
            thickness=thickness or self.default_thickness,
            highlight_type=(highlight_type if highlight_type is not None
                            else self.default_highlight_type),
            animation_duration_ms=(clamp_animation_duration(animation_duration_ms)
                                   if animation_duration_ms is not None else None),
        )
        if connection.id in self._connections:
            raise ValueError(f"Connection {connection.id} already exists")

        self._connections[connection.id] = connection
        logger.debug(
            f"Added connection {connection.id}: "
            f"{from_node_id}[{from_anchor}] -> {to_node_id}[{to_anchor}]"
        )
        self._notify()
        return connection

    def update_connection(self, connection_id: str, **attrs) -> Connection:
        """Apply a partial update to a connection."""
        connection = self._connections.get(connection_id)
        if connection is None:
            raise KeyError(f"Connection {connection_id} not found")

        unknown = set(attrs) - UPDATABLE_ATTRS
        if unknown:
            raise ValueError(f"Cannot update connection attributes: {sorted(unknown)}")

        if "control_points" in attrs:
            connection.control_points = _normalize_points(attrs["control_points"])
        if "color" in attrs:
            connection.color = attrs["color"]
        if "thickness" in attrs:
            connection.thickness = attrs["thickness"]
        if "highlight_type" in attrs:
            connection.highlight_type = attrs["highlight_type"]
        if "animation_duration_ms" in attrs:
            duration = attrs["animation_duration_ms"]
            connection.animation_duration_ms = (
                clamp_animation_duration(duration) if duration is not None else None
            )

        self._notify()
        return connection

    def remove_connection(self, connection_id: str) -> bool:
        if self._connections.pop(connection_id, None) is None:
            return False
        logger.debug(f"Removed connection {connection_id}")
        self._notify()
        return True

    def remove_connections_for_node(self, node_id: str) -> int:
        """Remove every connection attached to a node. Returns the count."""
        doomed = [c.id for c in self._connections.values() if c.touches(node_id)]
        for connection_id in doomed:
            del self._connections[connection_id]
        if doomed:
            logger.debug(f"Removed {len(doomed)} connections of node {node_id}")
            self._notify()
        return len(doomed)

    def set_default_parameters(
        self,
        color: Optional[str] = None,
        thickness: Optional[float] = None,
        animation_duration_ms: Optional[int] = None,
    ):
        """Change the defaults applied to new connections."""
        if isinstance(color, str) and color:
            self.default_color = color
        if isinstance(thickness, (int, float)) and thickness == thickness:
            self.default_thickness = thickness
        if isinstance(animation_duration_ms, (int, float)):
            self.default_animation_duration_ms = clamp_animation_duration(
                animation_duration_ms
            )
