"""
Control point editing.

Interior shaping points of a connection can be added by double-activating the
curve, removed by double-activating their handle, and dragged. Dragging runs
in a DragSession that owns its global pointer listeners: they are attached
when the session starts and detached on release, cancel, explicit end,
context exit, or an exception in a move handler.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from ..geometry.anchors import resolve_anchor
from ..geometry.projection import DEFAULT_SAMPLE_BUDGET, project_onto_curve
from ..scene.abstraction import MAX_CONTROL_POINTS, Connection, Point
from ..scene.stores import ConnectionStore, NodeStore
from .pointer import (
    POINTER_CANCEL,
    POINTER_MOVE,
    POINTER_UP,
    CoordinateTransform,
    PointerEvent,
    PointerSource,
)

logger = logging.getLogger(__name__)


@dataclass
class EditResult:
    """Result of a control point edit."""
    success: bool
    message: str
    modified_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ControlPointSnapshot:
    """Control points of a connection captured before a group move."""
    connection_id: str
    control_points: List[Point]


def live_points(nodes: NodeStore, connection: Connection) -> Optional[List[Point]]:
    """[start anchor, *control points, end anchor], or None if a node is gone."""
    source = nodes.get(connection.from_node_id)
    target = nodes.get(connection.to_node_id)
    if source is None or target is None:
        return None
    return [
        resolve_anchor(source, connection.from_anchor),
        *connection.control_points,
        resolve_anchor(target, connection.to_anchor),
    ]


class DragSession:
    """A scoped control point drag.

    Usage:
        with editor.begin_drag(connection_id, 0) as session:
            ...  # pointer events flow through the hub
    """

    def __init__(
        self,
        editor: "ControlPointEditor",
        connection_id: str,
        point_index: int,
    ):
        self.editor = editor
        self.connection_id = connection_id
        self.point_index = point_index
        self._attached = False
        self._ended = False

    @property
    def is_active(self) -> bool:
        return self._attached and not self._ended

    def start(self) -> "DragSession":
        if self._ended:
            raise RuntimeError("Drag session already ended")
        if not self._attached:
            source = self.editor.pointer_source
            source.add_listener(POINTER_MOVE, self._on_move)
            source.add_listener(POINTER_UP, self._on_release)
            source.add_listener(POINTER_CANCEL, self._on_release)
            self._attached = True
            logger.debug(f"Drag started: {self.connection_id}[{self.point_index}]")
        return self

    def end(self):
        """Detach all listeners. Safe to call more than once."""
        if self._ended:
            return
        self._ended = True
        if self._attached:
            source = self.editor.pointer_source
            source.remove_listener(POINTER_MOVE, self._on_move)
            source.remove_listener(POINTER_UP, self._on_release)
            source.remove_listener(POINTER_CANCEL, self._on_release)
            self._attached = False
        self.editor._session_ended(self)
        logger.debug(f"Drag ended: {self.connection_id}[{self.point_index}]")

    def _on_move(self, event: PointerEvent):
        try:
            self.editor.move_point_to_screen(
                self.connection_id, self.point_index, event.client_x, event.client_y
            )
        except Exception:
            self.end()
            raise

    def _on_release(self, event: PointerEvent):
        self.end()

    def __enter__(self) -> "DragSession":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end()
        return False


class ControlPointEditor:
    """Add, remove and drag the interior points of connections."""

    def __init__(
        self,
        nodes: NodeStore,
        connections: ConnectionStore,
        transform: CoordinateTransform,
        pointer_source: PointerSource,
        sample_budget: int = DEFAULT_SAMPLE_BUDGET,
    ):
        self.nodes = nodes
        self.connections = connections
        self.transform = transform
        self.pointer_source = pointer_source
        self.sample_budget = sample_budget
        self._session: Optional[DragSession] = None

    @property
    def active_drag(self) -> Optional[DragSession]:
        return self._session

    def add_point(self, connection_id: str, target: Point) -> EditResult:
        """Insert a control point on the curve nearest to target."""
        connection = self.connections.get(connection_id)
        if connection is None:
            return EditResult(False, f"Connection {connection_id} not found")

        if len(connection.control_points) >= MAX_CONTROL_POINTS:
            return EditResult(
                False, f"Connection {connection_id} already has {MAX_CONTROL_POINTS} control points"
            )

        points = live_points(self.nodes, connection)
        if points is None:
            return EditResult(False, f"Connection {connection_id} has a missing endpoint")

        closest = project_onto_curve(points, target, self.sample_budget)
        if closest is None or closest.insert_index <= 0:
            return EditResult(False, "No curve position found")

        new_points = list(connection.control_points)
        new_points.insert(closest.insert_index - 1, closest.point)
        del new_points[MAX_CONTROL_POINTS:]

        self.connections.update_connection(connection_id, control_points=new_points)
        return EditResult(
            True,
            f"Added control point at ({closest.x:.2f}, {closest.y:.2f})",
            [connection_id],
        )

    def add_point_at_screen(self, connection_id: str, client_x: float, client_y: float) -> EditResult:
        """Double-activate handler for a rendered curve."""
        return self.add_point(connection_id, self.transform.screen_to_canvas(client_x, client_y))

    def remove_point(self, connection_id: str, point_index: int) -> EditResult:
        """Double-activate handler for a control point handle."""
        connection = self.connections.get(connection_id)
        if connection is None:
            return EditResult(False, f"Connection {connection_id} not found")
        if not 0 <= point_index < len(connection.control_points):
            return EditResult(False, f"No control point {point_index} on {connection_id}")

        new_points = [p for i, p in enumerate(connection.control_points) if i != point_index]
        self.connections.update_connection(connection_id, control_points=new_points)
        return EditResult(True, f"Removed control point {point_index}", [connection_id])

    def move_point(self, connection_id: str, point_index: int, target: Point) -> EditResult:
        """Overwrite one control point with a canvas position."""
        connection = self.connections.get(connection_id)
        if connection is None:
            return EditResult(False, f"Connection {connection_id} not found")
        if not 0 <= point_index < len(connection.control_points):
            logger.warning(f"Ignoring move of missing control point {connection_id}[{point_index}]")
            return EditResult(False, f"No control point {point_index} on {connection_id}")

        new_points = list(connection.control_points)
        new_points[point_index] = target
        self.connections.update_connection(connection_id, control_points=new_points)
        return EditResult(True, f"Moved control point {point_index}", [connection_id])

    def move_point_to_screen(
        self, connection_id: str, point_index: int, client_x: float, client_y: float
    ) -> EditResult:
        return self.move_point(
            connection_id, point_index, self.transform.screen_to_canvas(client_x, client_y)
        )

    def begin_drag(self, connection_id: str, point_index: int) -> DragSession:
        """Start dragging a handle. Any previous session is ended first."""
        if self._session is not None:
            self._session.end()
        session = DragSession(self, connection_id, point_index)
        self._session = session
        return session.start()

    def end_drag(self):
        if self._session is not None:
            self._session.end()

    def _session_ended(self, session: DragSession):
        if self._session is session:
            self._session = None

    def collect_snapshots(self, moving_ids: Iterable[str]) -> List[ControlPointSnapshot]:
        """Capture control points of connections whose both ends are moving."""
        moving: Set[str] = set(moving_ids)
        if not moving:
            return []
        return [
            ControlPointSnapshot(c.id, list(c.control_points))
            for c in self.connections.connections()
            if c.from_node_id in moving and c.to_node_id in moving and c.control_points
        ]

    def apply_group_move(
        self, snapshots: Iterable[ControlPointSnapshot], dx: float, dy: float
    ) -> EditResult:
        """Translate snapshotted control points along with a group drag."""
        modified: Dict[str, None] = {}
        for snapshot in snapshots:
            if self.connections.get(snapshot.connection_id) is None:
                continue
            self.connections.update_connection(
                snapshot.connection_id,
                control_points=[p.translated(dx, dy) for p in snapshot.control_points],
            )
            modified[snapshot.connection_id] = None
        return EditResult(True, f"Moved {len(modified)} connection shapes", list(modified))
