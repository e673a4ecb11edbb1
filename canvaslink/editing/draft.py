"""
Connection drafting.

Two-click protocol for drawing a new connection: the first anchor click picks
the start, the second click on another node's anchor creates the connection
with a single control point halfway between the two anchors. Clicking the
start node again, or any external cancel, drops the draft.

Usage:
    draft = ConnectionDraft(nodes, connections, settings, AVATAR_FAMILY)
    draft.click_anchor("a1", 1)   # -> DraftOutcome.STARTED
    draft.click_anchor("a2", 6)   # -> DraftOutcome.CREATED
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..geometry.anchors import anchor_angle, midpoint, resolve_anchor
from ..scene.abstraction import Connection
from ..scene.stores import ConnectionStore, NodeStore
from ..settings import ViewSettings
from .families import AVATAR_FAMILY, ConnectionFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftConnection:
    """First endpoint chosen, awaiting the second click."""
    node_id: str
    anchor_index: int
    anchor_angle: float


class DraftOutcome(Enum):
    STARTED = "started"
    CREATED = "created"
    CANCELLED = "cancelled"  # start node clicked again
    REJECTED = "rejected"  # incompatible node kinds
    ABORTED = "aborted"  # an endpoint node vanished


@dataclass
class DraftResult:
    """Result of an anchor click."""
    outcome: DraftOutcome
    message: str = ""
    connection: Optional[Connection] = None

    @property
    def success(self) -> bool:
        return self.outcome in (DraftOutcome.STARTED, DraftOutcome.CREATED)


class ConnectionDraft:
    """Idle -> PendingStart -> Idle state machine for new connections."""

    def __init__(
        self,
        nodes: NodeStore,
        connections: ConnectionStore,
        settings: ViewSettings,
        family: ConnectionFamily = AVATAR_FAMILY,
        on_rejected: Optional[Callable[[str], None]] = None,
    ):
        self.nodes = nodes
        self.connections = connections
        self.settings = settings
        self.family = family
        self.on_rejected = on_rejected
        self._pending: Optional[DraftConnection] = None
        self._listeners: List[Callable[[Optional[DraftConnection]], None]] = []

    @property
    def pending(self) -> Optional[DraftConnection]:
        return self._pending

    @property
    def is_idle(self) -> bool:
        return self._pending is None

    def subscribe(self, listener: Callable[[Optional[DraftConnection]], None]) -> Callable[[], None]:
        """Get told whenever the pending draft changes."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_pending(self, draft: Optional[DraftConnection]):
        self._pending = draft
        for listener in list(self._listeners):
            listener(draft)

    def cancel(self):
        """Drop any pending draft (Escape key, click on empty canvas)."""
        if self._pending is not None:
            logger.debug(f"Draft from {self._pending.node_id} cancelled")
            self._set_pending(None)

    def click_anchor(self, node_id: str, anchor_index: int) -> DraftResult:
        """Handle a click on a node's anchor point."""
        if self._pending is None:
            node = self.nodes.get(node_id)
            if node is None:
                return DraftResult(DraftOutcome.ABORTED, f"Node {node_id} not found")
            self._set_pending(DraftConnection(
                node_id=node_id,
                anchor_index=anchor_index,
                anchor_angle=anchor_angle(node.kind, anchor_index),
            ))
            return DraftResult(DraftOutcome.STARTED, f"Drawing from {node_id}[{anchor_index}]")

        start = self._pending
        if start.node_id == node_id:
            self._set_pending(None)
            return DraftResult(DraftOutcome.CANCELLED, "Connection drawing cancelled")

        source = self.nodes.get(start.node_id)
        target = self.nodes.get(node_id)
        if source is None or target is None:
            self._set_pending(None)
            missing = start.node_id if source is None else node_id
            logger.warning(f"Draft aborted: node {missing} not found")
            return DraftResult(DraftOutcome.ABORTED, f"Node {missing} not found")

        if not self.family.compatibility.allows(source.kind, target.kind):
            self._set_pending(None)
            message = self.family.compatibility.rejection_message(source.kind, target.kind)
            logger.warning(f"Draft rejected: {message}")
            if self.on_rejected is not None:
                self.on_rejected(message)
            return DraftResult(DraftOutcome.REJECTED, message)

        from_point = resolve_anchor(source, start.anchor_index)
        to_point = resolve_anchor(target, anchor_index)
        connection = self.connections.add_connection(
            start.node_id,
            start.anchor_index,
            node_id,
            anchor_index,
            control_points=[midpoint(from_point, to_point)],
            color=self.settings.line_color,
            thickness=self.settings.line_thickness,
            highlight_type=None,
        )
        self._set_pending(None)
        logger.info(f"Created connection {connection.id}: {start.node_id} -> {node_id}")
        return DraftResult(DraftOutcome.CREATED, "Connection created", connection)
