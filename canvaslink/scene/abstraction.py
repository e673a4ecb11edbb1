"""
Scene Abstraction Layer

Plain data types shared by the connection editor: canvas points, node kinds,
nodes and connections. Nodes are owned by the host board; the editor only
reads their position and size. Connections are owned by the connection store
and only mutated through its explicit entry points.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import math


# Maximum number of interior shaping points on a connection
MAX_CONTROL_POINTS = 3

# Diameter used when a node does not declare its size
DEFAULT_NODE_SIZE = 418.0


class NodeKind(Enum):
    """Node kinds that connections can attach to."""
    AVATAR = "avatarNode"
    PARTNER_CARD = "partnerCardNode"
    SMALL_STICKER = "smallStickerNode"
    LICENSE = "licenseNode"


@dataclass(frozen=True)
class Point:
    """A point in canvas coordinates."""
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Node:
    """A positioned, sized shape on the canvas.

    (x, y) is the top-left corner of the node's bounding square.
    """
    id: str
    kind: NodeKind
    x: float = 0.0
    y: float = 0.0
    size: float = DEFAULT_NODE_SIZE

    # Detail-modal data, opaque to the editor
    personal_id: str = ""
    user_data: Optional[Dict[str, Any]] = None

    @property
    def center(self) -> Point:
        """Center of the node's bounding square."""
        half = self.size / 2
        return Point(self.x + half, self.y + half)

    def translated(self, dx: float, dy: float) -> "Node":
        """Return a copy of this node moved by (dx, dy)."""
        return Node(
            id=self.id,
            kind=self.kind,
            x=self.x + dx,
            y=self.y + dy,
            size=self.size,
            personal_id=self.personal_id,
            user_data=self.user_data,
        )


@dataclass
class Connection:
    """A styled curved line between two node anchors."""
    id: str
    from_node_id: str
    from_anchor: int
    to_node_id: str
    to_anchor: int
    control_points: List[Point] = field(default_factory=list)
    color: str = "#0f62fe"
    thickness: float = 5.0
    highlight_type: Optional[str] = None
    animation_duration_ms: Optional[int] = None  # None = inherit view settings

    def touches(self, node_id: str) -> bool:
        """Check if either endpoint is attached to the node."""
        return self.from_node_id == node_id or self.to_node_id == node_id

    def joins(self, node_a: str, node_b: str) -> bool:
        """Check if this connection links the two nodes in either direction."""
        return ((self.from_node_id == node_a and self.to_node_id == node_b) or
                (self.from_node_id == node_b and self.to_node_id == node_a))

    def other_end(self, node_id: str) -> Tuple[str, int, int]:
        """Get (other node id, other anchor, own anchor) seen from node_id."""
        if self.from_node_id == node_id:
            return self.to_node_id, self.to_anchor, self.from_anchor
        return self.from_node_id, self.from_anchor, self.to_anchor


@dataclass(frozen=True)
class ParentLink:
    """Upward relation produced by the board's calculation engine."""
    parent_id: str
    side: Optional[str] = None  # "left" / "right" on the parent


# child id -> parent link
ParentMap = Dict[str, ParentLink]
