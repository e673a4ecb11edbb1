"""Anchor point geometry.

Every node exposes ten anchor points on a ring just outside its perimeter.
Anchor angles are measured in degrees from "up", increasing clockwise.
"""

import math
from typing import Dict, Tuple

from ..scene.abstraction import Node, NodeKind, Point

# Gap between the node edge and the anchor ring
ANCHOR_OFFSET = 5.0

# Ordered anchor angles (degrees). The 20-degree pair around 180 keeps the
# bottom of the node clear; the table is a fixed contract, not a bug.
DEFAULT_ANCHOR_ANGLES: Tuple[float, ...] = (0, 40, 80, 120, 160, 180, 200, 240, 280, 320)

ANCHOR_ANGLES: Dict[NodeKind, Tuple[float, ...]] = {
    NodeKind.AVATAR: DEFAULT_ANCHOR_ANGLES,
    NodeKind.PARTNER_CARD: DEFAULT_ANCHOR_ANGLES,
    NodeKind.SMALL_STICKER: DEFAULT_ANCHOR_ANGLES,
    NodeKind.LICENSE: DEFAULT_ANCHOR_ANGLES,
}

# Anchor conventionally used to attach to a parent above
PARENT_ANCHOR = 1


def anchor_angle(kind: NodeKind, anchor_index: int) -> float:
    """Get the angle (degrees) of a 1-based anchor index, 0 when out of range."""
    angles = ANCHOR_ANGLES.get(kind, DEFAULT_ANCHOR_ANGLES)
    if 1 <= anchor_index <= len(angles):
        return angles[anchor_index - 1]
    return 0


def resolve_anchor(node: Node, anchor_index: int) -> Point:
    """Absolute canvas position of a node's anchor point."""
    radius = node.size / 2 + ANCHOR_OFFSET
    rad = math.radians(anchor_angle(node.kind, anchor_index))
    center = node.center
    return Point(
        center.x + radius * math.sin(rad),
        center.y - radius * math.cos(rad),
    )


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)
