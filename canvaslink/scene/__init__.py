"""Scene model: nodes, connections and the stores that own them."""

from .abstraction import (
    DEFAULT_NODE_SIZE,
    MAX_CONTROL_POINTS,
    Connection,
    Node,
    NodeKind,
    ParentLink,
    ParentMap,
    Point,
)
from .stores import (
    MAX_ANIMATION_DURATION_MS,
    MIN_ANIMATION_DURATION_MS,
    ConnectionStore,
    NodeStore,
    clamp_animation_duration,
)

__all__ = [
    "DEFAULT_NODE_SIZE",
    "MAX_CONTROL_POINTS",
    "Connection",
    "Node",
    "NodeKind",
    "ParentLink",
    "ParentMap",
    "Point",
    "MAX_ANIMATION_DURATION_MS",
    "MIN_ANIMATION_DURATION_MS",
    "ConnectionStore",
    "NodeStore",
    "clamp_animation_duration",
]
