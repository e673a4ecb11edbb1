"""Interactive connection editing: drafting, control points, selection."""

from .control_points import (
    ControlPointEditor,
    ControlPointSnapshot,
    DragSession,
    EditResult,
    live_points,
)
from .draft import ConnectionDraft, DraftConnection, DraftOutcome, DraftResult
from .families import (
    AVATAR_FAMILY,
    PARTNER_CARD_FAMILY,
    CompatibilityTable,
    ConnectionFamily,
    ParentAnchorRule,
    TraversalMode,
)
from .pointer import (
    POINTER_CANCEL,
    POINTER_MOVE,
    POINTER_UP,
    CoordinateTransform,
    PointerEvent,
    PointerHub,
    PointerSource,
    ViewportTransform,
)
from .selection import ConnectionSelection

__all__ = [
    "ControlPointEditor",
    "ControlPointSnapshot",
    "DragSession",
    "EditResult",
    "live_points",
    "ConnectionDraft",
    "DraftConnection",
    "DraftOutcome",
    "DraftResult",
    "AVATAR_FAMILY",
    "PARTNER_CARD_FAMILY",
    "CompatibilityTable",
    "ConnectionFamily",
    "ParentAnchorRule",
    "TraversalMode",
    "POINTER_CANCEL",
    "POINTER_MOVE",
    "POINTER_UP",
    "CoordinateTransform",
    "PointerEvent",
    "PointerHub",
    "PointerSource",
    "ViewportTransform",
    "ConnectionSelection",
]
