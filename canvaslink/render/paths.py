"""
Connection path derivation.

Turns the node and connection stores into renderable records. Everything here
is recomputed on demand from the current store contents; connections whose
endpoint node has vanished are skipped rather than reported.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..animation.sequencer import HighlightState
from ..editing.control_points import live_points
from ..editing.draft import ConnectionDraft
from ..geometry.anchors import resolve_anchor
from ..geometry.bezier import build_curve, straight_line
from ..geometry.projection import snap_handles
from ..scene.abstraction import Point
from ..scene.stores import ConnectionStore, NodeStore
from ..style_manager import get_style_manager

logger = logging.getLogger(__name__)


@dataclass
class RendererConfig:
    """Configuration for path derivation."""
    handle_sample_budget: int = 200  # samples used to snap handles onto curves
    preview_color: str = ""
    preview_dasharray: str = ""
    preview_fallback_width: float = 0

    def __post_init__(self):
        preview = get_style_manager().get_preview_style()
        if not self.preview_color:
            self.preview_color = preview.get("color", "#5D8BF4")
        if not self.preview_dasharray:
            self.preview_dasharray = preview.get("dasharray", "5,5")
        if not self.preview_fallback_width:
            self.preview_fallback_width = preview.get("fallback_width", 2)


@dataclass
class ConnectionPath:
    """A connection ready for drawing."""
    id: str
    d: str
    points: List[Point]
    handle_points: List[Point]
    color: str
    stroke_width: float
    highlight_type: Optional[str] = None
    animation_duration_ms: int = 2000
    highlighted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "d": self.d,
            "points": [p.to_dict() for p in self.points],
            "handle_points": [p.to_dict() for p in self.handle_points],
            "color": self.color,
            "stroke_width": self.stroke_width,
            "highlight_type": self.highlight_type,
            "animation_duration_ms": self.animation_duration_ms,
            "highlighted": self.highlighted,
        }


@dataclass
class PreviewLine:
    """Dashed line from the draft start anchor to the pointer."""
    d: str
    color: str
    stroke_width: float
    stroke_dasharray: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "d": self.d,
            "color": self.color,
            "stroke_width": self.stroke_width,
            "stroke_dasharray": self.stroke_dasharray,
        }


@dataclass
class RenderFrame:
    """Everything the rendering layer needs for one redraw."""
    connections: List[ConnectionPath] = field(default_factory=list)
    preview: Optional[PreviewLine] = None
    highlight: HighlightState = field(default_factory=HighlightState)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connections": [c.to_dict() for c in self.connections],
            "preview": self.preview.to_dict() if self.preview else None,
            "highlight": self.highlight.to_dict(),
        }


class ConnectionRenderer:
    """Derives connection paths and the draft preview from the stores."""

    def __init__(
        self,
        nodes: NodeStore,
        connections: ConnectionStore,
        config: Optional[RendererConfig] = None,
    ):
        self.nodes = nodes
        self.connections = connections
        self.config = config or RendererConfig()

    def paths(self, highlight: Optional[HighlightState] = None) -> List[ConnectionPath]:
        """Renderable paths for every connection with both endpoints present."""
        highlight = highlight or HighlightState()
        result = []
        for connection in self.connections.connections():
            points = live_points(self.nodes, connection)
            if points is None:
                logger.debug(f"Skipping connection {connection.id}: endpoint missing")
                continue

            descriptor = build_curve(points)
            if descriptor.is_empty:
                continue

            result.append(ConnectionPath(
                id=connection.id,
                d=descriptor.to_svg(),
                points=points,
                handle_points=snap_handles(
                    points, connection.control_points, self.config.handle_sample_budget
                ),
                color=connection.color or self.connections.default_color,
                stroke_width=connection.thickness or self.connections.default_thickness,
                highlight_type=connection.highlight_type,
                animation_duration_ms=(
                    connection.animation_duration_ms
                    if connection.animation_duration_ms is not None
                    else self.connections.default_animation_duration_ms
                ),
                highlighted=connection.id in highlight.connection_ids,
            ))
        return result

    def preview_line(self, draft: ConnectionDraft, pointer: Optional[Point]) -> Optional[PreviewLine]:
        """Preview for a pending draft, or None when idle."""
        pending = draft.pending
        if pending is None:
            return None
        node = self.nodes.get(pending.node_id)
        if node is None:
            return None

        start = resolve_anchor(node, pending.anchor_index)
        end = pointer or Point(0, 0)
        return PreviewLine(
            d=straight_line(start, end).to_svg(),
            color=self.config.preview_color,
            stroke_width=(self.connections.default_thickness
                          or self.config.preview_fallback_width),
            stroke_dasharray=self.config.preview_dasharray,
        )

    def frame(
        self,
        draft: Optional[ConnectionDraft] = None,
        pointer: Optional[Point] = None,
        highlight: Optional[HighlightState] = None,
    ) -> RenderFrame:
        highlight = highlight or HighlightState()
        return RenderFrame(
            connections=self.paths(highlight),
            preview=self.preview_line(draft, pointer) if draft is not None else None,
            highlight=highlight,
        )
