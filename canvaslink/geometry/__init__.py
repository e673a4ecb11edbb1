"""Connection geometry: anchors, curve building and curve projection."""

from .anchors import (
    ANCHOR_ANGLES,
    ANCHOR_OFFSET,
    DEFAULT_ANCHOR_ANGLES,
    PARENT_ANCHOR,
    anchor_angle,
    midpoint,
    resolve_anchor,
)
from .bezier import (
    CubicSegment,
    CubicTo,
    LineTo,
    MoveTo,
    PathDescriptor,
    build_curve,
    curve_segments,
    straight_line,
)
from .projection import (
    Projection,
    is_point_near_curve,
    project_onto_curve,
    samples_per_segment,
    snap_handles,
)

__all__ = [
    "ANCHOR_ANGLES",
    "ANCHOR_OFFSET",
    "DEFAULT_ANCHOR_ANGLES",
    "PARENT_ANCHOR",
    "anchor_angle",
    "midpoint",
    "resolve_anchor",
    "CubicSegment",
    "CubicTo",
    "LineTo",
    "MoveTo",
    "PathDescriptor",
    "build_curve",
    "curve_segments",
    "straight_line",
    "Projection",
    "is_point_near_curve",
    "project_onto_curve",
    "samples_per_segment",
    "snap_handles",
]
