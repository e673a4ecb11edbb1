"""Nearest-point queries against connection curves.

The curve is sampled segment by segment with the same cubic control points
the builder emits; the closest sample wins. Used to insert control points
where the user double-clicks, to hit-test curves and to snap control point
handles onto the drawn curve.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..scene.abstraction import Point
from .bezier import curve_segments

DEFAULT_SAMPLE_BUDGET = 100
MIN_SAMPLES_PER_SEGMENT = 5
DEFAULT_HIT_THRESHOLD = 10.0


@dataclass(frozen=True)
class Projection:
    """Closest sampled point on a curve.

    insert_index is the index in the [start, *controls, end] list at which a
    new point splits the matching segment (the segment's end point index).
    """
    x: float
    y: float
    t: float
    insert_index: int
    distance: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def samples_per_segment(segment_count: int, sample_budget: int = DEFAULT_SAMPLE_BUDGET) -> int:
    """Number of sample intervals used on each segment."""
    if segment_count <= 0:
        return MIN_SAMPLES_PER_SEGMENT
    return max(MIN_SAMPLES_PER_SEGMENT, _round_half_up(sample_budget / segment_count))


def project_onto_curve(
    points: Sequence[Point],
    target: Point,
    sample_budget: int = DEFAULT_SAMPLE_BUDGET,
) -> Optional[Projection]:
    """Find the sampled curve point closest to target.

    Returns None when fewer than two points are given.
    """
    if not points or len(points) < 2:
        return None

    segments = curve_segments(points)
    samples = samples_per_segment(len(segments), sample_budget)

    best: Optional[Projection] = None
    best_dist = math.inf

    for i, segment in enumerate(segments):
        for j in range(samples + 1):
            t = j / samples
            sample = segment.point_at(t)
            dist = sample.distance_to(target)
            if dist < best_dist:
                best_dist = dist
                best = Projection(
                    x=sample.x,
                    y=sample.y,
                    t=t,
                    insert_index=i + 1,
                    distance=dist,
                )

    return best


def is_point_near_curve(
    points: Sequence[Point],
    target: Point,
    threshold: float = DEFAULT_HIT_THRESHOLD,
) -> bool:
    """Hit-test: is target within threshold of the curve?"""
    closest = project_onto_curve(points, target)
    if closest is None:
        return False
    return closest.distance <= threshold


def snap_handles(
    points: Sequence[Point],
    control_points: Sequence[Point],
    sample_budget: int = 200,
) -> List[Point]:
    """Position each control point handle on the drawn curve."""
    handles = []
    for control in control_points:
        closest = project_onto_curve(points, control, sample_budget)
        handles.append(closest.point if closest else control)
    return handles
