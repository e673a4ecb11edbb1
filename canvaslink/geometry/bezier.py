"""Curve construction for connection paths.

Connections are drawn through their anchor endpoints and interior control
points as a Catmull-Rom spline expressed as a chain of cubic Bezier segments.
Tangents are scaled by 1/6 and clamped at both ends, so the curve passes
through every input point.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Union

from ..scene.abstraction import Point


@dataclass(frozen=True)
class CubicSegment:
    """One cubic Bezier segment: start, two control points, end."""
    start: Point
    c1: Point
    c2: Point
    end: Point

    def point_at(self, t: float) -> Point:
        """Evaluate B(t) = (1-t)^3 P0 + 3(1-t)^2 t C1 + 3(1-t) t^2 C2 + t^3 P3."""
        mt = 1 - t
        a = mt * mt * mt
        b = 3 * mt * mt * t
        c = 3 * mt * t * t
        d = t * t * t
        return Point(
            a * self.start.x + b * self.c1.x + c * self.c2.x + d * self.end.x,
            a * self.start.y + b * self.c1.y + c * self.c2.y + d * self.end.y,
        )


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class CubicTo:
    c1: Point
    c2: Point
    point: Point


PathCommand = Union[MoveTo, LineTo, CubicTo]


def _fmt(value: float) -> str:
    """Format a coordinate compactly for SVG output."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


@dataclass
class PathDescriptor:
    """Renderer-neutral description of a connection path."""
    commands: List[PathCommand] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    @property
    def line_segments(self) -> int:
        return sum(1 for cmd in self.commands if isinstance(cmd, LineTo))

    @property
    def cubic_segments(self) -> int:
        return sum(1 for cmd in self.commands if isinstance(cmd, CubicTo))

    @property
    def start(self) -> Point:
        if not self.commands:
            raise ValueError("Empty path has no start point")
        return self.commands[0].point

    @property
    def end(self) -> Point:
        if not self.commands:
            raise ValueError("Empty path has no end point")
        return self.commands[-1].point

    def to_svg(self) -> str:
        """Render as an SVG path data string ("" when empty)."""
        parts = []
        for cmd in self.commands:
            if isinstance(cmd, MoveTo):
                parts.append(f"M {_fmt(cmd.point.x)} {_fmt(cmd.point.y)}")
            elif isinstance(cmd, LineTo):
                parts.append(f"L {_fmt(cmd.point.x)} {_fmt(cmd.point.y)}")
            else:
                parts.append(
                    f"C {_fmt(cmd.c1.x)} {_fmt(cmd.c1.y)} "
                    f"{_fmt(cmd.c2.x)} {_fmt(cmd.c2.y)} "
                    f"{_fmt(cmd.point.x)} {_fmt(cmd.point.y)}"
                )
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_svg()


def curve_segments(points: Sequence[Point]) -> List[CubicSegment]:
    """Cubic segments through consecutive point pairs.

    For the pair (p1, p2) at index i, p0 is the previous point (or p1 at the
    start) and p3 the point after p2 (or p2 at the end):
        c1 = p1 + (p2 - p0) / 6
        c2 = p2 - (p3 - p1) / 6
    """
    segments = []
    last = len(points) - 1
    for i in range(last):
        p1 = points[i]
        p2 = points[i + 1]
        p0 = points[i - 1] if i > 0 else p1
        p3 = points[i + 2] if i + 2 <= last else p2

        c1 = Point(p1.x + (p2.x - p0.x) / 6, p1.y + (p2.y - p0.y) / 6)
        c2 = Point(p2.x - (p3.x - p1.x) / 6, p2.y - (p3.y - p1.y) / 6)
        segments.append(CubicSegment(p1, c1, c2, p2))
    return segments


def build_curve(points: Sequence[Point]) -> PathDescriptor:
    """Build the path for [start, *control_points, end].

    Fewer than two points give an empty path, two points a straight line,
    and three or more a smooth chain of len(points) - 1 cubic segments.
    """
    if not points or len(points) < 2:
        return PathDescriptor()

    if len(points) == 2:
        return PathDescriptor([MoveTo(points[0]), LineTo(points[1])])

    commands: List[PathCommand] = [MoveTo(points[0])]
    for segment in curve_segments(points):
        commands.append(CubicTo(segment.c1, segment.c2, segment.end))
    return PathDescriptor(commands)


def straight_line(start: Point, end: Point) -> PathDescriptor:
    return PathDescriptor([MoveTo(start), LineTo(end)])
