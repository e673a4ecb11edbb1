"""SVG snapshot export of a render frame.

Useful for debugging curve shapes and highlight sequences without a browser
canvas: nodes are drawn as circles, connections as their path data, control
point handles as small dots.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from ..scene.abstraction import Node
from ..style_manager import get_style_manager
from .paths import RenderFrame

logger = logging.getLogger(__name__)


def _bounds(nodes: List[Node], frame: RenderFrame) -> Tuple[float, float, float, float]:
    xs: List[float] = []
    ys: List[float] = []
    for node in nodes:
        xs.extend([node.x, node.x + node.size])
        ys.extend([node.y, node.y + node.size])
    for path in frame.connections:
        xs.extend(p.x for p in path.points)
        ys.extend(p.y for p in path.points)
    if not xs:
        return (0.0, 0.0, 100.0, 100.0)
    return (min(xs), min(ys), max(xs), max(ys))


def render_frame_svg(frame: RenderFrame, nodes: Iterable[Node], margin: float = 20.0) -> str:
    """Render a frame as a standalone SVG document."""
    node_list = list(nodes)
    min_x, min_y, max_x, max_y = _bounds(node_list, frame)
    width = max_x - min_x + 2 * margin
    height = max_y - min_y + 2 * margin
    styles = get_style_manager()
    highlight = frame.highlight

    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="{min_x - margin:.2f} {min_y - margin:.2f} {width:.2f} {height:.2f}">',
        f'<rect x="{min_x - margin:.2f}" y="{min_y - margin:.2f}" '
        f'width="100%" height="100%" fill="white"/>',
    ]

    for node in node_list:
        center = node.center
        if node.id in highlight.node_ids:
            stroke = styles.get_node_highlight_color(node.kind.value)
            stroke_width = 6
        else:
            stroke = "#333333"
            stroke_width = 2
        lines.append(
            f'<circle id="node-{node.id}" cx="{center.x:.2f}" cy="{center.y:.2f}" '
            f'r="{node.size / 2:.2f}" fill="none" stroke="{stroke}" '
            f'stroke-width="{stroke_width}"/>'
        )

    for path in frame.connections:
        color = highlight.color if path.highlighted else path.color
        lines.append(
            f'<path id="connection-{path.id}" d="{path.d}" fill="none" '
            f'stroke="{color}" stroke-width="{path.stroke_width}"/>'
        )
        for handle in path.handle_points:
            lines.append(
                f'<circle cx="{handle.x:.2f}" cy="{handle.y:.2f}" r="4" fill="{path.color}"/>'
            )

    if frame.preview is not None:
        lines.append(
            f'<path d="{frame.preview.d}" fill="none" stroke="{frame.preview.color}" '
            f'stroke-width="{frame.preview.stroke_width}" '
            f'stroke-dasharray="{frame.preview.stroke_dasharray}"/>'
        )

    lines.append("</svg>")
    return "\n".join(lines)


def export_frame_svg(frame: RenderFrame, nodes: Iterable[Node], path: Path) -> Path:
    """Write a frame snapshot to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frame_svg(frame, nodes))
    logger.info(f"Exported connection snapshot to {path}")
    return path
