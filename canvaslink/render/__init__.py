"""Rendering-side derivation: connection paths, preview line, frame streaming."""

from .paths import (
    ConnectionPath,
    ConnectionRenderer,
    PreviewLine,
    RenderFrame,
    RendererConfig,
)
from .svg import export_frame_svg, render_frame_svg


def __getattr__(name):
    # The stream server pulls in websockets; only import it when asked for.
    if name in ("HighlightStreamServer", "StreamManager"):
        from . import stream_server
        return getattr(stream_server, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ConnectionPath",
    "ConnectionRenderer",
    "PreviewLine",
    "RenderFrame",
    "RendererConfig",
    "export_frame_svg",
    "render_frame_svg",
    "HighlightStreamServer",
    "StreamManager",
]
