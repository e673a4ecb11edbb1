"""Pointer input plumbing.

The host viewport feeds raw pointer events into a PointerHub (the "global"
input source drag sessions listen on) and supplies a transform from screen
to canvas coordinates.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Protocol

from ..scene.abstraction import Point

logger = logging.getLogger(__name__)

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"
POINTER_CANCEL = "pointercancel"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in screen (client) coordinates."""
    type: str
    client_x: float
    client_y: float
    ctrl_key: bool = False
    meta_key: bool = False

    @property
    def is_additive(self) -> bool:
        """Ctrl/Cmd held: toggle selection instead of replacing it."""
        return self.ctrl_key or self.meta_key


PointerHandler = Callable[[PointerEvent], None]


class PointerSource(Protocol):
    def add_listener(self, event_type: str, handler: PointerHandler) -> None: ...

    def remove_listener(self, event_type: str, handler: PointerHandler) -> None: ...


class CoordinateTransform(Protocol):
    def screen_to_canvas(self, client_x: float, client_y: float) -> Point: ...


@dataclass
class ViewportTransform:
    """Pan/zoom transform of the infinite canvas.

    canvas = (client - offset) / scale
    """
    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0

    def screen_to_canvas(self, client_x: float, client_y: float) -> Point:
        if self.scale == 0:
            raise ValueError("Viewport scale must be non-zero")
        return Point(
            (client_x - self.offset_x) / self.scale,
            (client_y - self.offset_y) / self.scale,
        )


class PointerHub:
    """In-process pointer event dispatcher."""

    def __init__(self):
        self._handlers: Dict[str, List[PointerHandler]] = {}

    def add_listener(self, event_type: str, handler: PointerHandler):
        self._handlers.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: PointerHandler):
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str = None) -> int:
        """Number of attached handlers (for one event type or all)."""
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(h) for h in self._handlers.values())

    def dispatch(self, event: PointerEvent):
        """Deliver an event to every handler registered for its type."""
        for handler in list(self._handlers.get(event.type, [])):
            handler(event)
