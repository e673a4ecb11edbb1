"""
View settings for the connection editor.

Global toggles and styling knobs the user changes from the view panel:
line color/thickness for new connections and the ancestor-chain highlight
animation. Setters clamp their input; listeners are told about every change.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .style_manager import (
    FALLBACK_ANIMATION_COLOR,
    FALLBACK_ANIMATION_RGB,
    get_style_manager,
    to_rgb_string,
)

logger = logging.getLogger(__name__)

MIN_LINE_THICKNESS = 1
MAX_LINE_THICKNESS = 20
MIN_ANIMATION_SECONDS = 2
MAX_ANIMATION_SECONDS = 999


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _clamp_int(value: Any, low: int, high: int) -> int:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return low
    if numeric != numeric or numeric in (float("inf"), float("-inf")):
        return low
    return min(max(_round_half_up(numeric), low), high)


def _seconds_from_ms(duration_ms: Any) -> Optional[float]:
    try:
        return float(duration_ms) / 1000
    except (TypeError, ValueError):
        return None


def clamp_thickness(value: Any, low: int = MIN_LINE_THICKNESS, high: int = MAX_LINE_THICKNESS) -> int:
    """Clamp a line thickness into [low, high] px, rounding to an integer."""
    return _clamp_int(value, low, high)


def clamp_animation_seconds(
    value: Any, low: int = MIN_ANIMATION_SECONDS, high: int = MAX_ANIMATION_SECONDS
) -> int:
    """Clamp an animation length into [low, high] whole seconds."""
    return _clamp_int(value, low, high)


@dataclass
class ViewSettings:
    """Observable view settings.

    Unset values and the clamp bounds come from the style configuration
    (the ``line`` and ``animation`` sections of connection_styles.yaml).
    """
    line_color: str = ""
    line_thickness: int = 0
    animation_seconds: Optional[int] = None
    animation_color: str = ""
    is_animation_enabled: bool = True
    min_thickness: int = field(default=MIN_LINE_THICKNESS, init=False)
    max_thickness: int = field(default=MAX_LINE_THICKNESS, init=False)
    min_seconds: int = field(default=MIN_ANIMATION_SECONDS, init=False)
    max_seconds: int = field(default=MAX_ANIMATION_SECONDS, init=False)
    _listeners: List[Callable[["ViewSettings"], None]] = field(
        default_factory=list, repr=False, compare=False
    )

    def __post_init__(self):
        """Fill unset values from the style configuration."""
        styles = get_style_manager()
        line = styles.get_line_style()
        animation = styles.get_animation_style()

        self.min_thickness = clamp_thickness(
            line.get("min_thickness", MIN_LINE_THICKNESS), 1, MAX_LINE_THICKNESS
        )
        self.max_thickness = clamp_thickness(
            line.get("max_thickness", MAX_LINE_THICKNESS), self.min_thickness, MAX_LINE_THICKNESS
        )
        self.min_seconds = clamp_animation_seconds(
            animation.get("min_seconds", MIN_ANIMATION_SECONDS), 1, MAX_ANIMATION_SECONDS
        )
        self.max_seconds = clamp_animation_seconds(
            animation.get("max_seconds", MAX_ANIMATION_SECONDS), self.min_seconds, MAX_ANIMATION_SECONDS
        )

        if not self.line_color:
            self.line_color = line.get("color") or "#0f62fe"
        if not self.line_thickness:
            self.line_thickness = line.get("thickness", 5)
        self.line_thickness = clamp_thickness(
            self.line_thickness, self.min_thickness, self.max_thickness
        )
        if not self.animation_color:
            self.animation_color = animation.get("color") or FALLBACK_ANIMATION_COLOR
        if self.animation_seconds is None:
            self.animation_seconds = _seconds_from_ms(animation.get("duration_ms", 2000))
        self.animation_seconds = clamp_animation_seconds(
            self.animation_seconds, self.min_seconds, self.max_seconds
        )

    @property
    def animation_duration_ms(self) -> int:
        return clamp_animation_seconds(self.animation_seconds, self.min_seconds, self.max_seconds) * 1000

    @property
    def animation_color_rgb(self) -> str:
        return to_rgb_string(self.animation_color) or FALLBACK_ANIMATION_RGB

    def subscribe(self, listener: Callable[["ViewSettings"], None]) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        for listener in list(self._listeners):
            listener(self)

    def set_line_color(self, color: Optional[str]):
        if not isinstance(color, str) or not color:
            return
        self.line_color = color
        self._changed()

    def set_line_thickness(self, value: Any):
        self.line_thickness = clamp_thickness(value, self.min_thickness, self.max_thickness)
        self._changed()

    def set_animation_seconds(self, value: Any):
        self.animation_seconds = clamp_animation_seconds(value, self.min_seconds, self.max_seconds)
        self._changed()

    def set_animation_color(self, color: Optional[str]):
        if not isinstance(color, str) or not color:
            return
        self.animation_color = color
        self._changed()

    def set_animation_enabled(self, enabled: bool):
        if self.is_animation_enabled == bool(enabled):
            return
        self.is_animation_enabled = bool(enabled)
        logger.debug(f"Highlight animation {'enabled' if enabled else 'disabled'}")
        self._changed()
