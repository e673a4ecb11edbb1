"""Connection style management.

Provides centralized access to line, preview and animation styling from
configuration, with fallback to built-in defaults when the configuration file
is missing or incomplete.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)

FALLBACK_ANIMATION_COLOR = "#5D8BF4"
FALLBACK_ANIMATION_RGB = "93, 139, 244"


def to_rgb_string(color: Any) -> Optional[str]:
    """Convert "#RRGGBB" or "#RGB" into an "R, G, B" string.

    Returns None when the value is not a parseable hex color.
    """
    if not isinstance(color, str):
        return None
    hex_part = color.replace("#", "")
    if len(hex_part) not in (3, 6):
        return None
    if len(hex_part) == 3:
        hex_part = "".join(ch + ch for ch in hex_part)

    try:
        value = int(hex_part, 16)
    except ValueError:
        return None

    r = (value >> 16) & 255
    g = (value >> 8) & 255
    b = value & 255
    return f"{r}, {g}, {b}"


class StyleManager:
    """Manages connection styles from external configuration.

    Loads connection_styles.yaml once and answers style lookups. Sections
    missing from the file fall back to the defaults section by section.
    """

    _instance: Optional["StyleManager"] = None
    _config: Dict = {}

    def __new__(cls, config_path: Optional[Path] = None):
        """Singleton pattern to avoid reloading config."""
        if cls._instance is None or config_path is not None:
            instance = super().__new__(cls)
            instance._config_path = config_path
            instance._load_config()
            if config_path is not None:
                return instance
            cls._instance = instance
        return cls._instance

    def _load_config(self):
        """Load style configuration from YAML file."""
        config_path = self._config_path or Path(__file__).parent / "connection_styles.yaml"
        defaults = self._get_default_config()

        try:
            if not Path(config_path).exists():
                logger.warning(
                    f"Connection styles config not found at {config_path}, "
                    "using defaults"
                )
                self._config = defaults
                return

            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError("top-level YAML value must be a mapping")

            merged = {}
            for section, values in defaults.items():
                override = loaded.get(section) or {}
                merged[section] = {**values, **override}
            self._config = merged

            logger.debug(f"Loaded connection styles from {config_path}")

        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            logger.error(f"Failed to load connection styles: {e}")
            self._config = defaults

    def _get_default_config(self) -> Dict[str, Dict[str, Any]]:
        """Get default style configuration as fallback."""
        return {
            "line": {
                "color": "#0f62fe",
                "thickness": 5,
                "min_thickness": 1,
                "max_thickness": 20,
            },
            "preview": {
                "color": FALLBACK_ANIMATION_COLOR,
                "dasharray": "5,5",
                "fallback_width": 2,
            },
            "animation": {
                "color": FALLBACK_ANIMATION_COLOR,
                "color_rgb": FALLBACK_ANIMATION_RGB,
                "duration_ms": 2000,
                "min_seconds": 2,
                "max_seconds": 999,
            },
            "node_highlight": {},
        }

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a single style value."""
        return self._config.get(section, {}).get(key, default)

    def get_line_style(self) -> Dict[str, Any]:
        return dict(self._config.get("line", {}))

    def get_preview_style(self) -> Dict[str, Any]:
        return dict(self._config.get("preview", {}))

    def get_animation_style(self) -> Dict[str, Any]:
        return dict(self._config.get("animation", {}))

    def get_node_highlight_color(self, kind_value: str) -> str:
        """Get the highlight color for a node kind, or the animation color."""
        colors = self._config.get("node_highlight", {}) or {}
        if kind_value in colors:
            return colors[kind_value]
        return self.get("animation", "color", FALLBACK_ANIMATION_COLOR)

    def reload(self):
        """Reload configuration from file.

        Useful for testing or runtime config updates.
        """
        self._load_config()


# Global instance
_style_manager = None


def get_style_manager() -> StyleManager:
    """Get the global StyleManager instance."""
    global _style_manager
    if _style_manager is None:
        _style_manager = StyleManager()
    return _style_manager
