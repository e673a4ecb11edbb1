"""Tests for view settings and style configuration."""

import pytest

from canvaslink import style_manager as style_manager_module
from canvaslink.settings import (
    ViewSettings,
    clamp_animation_seconds,
    clamp_thickness,
)
from canvaslink.style_manager import StyleManager, to_rgb_string


class TestClamps:

    @pytest.mark.parametrize("value,expected", [
        (0, 1), (-3, 1), (1, 1), (7.5, 8), (20, 20), (25, 20), ("12", 12), ("thick", 1), (None, 1),
    ])
    def test_thickness(self, value, expected):
        assert clamp_thickness(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (1, 2), (2, 2), (2.5, 3), (60, 60), (1000, 999), ("x", 2), (float("inf"), 2),
    ])
    def test_animation_seconds(self, value, expected):
        assert clamp_animation_seconds(value) == expected


class TestToRgbString:

    def test_six_digit(self):
        assert to_rgb_string("#5D8BF4") == "93, 139, 244"

    def test_three_digit(self):
        assert to_rgb_string("#fff") == "255, 255, 255"

    def test_invalid(self):
        assert to_rgb_string("blue") is None
        assert to_rgb_string("#12345") is None
        assert to_rgb_string(None) is None


class TestViewSettings:
    """Test view settings defaults and change notification."""

    def test_defaults_from_styles(self, settings):
        assert settings.line_color == "#0f62fe"
        assert settings.line_thickness == 5
        assert settings.animation_color == "#5D8BF4"
        assert settings.animation_duration_ms == 2000
        assert settings.animation_color_rgb == "93, 139, 244"
        assert settings.is_animation_enabled is True

    def test_duration_from_styles(self):
        assert ViewSettings().animation_seconds == 2
        assert ViewSettings(animation_seconds=7).animation_duration_ms == 7000

    def test_setters_clamp(self, settings):
        settings.set_line_thickness(40)
        settings.set_animation_seconds(0)
        assert settings.line_thickness == 20
        assert settings.animation_duration_ms == 2000

    def test_empty_color_ignored(self, settings):
        settings.set_line_color("")
        settings.set_animation_color(None)
        assert settings.line_color == "#0f62fe"
        assert settings.animation_color == "#5D8BF4"

    def test_listeners(self, settings):
        seen = []
        unsubscribe = settings.subscribe(lambda s: seen.append(s.is_animation_enabled))
        settings.set_animation_enabled(False)
        settings.set_animation_enabled(False)  # no change, no notification
        unsubscribe()
        settings.set_animation_enabled(True)
        assert seen == [False]


class TestStyleManager:
    """Test YAML style loading."""

    def test_partial_override(self, tmp_path):
        config = tmp_path / "styles.yaml"
        config.write_text("line:\n  color: '#ff0000'\n")
        manager = StyleManager(config)

        assert manager.get("line", "color") == "#ff0000"
        assert manager.get("line", "thickness") == 5
        assert manager.get_preview_style()["dasharray"] == "5,5"

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = StyleManager(tmp_path / "absent.yaml")
        assert manager.get("animation", "color") == "#5D8BF4"

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        config = tmp_path / "broken.yaml"
        config.write_text("line: [unclosed\n")
        manager = StyleManager(config)
        assert manager.get("line", "color") == "#0f62fe"

    def test_node_highlight_falls_back_to_animation_color(self, tmp_path):
        manager = StyleManager(tmp_path / "absent.yaml")
        assert manager.get_node_highlight_color("avatarNode") == "#5D8BF4"

    def test_explicit_path_does_not_replace_singleton(self, tmp_path):
        shared = StyleManager()
        StyleManager(tmp_path / "absent.yaml")
        assert StyleManager() is shared


class TestConfiguredSettings:
    """Test view settings seeded from an edited style file."""

    @pytest.fixture
    def styles(self, tmp_path, monkeypatch):
        config = tmp_path / "styles.yaml"
        config.write_text(
            "line:\n"
            "  thickness: 30\n"
            "  min_thickness: 2\n"
            "  max_thickness: 12\n"
            "animation:\n"
            "  duration_ms: 5000\n"
            "  min_seconds: 3\n"
            "  max_seconds: 60\n"
        )
        manager = StyleManager(config)
        monkeypatch.setattr(style_manager_module, "_style_manager", manager)
        return manager

    def test_duration(self, styles):
        assert ViewSettings().animation_duration_ms == 5000

    def test_thickness_bounds(self, styles):
        settings = ViewSettings()
        assert settings.line_thickness == 12
        settings.set_line_thickness(1)
        assert settings.line_thickness == 2
        settings.set_line_thickness(40)
        assert settings.line_thickness == 12

    def test_seconds_bounds(self, styles):
        settings = ViewSettings()
        settings.set_animation_seconds(2)
        assert settings.animation_duration_ms == 3000
        settings.set_animation_seconds(500)
        assert settings.animation_duration_ms == 60000

    def test_inverted_bounds(self, tmp_path, monkeypatch):
        config = tmp_path / "styles.yaml"
        config.write_text("line:\n  min_thickness: 9\n  max_thickness: 4\n")
        monkeypatch.setattr(style_manager_module, "_style_manager", StyleManager(config))

        settings = ViewSettings()
        assert settings.min_thickness == settings.max_thickness == 9
        assert settings.line_thickness == 9
