"""
Tests for connection path derivation and SVG snapshots.
"""

import pytest

from canvaslink.animation.sequencer import HighlightState
from canvaslink.editing.draft import ConnectionDraft
from canvaslink.render.paths import ConnectionRenderer, RendererConfig
from canvaslink.render.svg import export_frame_svg, render_frame_svg
from canvaslink.scene.abstraction import Point


@pytest.fixture
def renderer(linked):
    nodes, connections, _ = linked
    return ConnectionRenderer(nodes, connections)


class TestPaths:
    """Test renderable connection records."""

    def test_curve_through_control_point(self, renderer):
        [path] = renderer.paths()
        assert path.id == "ab"
        assert path.d.startswith("M 209 -5 C ")
        assert path.d.count("C") == 2
        assert len(path.points) == 3
        assert path.stroke_width == 5
        assert path.color == "#0f62fe"
        assert path.animation_duration_ms == 2000
        assert path.highlighted is False

    def test_straight_without_control_points(self, renderer, linked):
        _, connections, _ = linked
        connections.update_connection("ab", control_points=[])
        [path] = renderer.paths()
        assert path.d == "M 209 -5 L 1209 423"
        assert path.handle_points == []

    def test_handles_snap_to_curve(self, renderer):
        [path] = renderer.paths()
        [handle] = path.handle_points
        assert handle.x == pytest.approx(709.0, abs=1e-6)
        assert handle.y == pytest.approx(209.0, abs=1e-6)

    def test_dangling_connection_filtered(self, renderer, linked):
        nodes, connections, _ = linked
        connections.add_connection("a", 2, "ghost", 1)
        nodes.remove("b")
        assert renderer.paths() == []
        assert len(connections) == 2

    def test_connection_duration_overrides_default(self, renderer, linked):
        _, connections, _ = linked
        connections.update_connection("ab", animation_duration_ms=4000)
        assert renderer.paths()[0].animation_duration_ms == 4000

    def test_highlight_flag(self, renderer):
        highlight = HighlightState(root_id="a", node_ids=frozenset({"a"}),
                                   connection_ids=frozenset({"ab"}))
        assert renderer.paths(highlight)[0].highlighted is True


class TestPreview:
    """Test the dashed draft preview line."""

    def test_idle_has_no_preview(self, renderer, linked, settings):
        nodes, connections, _ = linked
        draft = ConnectionDraft(nodes, connections, settings)
        assert renderer.preview_line(draft, Point(0, 0)) is None

    def test_preview_from_pending_anchor(self, renderer, linked, settings):
        nodes, connections, _ = linked
        draft = ConnectionDraft(nodes, connections, settings)
        draft.click_anchor("a", 1)

        preview = renderer.preview_line(draft, Point(400, 300))
        assert preview.d == "M 209 -5 L 400 300"
        assert preview.stroke_dasharray == "5,5"
        assert preview.color == "#5D8BF4"
        assert preview.stroke_width == 5

    def test_config_overrides(self, linked, settings):
        nodes, connections, _ = linked
        renderer = ConnectionRenderer(
            nodes, connections, RendererConfig(preview_color="#000000", preview_dasharray="2,8")
        )
        draft = ConnectionDraft(nodes, connections, settings)
        draft.click_anchor("b", 1)
        preview = renderer.preview_line(draft, None)
        assert preview.color == "#000000"
        assert preview.stroke_dasharray == "2,8"


class TestFrame:

    def test_frame_to_dict(self, renderer, linked, settings):
        nodes, connections, _ = linked
        draft = ConnectionDraft(nodes, connections, settings)
        frame = renderer.frame(draft, Point(1, 1)).to_dict()

        assert [c["id"] for c in frame["connections"]] == ["ab"]
        assert frame["preview"] is None
        assert frame["highlight"]["root_id"] is None
        assert frame["connections"][0]["points"][0] == {"x": pytest.approx(209.0),
                                                        "y": pytest.approx(-5.0)}

    def test_svg_snapshot(self, renderer, linked, tmp_path):
        nodes, _, _ = linked
        highlight = HighlightState(root_id="a", node_ids=frozenset({"a"}),
                                   connection_ids=frozenset({"ab"}), color="#ff0000")
        frame = renderer.frame(highlight=highlight)

        svg = render_frame_svg(frame, nodes.nodes())
        assert svg.startswith("<svg")
        assert 'id="connection-ab"' in svg
        assert 'stroke="#ff0000"' in svg
        assert svg.count("<circle") >= 4

        path = export_frame_svg(frame, nodes.nodes(), tmp_path / "out" / "frame.svg")
        assert path.read_text() == svg
