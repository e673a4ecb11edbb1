"""
Connection editor facade.

Wires the stores, view settings, draft state machine, control point editor,
selection, animation sequencer and renderer for one board. Hosts feed it
canvas events and read render frames back.

Usage:
    editor = ConnectionEditor(nodes=NodeStore([...]), scheduler=ManualScheduler())
    editor.click_anchor("a", 1)
    editor.click_anchor("b", 6)
    frame = editor.frame()
"""

import asyncio
import logging
from typing import Callable, List, Optional

from .animation.scheduler import AsyncioScheduler, Scheduler
from .animation.sequencer import AnimationSequence, AnimationSequencer
from .editing.control_points import ControlPointEditor, EditResult
from .editing.draft import ConnectionDraft, DraftResult
from .editing.families import AVATAR_FAMILY, ConnectionFamily
from .editing.pointer import PointerEvent, PointerHub, ViewportTransform
from .editing.selection import ConnectionSelection
from .render.paths import ConnectionRenderer, RenderFrame, RendererConfig
from .scene.abstraction import ParentMap, Point
from .scene.stores import ConnectionStore, NodeStore
from .settings import ViewSettings
from .ui.menus import NodeContextMenu, NodeDetailModal

logger = logging.getLogger(__name__)


def _loop_scheduler() -> AsyncioScheduler:
    """Scheduler bound to the running event loop."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        raise ValueError(
            "ConnectionEditor created outside a running event loop needs an "
            "explicit scheduler (for example ManualScheduler)"
        ) from None
    return AsyncioScheduler(loop)


class ConnectionEditor:
    """All connection-editing behaviour of one board."""

    def __init__(
        self,
        nodes: Optional[NodeStore] = None,
        connections: Optional[ConnectionStore] = None,
        settings: Optional[ViewSettings] = None,
        family: ConnectionFamily = AVATAR_FAMILY,
        scheduler: Optional[Scheduler] = None,
        transform: Optional[ViewportTransform] = None,
        pointer_hub: Optional[PointerHub] = None,
        parent_map: Optional[ParentMap] = None,
        renderer_config: Optional[RendererConfig] = None,
        on_rejected: Optional[Callable[[str], None]] = None,
    ):
        if scheduler is None:
            scheduler = _loop_scheduler()
        self.nodes = nodes if nodes is not None else NodeStore()
        self.settings = settings if settings is not None else ViewSettings()
        self.connections = connections if connections is not None else ConnectionStore(
            default_color=self.settings.line_color,
            default_thickness=self.settings.line_thickness,
            default_animation_duration_ms=self.settings.animation_duration_ms,
        )
        self.family = family
        self.transform = transform or ViewportTransform()
        self.pointer_hub = pointer_hub or PointerHub()

        self.draft = ConnectionDraft(
            self.nodes, self.connections, self.settings, family, on_rejected=on_rejected
        )
        self.control_points = ControlPointEditor(
            self.nodes, self.connections, self.transform, self.pointer_hub
        )
        self.selection = ConnectionSelection(self.nodes, self.connections)
        self.sequencer = AnimationSequencer(
            self.nodes,
            self.connections,
            self.settings,
            scheduler,
            family=family,
            parent_map=parent_map,
        )
        self.renderer = ConnectionRenderer(self.nodes, self.connections, renderer_config)
        self.context_menu = NodeContextMenu(self.nodes, family)
        self.detail_modal = NodeDetailModal(self.nodes, family)

        self.pointer: Optional[Point] = None

    # Drafting

    def click_anchor(self, node_id: str, anchor_index: int) -> DraftResult:
        return self.draft.click_anchor(node_id, anchor_index)

    def pointer_moved(self, client_x: float, client_y: float) -> Point:
        """Track the pointer for the draft preview line."""
        self.pointer = self.transform.screen_to_canvas(client_x, client_y)
        return self.pointer

    def cancel(self):
        """Escape: drop the draft, any drag and open menus."""
        self.draft.cancel()
        self.control_points.end_drag()
        self.context_menu.close()

    # Selection

    def click_connection(self, connection_id: str, event: Optional[PointerEvent] = None) -> List[str]:
        """Click on a rendered connection line."""
        self.draft.cancel()
        additive = event.is_additive if event is not None else False
        return self.selection.click(connection_id, additive=additive)

    def delete_selected(self) -> int:
        return self.selection.delete_selected()

    # Control points

    def double_click_curve(self, connection_id: str, client_x: float, client_y: float) -> EditResult:
        return self.control_points.add_point_at_screen(connection_id, client_x, client_y)

    def double_click_handle(self, connection_id: str, point_index: int) -> EditResult:
        return self.control_points.remove_point(connection_id, point_index)

    def press_handle(self, connection_id: str, point_index: int):
        """Pointer down on a control point handle starts a drag session."""
        return self.control_points.begin_drag(connection_id, point_index)

    # Animation

    def animate(self, node_id: str, duration_ms: Optional[int] = None) -> Optional[AnimationSequence]:
        return self.sequencer.start(node_id, duration_ms)

    def stop_animation(self):
        self.sequencer.stop()

    def set_parent_map(self, parent_map: ParentMap):
        self.sequencer.parent_map = parent_map

    # Node UI

    def open_context_menu(self, node_id: str, client_x: float, client_y: float) -> bool:
        return self.context_menu.open(node_id, client_x, client_y)

    def open_detail_modal(self, node_id: str) -> bool:
        return self.detail_modal.open(node_id)

    # Rendering

    def frame(self) -> RenderFrame:
        """Everything the rendering layer needs for the current state."""
        return self.renderer.frame(self.draft, self.pointer, self.sequencer.state)

    def close(self):
        self.cancel()
        self.sequencer.close()
        logger.debug("Connection editor closed")
