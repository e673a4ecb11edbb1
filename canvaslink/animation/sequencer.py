"""
Ancestor-chain highlight animation.

Selecting a node briefly highlights it together with its chain of ancestors
and the connections between them. Two traversals discover the chain:

- Edge walk: follow literal connections whose parent side sits on the
  conventional parent anchor (anchor 1).
- Parent map: for kinds whose hierarchy is not drawn as connections, follow
  the parent map produced by the board's calculation engine and highlight a
  connection for each hop when one exists.

Playback publishes an immutable HighlightState to subscribers (the rendering
layer) and arms one timer that clears it. Starting a new animation first
cancels every pending timer and clears the state, so two animations never
overlap on screen.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from ..geometry.anchors import PARENT_ANCHOR
from ..scene.abstraction import ParentMap
from ..scene.stores import ConnectionStore, NodeStore
from ..settings import ViewSettings
from ..style_manager import FALLBACK_ANIMATION_COLOR, FALLBACK_ANIMATION_RGB, to_rgb_string
from ..editing.families import (
    AVATAR_FAMILY,
    ConnectionFamily,
    ParentAnchorRule,
    TraversalMode,
)
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class ElementKind(Enum):
    NODE = "node"
    EDGE = "edge"


@dataclass(frozen=True)
class SequenceItem:
    kind: ElementKind
    id: str


@dataclass
class AnimationSequence:
    """An armed animation: ordered elements plus the timers it owns."""
    root_id: str
    items: List[SequenceItem]
    duration_ms: int
    timers: List[TimerHandle] = field(default_factory=list)

    @property
    def node_ids(self) -> FrozenSet[str]:
        return frozenset(item.id for item in self.items if item.kind is ElementKind.NODE)

    @property
    def connection_ids(self) -> FrozenSet[str]:
        return frozenset(item.id for item in self.items if item.kind is ElementKind.EDGE)


@dataclass(frozen=True)
class HighlightState:
    """Declarative highlight map observed by the rendering layer."""
    root_id: Optional[str] = None
    node_ids: FrozenSet[str] = frozenset()
    connection_ids: FrozenSet[str] = frozenset()
    color: str = FALLBACK_ANIMATION_COLOR
    color_rgb: str = FALLBACK_ANIMATION_RGB

    @property
    def is_active(self) -> bool:
        return self.root_id is not None

    def is_highlighted(self, element_id: str) -> bool:
        return element_id in self.node_ids or element_id in self.connection_ids

    def to_dict(self) -> Dict:
        return {
            "root_id": self.root_id,
            "node_ids": sorted(self.node_ids),
            "connection_ids": sorted(self.connection_ids),
            "color": self.color,
            "color_rgb": self.color_rgb,
        }


HighlightListener = Callable[[HighlightState], None]


class AnimationSequencer:
    """Builds and plays ancestor-chain highlight sequences."""

    def __init__(
        self,
        nodes: NodeStore,
        connections: ConnectionStore,
        settings: ViewSettings,
        scheduler: Scheduler,
        family: ConnectionFamily = AVATAR_FAMILY,
        parent_map: Optional[ParentMap] = None,
    ):
        self.nodes = nodes
        self.connections = connections
        self.settings = settings
        self.scheduler = scheduler
        self.family = family
        self.parent_map: ParentMap = parent_map if parent_map is not None else {}

        self._active: Optional[AnimationSequence] = None
        self._state = HighlightState()
        self._listeners: List[HighlightListener] = []
        self._unsubscribe_settings = settings.subscribe(self._on_settings_changed)

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def active_sequence(self) -> Optional[AnimationSequence]:
        return self._active

    def subscribe(self, listener: HighlightListener) -> Callable[[], None]:
        """Register a highlight-state listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self):
        """Stop playback and detach from the view settings."""
        self.stop()
        self._unsubscribe_settings()

    def _publish(self, state: HighlightState):
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _on_settings_changed(self, settings: ViewSettings):
        if not settings.is_animation_enabled and self._active is not None:
            logger.debug("Animation disabled, stopping highlight")
            self.stop()

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def find_next_up(self, node_id: str, visited: Set[str]) -> Optional[Tuple[str, str]]:
        """Find (connection id, parent node id) one step up the edge chain."""
        rule = self.family.parent_anchor_rule
        for connection in self.connections.connections():
            if not connection.touches(node_id):
                continue
            other_id, other_anchor, own_anchor = connection.other_end(node_id)

            if rule is ParentAnchorRule.OTHER_ENDPOINT:
                on_parent_side = other_anchor == PARENT_ANCHOR and own_anchor != PARENT_ANCHOR
            else:
                on_parent_side = own_anchor == PARENT_ANCHOR and other_anchor != PARENT_ANCHOR
            if not on_parent_side:
                continue

            if other_id in visited or self.nodes.get(other_id) is None:
                continue
            return connection.id, other_id
        return None

    def edge_walk_sequence(self, root_id: str) -> List[SequenceItem]:
        """Ancestor chain following literal connections."""
        items = [SequenceItem(ElementKind.NODE, root_id)]
        visited = {root_id}
        current = root_id

        while True:
            step = self.find_next_up(current, visited)
            if step is None:
                break
            connection_id, parent_id = step
            items.append(SequenceItem(ElementKind.EDGE, connection_id))
            items.append(SequenceItem(ElementKind.NODE, parent_id))
            visited.add(parent_id)
            current = parent_id

        return items

    def parent_map_sequence(self, root_id: str) -> List[SequenceItem]:
        """Ancestor chain following the parent map.

        Hops without a drawn connection still highlight the parent node.
        """
        items = [SequenceItem(ElementKind.NODE, root_id)]
        visited = {root_id}
        current = root_id

        while True:
            link = self.parent_map.get(current)
            if link is None or not link.parent_id or link.parent_id in visited:
                break
            parent_id = link.parent_id

            connection = next(
                (c for c in self.connections.connections() if c.joins(current, parent_id)),
                None,
            )
            if connection is not None:
                items.append(SequenceItem(ElementKind.EDGE, connection.id))
            else:
                logger.warning(f"No connection between {current} and parent {parent_id}")

            items.append(SequenceItem(ElementKind.NODE, parent_id))
            visited.add(parent_id)
            current = parent_id

        return items

    def build_sequence(self, root_id: str) -> List[SequenceItem]:
        """Sequence for a node, using the traversal its kind calls for."""
        node = self.nodes.get(root_id)
        if node is None:
            return []
        if self.family.traversal_for(node.kind) is TraversalMode.PARENT_MAP:
            return self.parent_map_sequence(root_id)
        return self.edge_walk_sequence(root_id)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _resolve_duration(self, items: List[SequenceItem], override: Optional[int]) -> int:
        if override is not None:
            return int(override)
        per_connection = []
        for item in items:
            if item.kind is not ElementKind.EDGE:
                continue
            connection = self.connections.get(item.id)
            if connection is not None and connection.animation_duration_ms is not None:
                per_connection.append(connection.animation_duration_ms)
        if per_connection:
            return max(per_connection)
        return self.settings.animation_duration_ms

    def stop(self):
        """Cancel all pending timers and clear every highlight."""
        sequence = self._active
        self._active = None
        if sequence is not None:
            for timer in sequence.timers:
                timer.cancel()
            sequence.timers.clear()
        if self._state.is_active:
            self._publish(HighlightState())

    def start(self, node_id: str, duration_ms: Optional[int] = None) -> Optional[AnimationSequence]:
        """Highlight a node's ancestor chain for duration_ms.

        Returns the armed sequence, or None when animation is disabled or the
        node does not exist.
        """
        self.stop()

        if not self.settings.is_animation_enabled:
            return None
        if self.nodes.get(node_id) is None:
            logger.debug(f"Cannot animate missing node {node_id}")
            return None

        items = self.build_sequence(node_id)
        sequence = AnimationSequence(
            root_id=node_id,
            items=items,
            duration_ms=self._resolve_duration(items, duration_ms),
        )

        def expire():
            if self._active is not sequence:
                return
            logger.debug(f"Highlight of {node_id} expired")
            self.stop()

        # The timer is armed before the highlight is published.
        sequence.timers.append(self.scheduler.call_later(sequence.duration_ms, expire))
        self._active = sequence

        color = self.settings.animation_color or FALLBACK_ANIMATION_COLOR
        self._publish(HighlightState(
            root_id=node_id,
            node_ids=sequence.node_ids,
            connection_ids=sequence.connection_ids,
            color=color,
            color_rgb=to_rgb_string(color) or FALLBACK_ANIMATION_RGB,
        ))
        logger.debug(
            f"Animating {node_id}: {len(sequence.node_ids)} nodes, "
            f"{len(sequence.connection_ids)} connections, {sequence.duration_ms} ms"
        )
        return sequence
