"""Connection families.

Avatar boards and partner-card boards share one connection subsystem. A
family bundles what differs between them: which node kinds may be joined,
which traversal the highlight animation uses for each kind, and which anchor
marks the parent side of a connection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from ..scene.abstraction import NodeKind


class TraversalMode(Enum):
    """How the ancestor chain of a node is discovered."""
    EDGE_WALK = "edge_walk"  # follow literal connections upward
    PARENT_MAP = "parent_map"  # follow the calculation engine's parent map


class ParentAnchorRule(Enum):
    """Which endpoint of a connection sits on the parent anchor."""
    OTHER_ENDPOINT = "other"  # neighbour is attached at the parent anchor
    CURRENT_ENDPOINT = "current"  # current node is attached at the parent anchor


@dataclass(frozen=True)
class CompatibilityTable:
    """Which target kinds each source kind may connect to.

    A kind without an entry (or mapped to None) may connect to anything.
    """
    rules: Dict[NodeKind, Optional[FrozenSet[NodeKind]]] = field(default_factory=dict)

    @classmethod
    def primary_family(cls, primary: Iterable[NodeKind]) -> "CompatibilityTable":
        """Kinds in the primary family may only connect inside it."""
        members = frozenset(primary)
        return cls(rules={kind: members for kind in members})

    def allows(self, source: NodeKind, target: NodeKind) -> bool:
        allowed = self.rules.get(source)
        return allowed is None or target in allowed

    def rejection_message(self, source: NodeKind, target: NodeKind) -> str:
        return f"A {source.value} cannot be connected to a {target.value}"


_STANDARD_TRAVERSAL = {
    NodeKind.AVATAR: TraversalMode.EDGE_WALK,
    NodeKind.PARTNER_CARD: TraversalMode.EDGE_WALK,
    NodeKind.SMALL_STICKER: TraversalMode.PARENT_MAP,
    NodeKind.LICENSE: TraversalMode.PARENT_MAP,
}


@dataclass(frozen=True)
class ConnectionFamily:
    """Configuration of the connection subsystem for one kind of board."""
    name: str
    compatibility: CompatibilityTable
    traversal: Dict[NodeKind, TraversalMode] = field(
        default_factory=lambda: dict(_STANDARD_TRAVERSAL)
    )
    parent_anchor_rule: ParentAnchorRule = ParentAnchorRule.OTHER_ENDPOINT
    menu_kinds: FrozenSet[NodeKind] = frozenset()

    def traversal_for(self, kind: NodeKind) -> TraversalMode:
        return self.traversal.get(kind, TraversalMode.EDGE_WALK)


AVATAR_FAMILY = ConnectionFamily(
    name="avatar",
    compatibility=CompatibilityTable.primary_family([NodeKind.AVATAR]),
    menu_kinds=frozenset([NodeKind.AVATAR]),
)

PARTNER_CARD_FAMILY = ConnectionFamily(
    name="partner_card",
    compatibility=CompatibilityTable.primary_family([NodeKind.PARTNER_CARD]),
    menu_kinds=frozenset([NodeKind.PARTNER_CARD]),
)
