"""Node context menu and detail modal state.

Only the state lives here; drawing the menu and the modal is up to the host.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..editing.families import AVATAR_FAMILY, ConnectionFamily
from ..scene.abstraction import Point
from ..scene.stores import NodeStore

logger = logging.getLogger(__name__)


class NodeContextMenu:
    """Right-click menu for the primary node kind of a family."""

    def __init__(self, nodes: NodeStore, family: ConnectionFamily = AVATAR_FAMILY):
        self.nodes = nodes
        self.family = family
        self.node_id: Optional[str] = None
        self.position = Point(0, 0)

    @property
    def is_open(self) -> bool:
        return self.node_id is not None

    def open(self, node_id: str, client_x: float, client_y: float) -> bool:
        """Open the menu for a node at the pointer position.

        Any menu already open is closed first; nodes outside the family's
        menu kinds get no menu.
        """
        self.close()
        node = self.nodes.get(node_id)
        if node is None or node.kind not in self.family.menu_kinds:
            return False
        self.node_id = node_id
        self.position = Point(client_x, client_y)
        return True

    def close(self):
        self.node_id = None


@dataclass
class ModalState:
    visible: bool = False
    node_id: Optional[str] = None
    current_personal_id: str = ""


class NodeDetailModal:
    """Modal for editing the user data attached to a node."""

    def __init__(self, nodes: NodeStore, family: ConnectionFamily = AVATAR_FAMILY):
        self.nodes = nodes
        self.family = family
        self.state = ModalState()

    def open(self, node_id: str) -> bool:
        node = self.nodes.get(node_id)
        if node is None or node.kind not in self.family.menu_kinds:
            return False
        self.state = ModalState(
            visible=True,
            node_id=node_id,
            current_personal_id=node.personal_id or "",
        )
        return True

    def apply(self, node_id: str, user_data: Optional[Dict[str, Any]]) -> bool:
        """Write the modal's data to the node; None resets it."""
        if user_data is None:
            logger.debug(f"Resetting user data of {node_id}")
        return self.nodes.update_node_user_data(node_id, user_data)

    def close(self):
        self.state = ModalState()
