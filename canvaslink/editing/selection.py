"""Connection selection."""

import logging
from typing import List

from ..scene.stores import ConnectionStore, NodeStore

logger = logging.getLogger(__name__)


class ConnectionSelection:
    """Click / ctrl-click selection of connections."""

    def __init__(self, nodes: NodeStore, connections: ConnectionStore):
        self.nodes = nodes
        self.connections = connections
        self.selected_ids: List[str] = []

    def click(self, connection_id: str, additive: bool = False) -> List[str]:
        """Select a connection.

        Additive clicks toggle membership; plain clicks select only this
        connection, or clear the selection if it was the sole selected one.
        Node selection is cleared either way.
        """
        if additive:
            if connection_id in self.selected_ids:
                self.selected_ids.remove(connection_id)
            else:
                self.selected_ids.append(connection_id)
        elif self.selected_ids == [connection_id]:
            self.selected_ids = []
        else:
            self.selected_ids = [connection_id]

        self.nodes.deselect_all()
        return list(self.selected_ids)

    def clear(self):
        self.selected_ids = []

    def delete_selected(self) -> int:
        """Remove all selected connections from the store."""
        if not self.selected_ids:
            return 0
        removed = sum(
            1 for connection_id in self.selected_ids
            if self.connections.remove_connection(connection_id)
        )
        logger.info(f"Deleted {removed} connections")
        self.selected_ids = []
        return removed
