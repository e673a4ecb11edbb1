"""
canvaslink - Curved Connection Editor for Infinite-Canvas Boards

Anchor geometry, smooth multi-point connection curves, two-click connection
drafting, control point editing and ancestor-chain highlight animation for
avatar and partner-card boards.
"""

__version__ = "0.1.0"
__author__ = "canvaslink Team"

from .scene.abstraction import Connection, Node, NodeKind, Point
from .scene.stores import ConnectionStore, NodeStore
from .settings import ViewSettings
from .editing.families import AVATAR_FAMILY, PARTNER_CARD_FAMILY
from .editor import ConnectionEditor

__all__ = [
    "Connection",
    "Node",
    "NodeKind",
    "Point",
    "ConnectionStore",
    "NodeStore",
    "ViewSettings",
    "AVATAR_FAMILY",
    "PARTNER_CARD_FAMILY",
    "ConnectionEditor",
]
