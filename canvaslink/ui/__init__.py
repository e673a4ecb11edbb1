"""Auxiliary node UI state: context menu and detail modal."""

from .menus import ModalState, NodeContextMenu, NodeDetailModal

__all__ = ["ModalState", "NodeContextMenu", "NodeDetailModal"]
