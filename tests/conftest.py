"""
Shared test fixtures for canvaslink tests.

Provides reusable nodes, stores, settings and a deterministic scheduler
for testing the drafting, editing, animation and rendering layers.
"""

import pytest

from canvaslink.animation.scheduler import ManualScheduler
from canvaslink.editing.pointer import PointerHub, ViewportTransform
from canvaslink.scene.abstraction import Node, NodeKind
from canvaslink.scene.stores import ConnectionStore, NodeStore
from canvaslink.settings import ViewSettings


@pytest.fixture
def node_a() -> Node:
    """An avatar at the origin."""
    return Node(id="a", kind=NodeKind.AVATAR, x=0.0, y=0.0, size=418.0)


@pytest.fixture
def node_b() -> Node:
    """An avatar 1000 units to the right of node_a."""
    return Node(id="b", kind=NodeKind.AVATAR, x=1000.0, y=0.0, size=418.0)


@pytest.fixture
def partner_card() -> Node:
    """A partner card below the avatars."""
    return Node(id="card", kind=NodeKind.PARTNER_CARD, x=0.0, y=1000.0, size=300.0)


@pytest.fixture
def nodes(node_a, node_b, partner_card) -> NodeStore:
    return NodeStore([node_a, node_b, partner_card])


@pytest.fixture
def connections() -> ConnectionStore:
    return ConnectionStore()


@pytest.fixture
def settings() -> ViewSettings:
    return ViewSettings()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def hub() -> PointerHub:
    return PointerHub()


@pytest.fixture
def transform() -> ViewportTransform:
    return ViewportTransform()


@pytest.fixture
def linked(nodes, connections):
    """Stores with one connection a[1] -> b[6] bent through its midpoint."""
    connection = connections.add_connection(
        "a", 1, "b", 6, control_points=[(709.0, 209.0)], connection_id="ab",
    )
    return nodes, connections, connection
