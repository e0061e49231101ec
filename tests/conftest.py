"""Pytest fixtures for map layout tests."""

import pytest

from atlas_layout.geometry import Point
from atlas_layout.model import EdgeType, MapData, MapEdge, MapNode, NodeType


def _make_node(
    node_id: str,
    node_type: NodeType = NodeType.LOCATION,
    parent_id: str | None = None,
    name: str | None = None,
    position: tuple[float, float] = (0.0, 0.0),
    status: str = "discovered",
) -> MapNode:
    return MapNode(
        id=node_id,
        name=name or node_id,
        node_type=node_type,
        parent_id=parent_id,
        status=status,
        position=Point(*position),
    )


def _make_edge(
    edge_id: str,
    source: str,
    target: str,
    edge_type: EdgeType = EdgeType.PATH,
    status: str = "open",
    travel_time: float | str | None = None,
) -> MapEdge:
    return MapEdge(
        id=edge_id,
        source_id=source,
        target_id=target,
        type=edge_type,
        status=status,
        travel_time=travel_time,
    )


@pytest.fixture
def make_node():
    """Factory for map nodes with sensible defaults."""
    return _make_node


@pytest.fixture
def make_edge():
    """Factory for map edges, open paths by default."""
    return _make_edge


@pytest.fixture
def region_map() -> MapData:
    """One region with two locations, each containing two rooms."""
    nodes = [
        _make_node("region", NodeType.REGION, name="Northern Reach"),
        _make_node("loc_a", NodeType.LOCATION, "region", name="Harbor"),
        _make_node("loc_b", NodeType.LOCATION, "region", name="Keep"),
        _make_node("room_a1", NodeType.ROOM, "loc_a", name="Room A"),
        _make_node("room_a2", NodeType.ROOM, "loc_a", name="Dock"),
        _make_node("room_b1", NodeType.ROOM, "loc_b", name="Hall"),
        _make_node("room_b2", NodeType.ROOM, "loc_b", name="Armory"),
    ]
    edges = [
        _make_edge("c1", "region", "loc_a", EdgeType.CONTAINMENT),
        _make_edge("c2", "region", "loc_b", EdgeType.CONTAINMENT),
        _make_edge("e_ab", "loc_a", "loc_b"),
        _make_edge("e_a", "room_a1", "room_a2"),
        _make_edge("e_b", "room_b1", "room_b2"),
        _make_edge("e_dock_hall", "room_a2", "room_b1", EdgeType.SHORTCUT),
    ]
    return MapData(nodes=nodes, edges=edges)


@pytest.fixture
def travel_map() -> MapData:
    """Four rooms in a loop inside one location, plus an isolated room.

    a -e1- b -e2- c -e3(rumored)- d -e4- a; z has only a containment edge.
    """
    nodes = [
        _make_node("world", NodeType.REGION),
        _make_node("town", NodeType.LOCATION, "world"),
        _make_node("a", NodeType.ROOM, "town"),
        _make_node("b", NodeType.ROOM, "town"),
        _make_node("c", NodeType.ROOM, "town"),
        _make_node("d", NodeType.ROOM, "town"),
        _make_node("z", NodeType.ROOM, "town"),
    ]
    edges = [
        _make_edge("e1", "a", "b"),
        _make_edge("e2", "b", "c"),
        _make_edge("e3", "c", "d", status="rumored"),
        _make_edge("e4", "d", "a"),
        _make_edge("cz", "a", "z", EdgeType.CONTAINMENT),
    ]
    return MapData(nodes=nodes, edges=edges)


@pytest.fixture
def deep_map() -> MapData:
    """Uneven nesting across every node type, with some wide sibling groups."""
    nodes = [
        _make_node("realm", NodeType.REGION, name="The Sundered Realm"),
        _make_node("coast", NodeType.LOCATION, "realm", name="Storm Coast"),
        _make_node("forest", NodeType.LOCATION, "realm", name="Whispering Forest"),
        _make_node("city", NodeType.SETTLEMENT, "coast", name="Port Varn"),
        _make_node("docks", NodeType.DISTRICT, "city", name="Dockside District"),
        _make_node("market", NodeType.DISTRICT, "city", name="Market Ward"),
        _make_node("tavern", NodeType.EXTERIOR, "docks", name="The Drowned Rat"),
        _make_node("taproom", NodeType.INTERIOR, "tavern", name="Taproom"),
        _make_node("cellar", NodeType.ROOM, "taproom", name="Cellar"),
        _make_node("barrel", NodeType.FEATURE, "cellar", name="Leaking Barrel"),
        _make_node("glade", NodeType.SETTLEMENT, "forest", name="Moonlit Glade"),
    ]
    for i in range(7):
        nodes.append(_make_node(f"stall_{i}", NodeType.FEATURE, "market", name=f"Stall {i}"))
    return MapData(nodes=nodes, edges=[])
