"""Travel routes over path-like edges, aware of containment."""

from __future__ import annotations

import math

import networkx as nx
from loguru import logger

from .layout.hierarchy import Hierarchy
from .model import MapData, MapEdge, TravelStep

# Multipliers applied to an edge's base travel cost; missing statuses are impassable
EDGE_STATUS_TRAVEL_COSTS: dict[str, float] = {
    "open": 1,
    "accessible": 1,
    "active": 1,
    "one_way": 1,
    "rumored": 5,
    "closed": math.inf,
    "locked": math.inf,
    "blocked": math.inf,
    "hidden": math.inf,
    "collapsed": math.inf,
    "removed": math.inf,
    "inactive": math.inf,
}
BLOCKED_NODE_STATUS = "blocked"
DEFAULT_EDGE_COST = 1.0


def parse_travel_time(value: float | str | None) -> float | None:
    """Numeric travel time, or None when absent, non-numeric or not positive."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def edge_travel_cost(edge: MapEdge) -> float:
    """Weight of an edge for routing; ``math.inf`` when it cannot be travelled."""
    if not edge.type.is_travel:
        return math.inf
    factor = EDGE_STATUS_TRAVEL_COSTS.get(edge.status, math.inf)
    base = parse_travel_time(edge.travel_time) or DEFAULT_EDGE_COST
    return base * factor


def build_travel_graph(map_data: MapData) -> nx.DiGraph:
    """Build the weighted travel graph.

    Only travel-capable edges whose endpoints exist and are not blocked are
    included. Edges are bidirectional unless their status is ``one_way``. When
    two edges connect the same nodes in the same direction, the cheaper one
    (first on ties) is kept.

    Args:
        map_data: The host's map snapshot.

    Returns:
        DiGraph with ``weight`` and ``edge_id`` attributes on every edge.
    """
    graph = nx.DiGraph()
    known = map_data.node_by_id()
    for node_id, node in known.items():
        if node.status != BLOCKED_NODE_STATUS:
            graph.add_node(node_id)

    for edge in map_data.edges:
        if edge.source_id not in known or edge.target_id not in known:
            logger.warning("Skipping edge {} with a missing endpoint", edge.id)
            continue
        if edge.source_id not in graph or edge.target_id not in graph:
            continue
        cost = edge_travel_cost(edge)
        if math.isinf(cost):
            continue
        directions = [(edge.source_id, edge.target_id)]
        if edge.status != "one_way":
            directions.append((edge.target_id, edge.source_id))
        for source, target in directions:
            if source == target:
                continue
            existing = graph.get_edge_data(source, target)
            if existing is not None and existing["weight"] <= cost:
                continue
            graph.add_edge(source, target, weight=cost, edge_id=edge.id)
    return graph


def is_same_place(hierarchy: Hierarchy, current_id: str, destination_id: str) -> bool:
    """True when the destination is the current node, one of its ancestors or descendants."""
    if current_id == destination_id:
        return True
    return hierarchy.is_ancestor(destination_id, current_id) or hierarchy.is_ancestor(
        current_id, destination_id
    )


def find_travel_path(
    map_data: MapData,
    current_id: str,
    destination_id: str,
    travel_graph: nx.DiGraph | None = None,
    hierarchy: Hierarchy | None = None,
) -> list[TravelStep] | None:
    """Cheapest route from ``current_id`` to ``destination_id``.

    Args:
        map_data: The host's map snapshot.
        current_id: Node the traveller is at.
        destination_id: Node the traveller wants to reach.
        travel_graph: Optional prebuilt result of :func:`build_travel_graph`.
        hierarchy: Optional prebuilt containment hierarchy.

    Returns:
        Steps after the start up to and including the destination, or None if
        no travel is needed (same place, ancestor or descendant) or no route
        exists.
    """
    hierarchy = hierarchy or Hierarchy.from_nodes(map_data.nodes)
    if is_same_place(hierarchy, current_id, destination_id):
        return None

    graph = travel_graph if travel_graph is not None else build_travel_graph(map_data)
    if current_id not in graph or destination_id not in graph:
        logger.debug("No route: {} or {} is not on the travel graph", current_id, destination_id)
        return None

    try:
        path = nx.dijkstra_path(graph, current_id, destination_id, weight="weight")
    except nx.NetworkXNoPath:
        logger.debug("No route from {} to {}", current_id, destination_id)
        return None

    return [
        TravelStep(node_id=target, edge_used=graph.edges[source, target]["edge_id"])
        for source, target in zip(path, path[1:])
    ]


class TravelRouter:
    """Memoising router for one map snapshot at a time.

    Results are cached by ``(current, destination, graph_version)``; replacing
    the map bumps the version and rebuilds the travel graph.
    """

    def __init__(self, map_data: MapData | None = None):
        self.graph_version = 0
        self._cache: dict[tuple[str, str, int], list[TravelStep] | None] = {}
        self._set(map_data or MapData())

    def _set(self, map_data: MapData) -> None:
        self.map_data = map_data
        self.travel_graph = build_travel_graph(map_data)
        self.hierarchy = Hierarchy.from_nodes(map_data.nodes)

    def update(self, map_data: MapData) -> None:
        self._set(map_data)
        self.graph_version += 1
        self._cache.clear()

    def route(self, current_id: str, destination_id: str) -> list[TravelStep] | None:
        key = (current_id, destination_id, self.graph_version)
        if key not in self._cache:
            self._cache[key] = find_travel_path(
                self.map_data,
                current_id,
                destination_id,
                travel_graph=self.travel_graph,
                hierarchy=self.hierarchy,
            )
        steps = self._cache[key]
        return list(steps) if steps is not None else None
