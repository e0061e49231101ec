"""Map graph data model: nodes, edges, view box and layout parameters."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any

from loguru import logger

from .geometry import Point

# Legacy parent id that the host uses for top-level nodes
UNIVERSE_PARENT = "Universe"

VIEWBOX_WIDTH_INITIAL = 1000
VIEWBOX_HEIGHT_INITIAL = 750


class NodeType(Enum):
    """Containment levels, ordered from the largest to the smallest."""

    REGION = "region"
    LOCATION = "location"
    SETTLEMENT = "settlement"
    DISTRICT = "district"
    EXTERIOR = "exterior"
    INTERIOR = "interior"
    ROOM = "room"
    FEATURE = "feature"

    @classmethod
    def parse(cls, value: str | None) -> NodeType:
        try:
            return cls(value)
        except ValueError:
            return cls.FEATURE


class EdgeType(Enum):
    """Kinds of map edges. Only ``CONTAINMENT`` is not travel-capable."""

    PATH = "path"
    SHORTCUT = "shortcut"
    CONTAINMENT = "containment"
    ROAD = "road"
    SEA_ROUTE = "sea route"
    DOOR = "door"
    TELEPORTER = "teleporter"
    SECRET_PASSAGE = "secret_passage"
    RIVER_CROSSING = "river_crossing"
    TEMPORARY_BRIDGE = "temporary_bridge"
    BOARDING_HOOK = "boarding_hook"

    @property
    def is_travel(self) -> bool:
        return self is not EdgeType.CONTAINMENT

    @classmethod
    def parse(cls, value: str | None) -> EdgeType:
        try:
            return cls(value)
        except ValueError:
            return cls.PATH


@dataclass(frozen=True)
class MapNode:
    """A place on the map. ``parent_id`` expresses containment only."""

    id: str
    name: str
    node_type: NodeType = NodeType.LOCATION
    parent_id: str | None = None
    aliases: tuple[str, ...] = ()
    description: str = ""
    status: str = "discovered"
    position: Point = Point(0.0, 0.0)
    visual_radius: float | None = None  # Cached by the layout engine

    def with_layout(self, position: Point, visual_radius: float) -> MapNode:
        return replace(self, position=position, visual_radius=visual_radius)


@dataclass(frozen=True)
class MapEdge:
    """A connection between two nodes."""

    id: str
    source_id: str
    target_id: str
    type: EdgeType = EdgeType.PATH
    status: str = "open"
    description: str = ""
    travel_time: float | str | None = None


@dataclass
class MapData:
    """Snapshot of the host's map graph."""

    nodes: list[MapNode] = field(default_factory=list)
    edges: list[MapEdge] = field(default_factory=list)

    def node_by_id(self) -> dict[str, MapNode]:
        return {node.id: node for node in self.nodes}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapData:
        """Build from the host's ``{nodes: [...], edges: [...]}`` JSON shape.

        Nodes look like ``{id, placeName, position: {x, y}, data: {...}}`` with
        ``nodeType`` (or ``type``), ``parentNodeId``, ``aliases``, ``status``,
        ``description`` and ``visualRadius`` inside ``data``. Flat records with
        the same keys at the top level are accepted too.

        Records that are not mappings are skipped with a warning, and null or
        non-numeric fields fall back to their defaults.

        Raises:
            ValueError: If a node or edge has no ``id``.
        """
        nodes = []
        for raw in data.get("nodes") or []:
            if not isinstance(raw, dict):
                logger.warning("Skipping map node that is not an object: {!r}", raw)
                continue
            nodes.append(_node_from_dict(raw))
        edges = []
        for raw in data.get("edges") or []:
            if not isinstance(raw, dict):
                logger.warning("Skipping map edge that is not an object: {!r}", raw)
                continue
            edge = _edge_from_dict(raw)
            if edge is not None:
                edges.append(edge)
        return cls(nodes=nodes, edges=edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [_node_to_dict(n) for n in self.nodes],
            "edges": [_edge_to_dict(e) for e in self.edges],
        }


def _merged_data(raw: dict[str, Any]) -> dict[str, Any]:
    """Top-level keys overlaid with the ``data`` sub-object, if it is one."""
    data = raw.get("data")
    return {**raw, **data} if isinstance(data, dict) else dict(raw)


def _as_float(value: Any, default: float | None, what: str) -> float | None:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric {} {!r}", what, value)
        return default
    if not math.isfinite(number):
        logger.warning("Ignoring non-finite {} {!r}", what, value)
        return default
    return number


def _node_from_dict(raw: dict[str, Any]) -> MapNode:
    if "id" not in raw:
        raise ValueError(f"Map node without an id: {raw!r}")
    data = _merged_data(raw)
    position = raw.get("position")
    if not isinstance(position, dict):
        position = {}
    parent_id = data.get("parentNodeId")
    aliases = data.get("aliases")
    visual_radius = _as_float(data.get("visualRadius"), None, "visual radius")
    return MapNode(
        id=str(raw["id"]),
        name=str(raw.get("placeName") or raw.get("name") or raw["id"]),
        node_type=NodeType.parse(data.get("nodeType") or data.get("type")),
        parent_id=str(parent_id) if parent_id else None,
        aliases=tuple(str(a) for a in aliases) if isinstance(aliases, (list, tuple)) else (),
        description=data.get("description") or "",
        status=data.get("status") or "discovered",
        position=Point(
            _as_float(position.get("x"), 0.0, "x coordinate"),
            _as_float(position.get("y"), 0.0, "y coordinate"),
        ),
        visual_radius=visual_radius if visual_radius and visual_radius > 0 else None,
    )


def _edge_from_dict(raw: dict[str, Any]) -> MapEdge | None:
    if "id" not in raw:
        raise ValueError(f"Map edge without an id: {raw!r}")
    data = _merged_data(raw)
    source = data.get("sourceNodeId")
    target = data.get("targetNodeId")
    if not source or not target:
        logger.warning("Skipping edge {} without both endpoints", raw["id"])
        return None
    return MapEdge(
        id=str(raw["id"]),
        source_id=str(source),
        target_id=str(target),
        type=EdgeType.parse(data.get("type")),
        status=data.get("status") or "open",
        description=data.get("description") or "",
        travel_time=data.get("travelTime"),
    )


def _node_to_dict(node: MapNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "description": node.description,
        "status": node.status,
        "nodeType": node.node_type.value,
    }
    if node.aliases:
        data["aliases"] = list(node.aliases)
    if node.parent_id:
        data["parentNodeId"] = node.parent_id
    if node.visual_radius is not None:
        data["visualRadius"] = node.visual_radius
    return {
        "id": node.id,
        "placeName": node.name,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": data,
    }


def _edge_to_dict(edge: MapEdge) -> dict[str, Any]:
    data: dict[str, Any] = {"type": edge.type.value, "status": edge.status}
    if edge.description:
        data["description"] = edge.description
    if edge.travel_time is not None:
        data["travelTime"] = edge.travel_time
    return {
        "id": edge.id,
        "sourceNodeId": edge.source_id,
        "targetNodeId": edge.target_id,
        "data": data,
    }


@dataclass(frozen=True)
class TravelStep:
    """One hop of a route: the node reached and the edge used to reach it."""

    node_id: str
    edge_used: str


@dataclass(frozen=True)
class ViewBox:
    """Visible window into map coordinates."""

    min_x: float
    min_y: float
    width: float
    height: float

    @classmethod
    def default(
        cls,
        base_width: float = VIEWBOX_WIDTH_INITIAL,
        base_height: float = VIEWBOX_HEIGHT_INITIAL,
    ) -> ViewBox:
        return cls(-base_width / 2, -base_height / 2, base_width, base_height)

    @classmethod
    def parse(cls, text: str | None, fallback: ViewBox | None = None) -> ViewBox:
        """Parse ``"min_x min_y width height"``; malformed input yields ``fallback``."""
        fallback = fallback or cls.default()
        if not text:
            return fallback
        try:
            min_x, min_y, width, height = (float(part) for part in text.split())
        except ValueError:
            logger.warning("Ignoring malformed view box {!r}", text)
            return fallback
        if width <= 0 or height <= 0:
            logger.warning("Ignoring view box with non-positive size {!r}", text)
            return fallback
        return cls(min_x, min_y, width, height)

    def __str__(self) -> str:
        return f"{self.min_x:g} {self.min_y:g} {self.width:g} {self.height:g}"

    def shifted(self, dx: float, dy: float) -> ViewBox:
        return replace(self, min_x=self.min_x + dx, min_y=self.min_y + dy)


# (min, max) for each LayoutConfig field
LAYOUT_CONFIG_LIMITS: dict[str, tuple[float, float]] = {
    "ideal_edge_length": (10.0, 1000.0),
    "nested_padding": (0.0, 60.0),
    "nested_angle_padding": (0.0, 0.5),
    "label_margin_px": (0.0, 50.0),
    "label_line_height_em": (0.5, 3.0),
    "label_overlap_margin_px": (0.0, 10.0),
    "item_icon_scale": (0.2, 1.0),
}


@dataclass(frozen=True)
class LayoutConfig:
    """Layout and label parameters."""

    ideal_edge_length: float = 120.0
    nested_padding: float = 5.0
    nested_angle_padding: float = 0.25
    label_margin_px: float = 10.0
    label_line_height_em: float = 1.1
    label_overlap_margin_px: float = 2.0
    item_icon_scale: float = 0.3

    def clamped(self) -> LayoutConfig:
        """Return a copy with every field clamped into ``LAYOUT_CONFIG_LIMITS``."""
        values = asdict(self)
        defaults = {f.name: f.default for f in fields(LayoutConfig)}
        for name, (low, high) in LAYOUT_CONFIG_LIMITS.items():
            value = float(values[name])
            if math.isnan(value):
                value = defaults[name]
            values[name] = min(max(value, low), high)
        return LayoutConfig(**values)
