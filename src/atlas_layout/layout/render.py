"""Pyvis rendering of a positioned map."""

from collections.abc import Mapping
from pathlib import Path

from ..model import EdgeType, LayoutConfig, MapEdge, MapNode, NodeType, TravelStep
from .hierarchy import Hierarchy
from .labels import font_size_for, has_centered_label, label_lines
from .overlays import ItemPresence, OverlayKind, compute_item_overlays
from .radius import get_radius_for_node

NON_DISPLAYABLE_EDGE_STATUSES = frozenset({"collapsed", "hidden", "removed"})

NODE_COLORS = {
    NodeType.REGION: "rgba(56, 189, 248, 0.12)",
    NodeType.LOCATION: "rgba(45, 212, 191, 0.15)",
    NodeType.SETTLEMENT: "rgba(250, 204, 21, 0.15)",
    NodeType.DISTRICT: "rgba(250, 204, 21, 0.2)",
    NodeType.EXTERIOR: "rgba(148, 163, 184, 0.25)",
    NodeType.INTERIOR: "rgba(148, 163, 184, 0.3)",
    NodeType.ROOM: "rgba(203, 213, 225, 0.6)",
    NodeType.FEATURE: "#e2e8f0",
}
CURRENT_NODE_BORDER = "#f97316"  # orange
DESTINATION_NODE_BORDER = "#a855f7"  # purple
DEFAULT_BORDER = "#64748b"

EDGE_STYLES = {
    EdgeType.PATH: {"color": "#94a3b8", "width": 1.5},
    EdgeType.ROAD: {"color": "#a16207", "width": 2.5},
    EdgeType.SHORTCUT: {"color": "#22c55e", "width": 1.0, "dashes": True},
    EdgeType.SECRET_PASSAGE: {"color": "#64748b", "width": 1.0, "dashes": True},
}
DEFAULT_EDGE_STYLE = {"color": "#94a3b8", "width": 1.0}
ROUTE_EDGE_STYLE = {"color": "#f97316", "width": 4.0}

OVERLAY_SHAPES = {
    OverlayKind.USEFUL_ITEM: ("square", "#4ade80"),
    OverlayKind.VEHICLE: ("triangle", "#4ade80"),
}


def node_tooltip(node: MapNode) -> str:
    """Name, aliases, description and status, one per line."""
    lines = [node.name]
    if node.aliases:
        lines[0] += f" (aka {', '.join(node.aliases)})"
    if node.description:
        lines.append(node.description)
    if node.status:
        lines.append(f"Status: {node.status}")
    return "\n".join(lines)


def edge_tooltip(edge: MapEdge, names: Mapping[str, str]) -> str:
    if edge.description:
        lines = [edge.description]
    else:
        source = names.get(edge.source_id, "Unknown")
        target = names.get(edge.target_id, "Unknown")
        lines = [f"Path between {source} and {target}"]
    if edge.travel_time:
        lines.append(str(edge.travel_time))
    if edge.status:
        lines.append(f"Status: {edge.status}")
    return "\n".join(lines)


def render_map(
    nodes: list[MapNode],
    edges: list[MapEdge],
    output_path: Path,
    label_offsets: Mapping[str, float] | None = None,
    config: LayoutConfig | None = None,
    current_node_id: str | None = None,
    destination_node_id: str | None = None,
    travel_path: list[TravelStep] | None = None,
    item_presence: Mapping[str, ItemPresence] | None = None,
    title: str | None = None,
) -> None:
    """Render a positioned map with pyvis.

    Args:
        nodes: Positioned nodes (output of the nested layout).
        edges: Map edges; containment edges are not drawn.
        output_path: Path to write the HTML file.
        label_offsets: Extra downward label offsets per node id.
        config: Layout parameters used for label and icon sizing.
        current_node_id: Node to mark as the traveller's location.
        destination_node_id: Node to mark as the selected destination.
        travel_path: Route whose edges are highlighted.
        item_presence: Item and vehicle presence per node id.
        title: Optional page heading.
    """
    from pyvis.network import Network

    config = (config or LayoutConfig()).clamped()
    label_offsets = label_offsets or {}
    hierarchy = Hierarchy.from_nodes(nodes)
    names = {node.id: node.name for node in nodes}

    net = Network(
        height="100vh",
        width="100%",
        bgcolor="#0f172a",
        font_color="#e2e8f0",
        heading=title or "",
    )
    net.toggle_physics(False)

    # Parents first so their circles sit underneath their children
    for node in sorted(nodes, key=lambda n: hierarchy.depth(n.id)):
        radius = get_radius_for_node(node)
        font_size = font_size_for(node)
        lines = label_lines(node, is_parent=bool(hierarchy.children(node.id)))
        if has_centered_label(node.node_type):
            vadjust = -(radius + font_size * len(lines) * config.label_line_height_em / 2)
        else:
            vadjust = config.label_margin_px + label_offsets.get(node.id, 0.0)

        border = DEFAULT_BORDER
        if node.id == current_node_id:
            border = CURRENT_NODE_BORDER
        elif node.id == destination_node_id:
            border = DESTINATION_NODE_BORDER

        net.add_node(
            node.id,
            label="\n".join(lines) or " ",
            title=node_tooltip(node),
            x=node.position.x,
            y=node.position.y,
            fixed=True,
            shape="dot",
            size=radius,
            color={"background": NODE_COLORS[node.node_type], "border": border},
            borderWidth=3 if border != DEFAULT_BORDER else 1,
            font={"size": font_size, "vadjust": vadjust},
        )

    for overlay in compute_item_overlays(nodes, item_presence or {}, config):
        shape, color = OVERLAY_SHAPES[overlay.kind]
        net.add_node(
            f"{overlay.node_id}:{overlay.kind.value}",
            label=" ",
            title=overlay.kind.value.replace("_", " "),
            x=overlay.center.x,
            y=overlay.center.y,
            fixed=True,
            shape=shape,
            size=overlay.size / 2,
            color=color,
            font={"size": 0},
        )

    route_edges = {step.edge_used for step in travel_path or []}
    for edge in edges:
        if edge.type is EdgeType.CONTAINMENT or edge.status in NON_DISPLAYABLE_EDGE_STATUSES:
            continue
        if edge.source_id not in names or edge.target_id not in names:
            continue
        style = dict(EDGE_STYLES.get(edge.type, DEFAULT_EDGE_STYLE))
        if edge.id in route_edges:
            style.update(ROUTE_EDGE_STYLE)
        if edge.type is EdgeType.SHORTCUT:
            style["smooth"] = {"type": "curvedCW", "roundness": 0.3}
        net.add_edge(edge.source_id, edge.target_id, title=edge_tooltip(edge, names), **style)

    net.set_options("""
    {
        "physics": {"enabled": false},
        "interaction": {
            "navigationButtons": true,
            "zoomView": true,
            "dragView": true,
            "dragNodes": false,
            "hover": true,
            "tooltipDelay": 250
        },
        "edges": {
            "smooth": false,
            "selectionWidth": 1.5,
            "hoverWidth": 1.5
        },
        "nodes": {
            "borderWidthSelected": 3
        }
    }
    """)

    net.save_graph(str(output_path))
