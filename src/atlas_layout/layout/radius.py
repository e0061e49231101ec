"""Rendered circle radius per node."""

from ..model import MapNode, NodeType

NODE_RADIUS = 20.0

# Multipliers of NODE_RADIUS used until the layout has cached a visual radius
TYPE_RADIUS_FACTORS: dict[NodeType, float] = {
    NodeType.REGION: 2.4,
    NodeType.LOCATION: 2.0,
    NodeType.SETTLEMENT: 1.8,
    NodeType.DISTRICT: 1.6,
    NodeType.EXTERIOR: 1.4,
    NodeType.INTERIOR: 1.2,
    NodeType.ROOM: 0.8,
    NodeType.FEATURE: 0.6,
}
FALLBACK_RADIUS_FACTOR = 0.6


def default_radius_for_type(node_type: NodeType) -> float:
    return NODE_RADIUS * TYPE_RADIUS_FACTORS.get(node_type, FALLBACK_RADIUS_FACTOR)


def get_radius_for_node(node: MapNode) -> float:
    """Cached visual radius if the layout set one, else the per-type default."""
    if node.visual_radius:
        return node.visual_radius
    return default_radius_for_type(node.node_type)
