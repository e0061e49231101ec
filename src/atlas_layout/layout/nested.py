"""Nested circle layout: every parent circle encloses its children.

Radii are computed bottom-up so each parent knows how large its children are
before they are placed; positions are then assigned top-down starting at the
origin. Both passes walk the containment tree iteratively.
"""

import math

from loguru import logger

from ..geometry import Point, polar_offset
from ..model import LayoutConfig, MapNode
from .hierarchy import ROOT_NODE, Hierarchy
from .radius import default_radius_for_type

# Angle of an only child relative to its parent's centre (pointing up on screen)
SINGLE_CHILD_ANGLE = -math.pi / 2
# Fraction of an only child's radius used as its distance from the parent centre
SINGLE_CHILD_OFFSET = 0.5
# Angle of the first child in a ring; the rest follow at 2π/N steps
RING_START_ANGLE = 0.0


def ring_radius(child_radii: list[float], padding: float, angle_padding: float) -> float:
    """Smallest orbit radius that fits the children evenly around a centre.

    Children sit at equal angular slots of ``2π/N``. For every pair of
    neighbours with radii ``r1`` and ``r2`` the orbit radius ``R`` must satisfy

        2·asin((r1 + r2 + padding) / (2R)) + angle_padding <= 2π / N

    so that neighbouring circles keep ``padding`` between them and an extra
    ``angle_padding`` radians of separation. The angle padding is capped at
    half a slot, which keeps the requirement satisfiable for any N.

    Args:
        child_radii: Radii of the children in placement order.
        padding: Minimum gap between neighbouring child circles.
        angle_padding: Extra angular separation between neighbours in radians.

    Returns:
        The orbit radius for the children's centres.
    """
    count = len(child_radii)
    if count == 0:
        return 0.0
    if count == 1:
        return child_radii[0] * SINGLE_CHILD_OFFSET + padding

    slot = 2 * math.pi / count
    usable = slot - min(angle_padding, slot / 2)
    half_sin = math.sin(usable / 2)

    radius = max(child_radii) + padding
    for i, current in enumerate(child_radii):
        neighbour = child_radii[(i + 1) % count]
        radius = max(radius, (current + neighbour + padding) / (2 * half_sin))
    return radius


def child_angles(count: int) -> list[float]:
    """Placement angles for ``count`` children."""
    if count == 1:
        return [SINGLE_CHILD_ANGLE]
    return [RING_START_ANGLE + 2 * math.pi * i / count for i in range(count)]


def apply_nested_circle_layout(nodes: list[MapNode], config: LayoutConfig | None = None) -> list[MapNode]:
    """Assign an absolute position and visual radius to every node.

    The input is never modified; a new list of nodes is returned in input
    order. The result only depends on node ids, types, parents and order, so
    laying out an already positioned list gives the same positions again.

    Args:
        nodes: Map nodes to lay out.
        config: Layout parameters. Out-of-range values are clamped.

    Returns:
        New nodes with ``position`` and ``visual_radius`` set.
    """
    if not nodes:
        return []

    config = (config or LayoutConfig()).clamped()
    padding = config.nested_padding
    angle_padding = config.nested_angle_padding

    by_id = {node.id: node for node in nodes}
    hierarchy = Hierarchy.from_nodes(nodes)

    # Bottom-up: radii of every node and orbit radius of every parent
    radii: dict[str, float] = {}
    orbits: dict[str, float] = {}
    for node_id in hierarchy.post_order():
        children = hierarchy.children(node_id)
        if not children:
            radii[node_id] = default_radius_for_type(by_id[node_id].node_type)
            continue
        child_radii = [radii[c] for c in children]
        orbits[node_id] = ring_radius(child_radii, padding, angle_padding)
        radii[node_id] = orbits[node_id] + max(child_radii) + padding

    # Several top-level trees share a ring around the origin
    roots = hierarchy.roots()
    if len(roots) > 1:
        orbits[ROOT_NODE] = ring_radius([radii[r] for r in roots], config.ideal_edge_length, angle_padding)

    # Top-down: absolute positions
    positions: dict[str, Point] = {}
    stack: list[tuple[str, Point]] = [(ROOT_NODE, Point(0.0, 0.0))]
    while stack:
        parent_id, center = stack.pop()
        children = hierarchy.children(parent_id)
        if parent_id == ROOT_NODE and len(children) == 1:
            positions[children[0]] = center
            stack.append((children[0], center))
            continue
        orbit = orbits.get(parent_id, 0.0)
        for child_id, angle in zip(children, child_angles(len(children))):
            positions[child_id] = polar_offset(center, orbit, angle)
            stack.append((child_id, positions[child_id]))

    logger.debug(
        "Nested layout placed {} nodes in {} top-level trees", len(positions), len(roots)
    )
    return [node.with_layout(positions[node.id], radii[node.id]) for node in nodes]
