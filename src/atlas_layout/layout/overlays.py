"""Item and vehicle icon placement around nodes."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from ..geometry import Point
from ..model import LayoutConfig, MapNode
from .radius import NODE_RADIUS, get_radius_for_node


class OverlayKind(Enum):
    USEFUL_ITEM = "useful_item"
    VEHICLE = "vehicle"


# Clockwise from 12 o'clock
OVERLAY_ANGLES_DEG = {
    OverlayKind.USEFUL_ITEM: 20.0,
    OverlayKind.VEHICLE: 340.0,
}


@dataclass(frozen=True)
class ItemPresence:
    """What the host found at a node; drives icons only, never the layout."""

    has_useful: bool = False
    has_vehicle: bool = False


@dataclass(frozen=True)
class IconOverlay:
    node_id: str
    kind: OverlayKind
    center: Point
    size: float


def compute_item_overlays(
    nodes: Iterable[MapNode],
    presence_by_node: Mapping[str, ItemPresence],
    config: LayoutConfig | None = None,
) -> list[IconOverlay]:
    """Place an icon just outside the node circle for each present item kind."""
    config = (config or LayoutConfig()).clamped()
    size = NODE_RADIUS * 2 * config.item_icon_scale
    overlays: list[IconOverlay] = []
    for node in nodes:
        presence = presence_by_node.get(node.id)
        if presence is None:
            continue
        distance = get_radius_for_node(node) + config.label_margin_px * 1.5
        flags = {
            OverlayKind.USEFUL_ITEM: presence.has_useful,
            OverlayKind.VEHICLE: presence.has_vehicle,
        }
        for kind, present in flags.items():
            if not present:
                continue
            angle = math.radians(OVERLAY_ANGLES_DEG[kind])
            center = Point(
                node.position.x + distance * math.sin(angle),
                node.position.y - distance * math.cos(angle),
            )
            overlays.append(IconOverlay(node.id, kind, center, size))
    return overlays
