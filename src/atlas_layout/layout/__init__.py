"""Nested circle layout, label placement and rendering for hierarchical maps."""

from .hierarchy import ROOT_NODE, Hierarchy, resolve_parents
from .labels import LabelBox, calculate_label_offsets, estimate_label_box
from .nested import apply_nested_circle_layout, ring_radius
from .overlays import IconOverlay, ItemPresence, OverlayKind, compute_item_overlays
from .radius import NODE_RADIUS, default_radius_for_type, get_radius_for_node
from .render import render_map
from .text import MAX_LABEL_LINES, split_text_into_lines

__all__ = [
    "ROOT_NODE",
    "Hierarchy",
    "resolve_parents",
    "LabelBox",
    "calculate_label_offsets",
    "estimate_label_box",
    "apply_nested_circle_layout",
    "ring_radius",
    "IconOverlay",
    "ItemPresence",
    "OverlayKind",
    "compute_item_overlays",
    "NODE_RADIUS",
    "default_radius_for_type",
    "get_radius_for_node",
    "render_map",
    "MAX_LABEL_LINES",
    "split_text_into_lines",
]
