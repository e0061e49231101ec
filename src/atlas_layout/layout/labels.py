"""Label size estimation and overlap handling.

Label boxes are estimated from the wrapped line count and an average character
width rather than measured text. Overlaps are only resolved locally: between
neighbouring siblings (ordered by x) and between a node and its feature
descendants.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..model import LayoutConfig, MapNode, NodeType
from .hierarchy import Hierarchy
from .radius import get_radius_for_node
from .text import MAX_LABEL_LINES, split_text_into_lines

SMALL_FONT_TYPES = frozenset({NodeType.FEATURE, NodeType.ROOM, NodeType.INTERIOR})
SMALL_FONT_SIZE = 7
DEFAULT_FONT_SIZE = 12
AVERAGE_CHAR_WIDTH_EM = 0.6
SMALL_LABEL_CHARS = 20
LARGE_LABEL_CHARS = 25


@dataclass(frozen=True)
class LabelBox:
    """Axis-aligned label rectangle in map coordinates (y grows downwards)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def overlaps(self, other: LabelBox) -> bool:
        if self.is_empty or other.is_empty:
            return False
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )


def is_small_font_type(node_type: NodeType) -> bool:
    return node_type in SMALL_FONT_TYPES


def has_centered_label(node_type: NodeType) -> bool:
    """Feature labels sit on the node instead of below it."""
    return node_type is NodeType.FEATURE


def font_size_for(node: MapNode) -> int:
    return SMALL_FONT_SIZE if is_small_font_type(node.node_type) else DEFAULT_FONT_SIZE


def label_lines(node: MapNode, is_parent: bool) -> list[str]:
    """Wrapped label for a node; parents with large fonts get wider lines."""
    wide = is_parent and not is_small_font_type(node.node_type)
    max_chars = LARGE_LABEL_CHARS if wide else SMALL_LABEL_CHARS
    return split_text_into_lines(node.name, max_chars, MAX_LABEL_LINES)


def estimate_label_box(node: MapNode, lines: list[str], offset: float, config: LayoutConfig) -> LabelBox:
    """Estimate the label rectangle of ``node`` pushed down by ``offset``."""
    font_size = font_size_for(node)
    height = len(lines) * font_size * config.label_line_height_em
    width = max((len(line) * font_size * AVERAGE_CHAR_WIDTH_EM for line in lines), default=0.0)
    x = node.position.x - width / 2
    if has_centered_label(node.node_type):
        return LabelBox(x, node.position.y - height / 2, width, height * 2)
    top = node.position.y + get_radius_for_node(node) + config.label_margin_px + offset
    return LabelBox(x, top, width, height)


def calculate_label_offsets(nodes: list[MapNode], config: LayoutConfig | None = None) -> dict[str, float]:
    """Compute extra downward label offsets that avoid the common overlaps.

    Sibling pass: siblings are ordered by x and each neighbouring pair whose
    boxes overlap is separated by pushing the right label below the left one
    (plus ``label_overlap_margin_px``). Feature labels are never pushed; when
    the right sibling is a feature the left one moves below it instead.

    Descendant pass: every non-feature label is pushed below any feature
    descendant's label it collides with.

    Args:
        nodes: Positioned nodes (output of the layout).
        config: Label parameters. Out-of-range values are clamped.

    Returns:
        Dictionary mapping every node id to its vertical offset (>= 0).
    """
    config = (config or LayoutConfig()).clamped()
    margin = config.label_overlap_margin_px
    by_id = {node.id: node for node in nodes}
    hierarchy = Hierarchy.from_nodes(nodes)

    lines = {
        node.id: label_lines(node, is_parent=bool(hierarchy.children(node.id)))
        for node in nodes
    }
    offsets: dict[str, float] = {node.id: 0.0 for node in nodes}

    def box(node: MapNode) -> LabelBox:
        return estimate_label_box(node, lines[node.id], offsets[node.id], config)

    def push_below(moving: MapNode, fixed: MapNode) -> None:
        offsets[moving.id] += box(fixed).bottom - box(moving).y + margin

    for parent_id in [None, *hierarchy.parent_of]:
        child_ids = hierarchy.roots() if parent_id is None else hierarchy.children(parent_id)
        siblings = sorted((by_id[c] for c in child_ids), key=lambda n: n.position.x)
        for left, right in zip(siblings, siblings[1:]):
            if not box(left).overlaps(box(right)):
                continue
            if right.node_type is not NodeType.FEATURE:
                push_below(right, left)
            elif left.node_type is not NodeType.FEATURE:
                push_below(left, right)

    features = [node for node in by_id.values() if node.node_type is NodeType.FEATURE]
    for node in by_id.values():
        if node.node_type is NodeType.FEATURE:
            continue
        descendants = hierarchy.descendants(node.id)
        for feature in features:
            if feature.id in descendants and box(node).overlaps(box(feature)):
                push_below(node, feature)

    return offsets
