"""Write positioned maps and summaries."""

import json
from collections import Counter
from collections.abc import Mapping
from pathlib import Path

from .layout.hierarchy import Hierarchy
from .model import MapData, MapNode, TravelStep


def positioned_snapshot(
    nodes: list[MapNode],
    label_offsets: Mapping[str, float],
) -> dict:
    """JSON-ready positioned nodes with their label offsets."""
    snapshot = MapData(nodes=list(nodes)).to_dict()
    for record in snapshot["nodes"]:
        record["data"]["labelOffset"] = label_offsets.get(record["id"], 0.0)
    return {"nodes": snapshot["nodes"]}


def generate_json(
    nodes: list[MapNode],
    label_offsets: Mapping[str, float],
    output_file: Path,
) -> None:
    """Write the positioned snapshot so a host can skip relayout.

    Args:
        nodes: Positioned nodes.
        label_offsets: Label offsets per node id.
        output_file: Path to write the JSON file.
    """
    with open(output_file, "w") as f:
        json.dump(positioned_snapshot(nodes, label_offsets), f, indent=2)


def format_route(steps: list[TravelStep] | None, start_id: str, names: Mapping[str, str]) -> list[str]:
    """Indented route chain, one line per node, starting at ``start_id``."""
    if not steps:
        return []
    lines = [names.get(start_id, start_id)]
    for i, step in enumerate(steps, start=1):
        indent = "  " * i
        lines.append(f"{indent}-> {names.get(step.node_id, step.node_id)}  (via {step.edge_used})")
    return lines


def generate_summary(
    nodes: list[MapNode],
    label_offsets: Mapping[str, float],
    output_file: Path,
) -> None:
    """Write a short human-readable layout summary.

    Args:
        nodes: Positioned nodes.
        label_offsets: Label offsets per node id.
        output_file: Path to write the summary file.
    """
    hierarchy = Hierarchy.from_nodes(nodes)
    type_counts = Counter(node.node_type.value for node in nodes)
    shifted = sorted(
        ((offset, node_id) for node_id, offset in label_offsets.items() if offset > 0),
        reverse=True,
    )
    names = {node.id: node.name for node in nodes}

    with open(output_file, "w") as f:
        f.write("=" * 60 + "\n")
        f.write("Map Layout Summary\n")
        f.write("=" * 60 + "\n\n")

        f.write(f"Total nodes: {len(nodes)}\n")
        f.write(f"Top-level nodes: {len(hierarchy.roots())}\n")
        max_depth = max((hierarchy.depth(node.id) for node in nodes), default=0)
        f.write(f"Deepest nesting: {max_depth}\n\n")

        f.write("Nodes by type:\n")
        f.write("-" * 40 + "\n")
        for node_type, count in type_counts.most_common():
            f.write(f"  {count:4d}  {node_type}\n")

        if nodes:
            largest = max(nodes, key=lambda n: n.visual_radius or 0.0)
            f.write(f"\nLargest circle: {largest.name} (r={largest.visual_radius or 0.0:.1f})\n")

        f.write(f"\nLabels shifted to avoid overlaps: {len(shifted)}\n")
        for offset, node_id in shifted[:10]:
            f.write(f"  {offset:6.1f} px  {names.get(node_id, node_id)}\n")
