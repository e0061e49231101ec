"""CLI for atlas-layout."""

import argparse
import json
import sys
from pathlib import Path

from .config import AtlasSettings, layout_config_from_mapping, load_config, settings_from_mapping
from .export import format_route, generate_json, generate_summary
from .layout import Hierarchy, ItemPresence, apply_nested_circle_layout, calculate_label_offsets, render_map
from .model import MapData, MapNode
from .pathfinding import find_travel_path, is_same_place


def load_map(map_path: Path) -> MapData:
    """Read a host map snapshot (``{nodes, edges}``) from JSON."""
    with open(map_path) as f:
        return MapData.from_dict(json.load(f))


def load_item_presence(path: Path) -> dict[str, ItemPresence]:
    """Read ``{nodeId: {hasUseful, hasVehicle}}`` from JSON."""
    with open(path) as f:
        raw = json.load(f)
    return {
        node_id: ItemPresence(
            has_useful=bool(flags.get("hasUseful")),
            has_vehicle=bool(flags.get("hasVehicle")),
        )
        for node_id, flags in raw.items()
    }


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments shared between subcommands."""
    parser.add_argument("--map", type=Path, help="Map snapshot JSON file")
    parser.add_argument("--config", type=Path, help="Path to YAML config file")
    parser.add_argument("--padding", type=float, help="Gap between nested circles")
    parser.add_argument("--angle-padding", type=float, help="Extra angle between siblings (radians)")
    parser.add_argument("--overlap-margin", type=float, help="Gap left between pushed labels")


def resolve_settings(args: argparse.Namespace, parser: argparse.ArgumentParser) -> AtlasSettings:
    """Load config, apply command line overrides and validate arguments."""
    settings = AtlasSettings()
    if args.config:
        config = load_config(args.config)
        settings = settings_from_mapping(config)
        if not args.map and "map" in config:
            args.map = Path(config["map"])

    if not args.map:
        parser.error("--map is required")
    args.map = args.map.resolve()

    overrides = {
        "nested_padding": args.padding,
        "nested_angle_padding": args.angle_padding,
        "label_overlap_margin_px": args.overlap_margin,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        layout = layout_config_from_mapping(overrides, base=settings.layout)
        settings = AtlasSettings(layout, settings.view_box, settings.base_width, settings.base_height)
    return settings


def find_matching_node(nodes: list[MapNode], pattern: str) -> MapNode | None:
    """Find a node by exact id, else by unique case-insensitive id/name substring."""
    for node in nodes:
        if node.id == pattern:
            return node
    needle = pattern.lower()
    matches = [n for n in nodes if needle in n.id.lower() or needle in n.name.lower()]
    if len(matches) == 0:
        print(f"Error: No map node matching '{pattern}'", file=sys.stderr)
        return None
    if len(matches) > 1:
        print(f"Error: Ambiguous pattern '{pattern}' matches:", file=sys.stderr)
        for m in matches[:10]:
            print(f"  {m.id}  ({m.name})", file=sys.stderr)
        if len(matches) > 10:
            print(f"  ... and {len(matches) - 10} more", file=sys.stderr)
        return None
    return matches[0]


def cmd_layout(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Lay out the map and write the positioned snapshot and a summary."""
    settings = resolve_settings(args, parser)
    args.output = args.output.resolve()
    args.output.mkdir(parents=True, exist_ok=True)

    print(f"Laying out {args.map}...")
    map_data = load_map(args.map)
    positioned = apply_nested_circle_layout(map_data.nodes, settings.layout)
    offsets = calculate_label_offsets(positioned, settings.layout)
    print(f"Positioned {len(positioned)} nodes")

    generate_json(positioned, offsets, args.output / "positioned_map.json")
    print("Wrote positioned_map.json")
    generate_summary(positioned, offsets, args.output / "summary.txt")
    print("Wrote summary.txt")
    print(f"\nAll outputs written to {args.output}/")
    return 0


def cmd_route(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Print the travel route between two nodes."""
    resolve_settings(args, parser)
    map_data = load_map(args.map)

    start = find_matching_node(map_data.nodes, args.from_node)
    end = find_matching_node(map_data.nodes, args.to_node)
    if not start or not end:
        return 1

    hierarchy = Hierarchy.from_nodes(map_data.nodes)
    if is_same_place(hierarchy, start.id, end.id):
        print(f"No travel needed from {start.name} to {end.name}")
        return 0

    steps = find_travel_path(map_data, start.id, end.id, hierarchy=hierarchy)
    if steps is None:
        print(f"No route from {start.name} to {end.name}")
        return 0

    names = {node_id: node.name for node_id, node in map_data.node_by_id().items()}
    print(f"\nRoute with {len(steps)} step(s):\n")
    for line in format_route(steps, start.id, names):
        print(line)
    return 0


def cmd_render(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Render the laid-out map to an interactive HTML page."""
    settings = resolve_settings(args, parser)
    map_data = load_map(args.map)

    current = find_matching_node(map_data.nodes, args.current) if args.current else None
    destination = find_matching_node(map_data.nodes, args.destination) if args.destination else None
    if (args.current and not current) or (args.destination and not destination):
        return 1

    positioned = apply_nested_circle_layout(map_data.nodes, settings.layout)
    offsets = calculate_label_offsets(positioned, settings.layout)
    travel_path = None
    if current and destination:
        travel_path = find_travel_path(map_data, current.id, destination.id)
        if travel_path is None:
            print(f"No route from {current.name} to {destination.name}")

    item_presence = load_item_presence(args.items) if args.items else None
    output = args.output.resolve()
    render_map(
        positioned,
        map_data.edges,
        output,
        label_offsets=offsets,
        config=settings.layout,
        current_node_id=current.id if current else None,
        destination_node_id=destination.id if destination else None,
        travel_path=travel_path,
        item_presence=item_presence,
        title=args.title,
    )
    print(f"Wrote {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the atlas-layout CLI."""
    parser = argparse.ArgumentParser(
        description="Lay out, route and render nested game maps"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    layout_parser = subparsers.add_parser(
        "layout",
        help="Compute node positions and label offsets",
    )
    add_common_args(layout_parser)
    layout_parser.add_argument(
        "--output",
        type=Path,
        default=Path("results"),
        help="Output directory (default: results)",
    )

    route_parser = subparsers.add_parser(
        "route",
        help="Find the travel route between two nodes",
    )
    add_common_args(route_parser)
    route_parser.add_argument(
        "--from",
        dest="from_node",
        required=True,
        help="Start node (id or name substring)",
    )
    route_parser.add_argument(
        "--to",
        dest="to_node",
        required=True,
        help="Destination node (id or name substring)",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Render the map to interactive HTML",
    )
    add_common_args(render_parser)
    render_parser.add_argument("--current", help="Current node (id or name substring)")
    render_parser.add_argument("--destination", help="Destination node (id or name substring)")
    render_parser.add_argument("--items", type=Path, help="Item presence JSON file")
    render_parser.add_argument("--title", help="Page heading")
    render_parser.add_argument(
        "--output",
        type=Path,
        default=Path("map.html"),
        help="Output HTML file (default: map.html)",
    )

    args = parser.parse_args(argv)

    if args.command == "layout":
        return cmd_layout(args, layout_parser)
    if args.command == "route":
        return cmd_route(args, route_parser)
    if args.command == "render":
        return cmd_render(args, render_parser)
    # No subcommand provided - show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
