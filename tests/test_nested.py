"""Tests for nested.py layout module."""

import math

import pytest

from atlas_layout.geometry import Point, distance
from atlas_layout.layout.hierarchy import Hierarchy
from atlas_layout.layout.nested import apply_nested_circle_layout, ring_radius
from atlas_layout.layout.radius import default_radius_for_type
from atlas_layout.model import LayoutConfig, NodeType


def _by_id(nodes):
    return {node.id: node for node in nodes}


class TestRingRadius:
    """Tests for ring_radius function."""

    def test_no_children(self):
        """No children need no orbit."""
        assert ring_radius([], padding=5, angle_padding=0.25) == 0.0

    def test_single_child_is_off_centre(self):
        """An only child orbits at a positive distance."""
        assert ring_radius([16], padding=5, angle_padding=0.25) > 0

    def test_neighbours_do_not_overlap(self):
        """Adjacent children on the ring keep at least the padding between them."""
        radii = [30, 10, 25, 8, 12]
        padding = 5
        orbit = ring_radius(radii, padding, angle_padding=0.25)
        chord = 2 * orbit * math.sin(math.pi / len(radii))
        for i, r in enumerate(radii):
            neighbour = radii[(i + 1) % len(radii)]
            assert chord >= r + neighbour + padding - 1e-9

    def test_many_children_with_large_angle_padding_terminates(self):
        """Angle padding larger than a slot still yields a finite radius."""
        orbit = ring_radius([10] * 40, padding=5, angle_padding=0.5)
        assert math.isfinite(orbit)
        assert orbit > 0


class TestApplyNestedCircleLayout:
    """Tests for apply_nested_circle_layout function."""

    def test_empty(self):
        """No nodes gives no output."""
        assert apply_nested_circle_layout([]) == []

    def test_single_root_at_origin(self, region_map):
        """The only top-level node sits at the origin."""
        nodes = _by_id(apply_nested_circle_layout(region_map.nodes))
        assert nodes["region"].position == Point(0.0, 0.0)

    def test_region_scenario(self, region_map):
        """Locations orbit the region far enough apart, rooms nest under locations."""
        config = LayoutConfig()
        nodes = _by_id(apply_nested_circle_layout(region_map.nodes, config))
        room_radius = default_radius_for_type(NodeType.ROOM)

        region = nodes["region"].position
        loc_a = nodes["loc_a"].position
        loc_b = nodes["loc_b"].position
        orbit_a = distance(region, loc_a)
        orbit_b = distance(region, loc_b)

        assert orbit_a == pytest.approx(orbit_b)
        assert orbit_a >= room_radius * 2 + config.nested_padding

        separation = abs(
            math.atan2(loc_a.y, loc_a.x) - math.atan2(loc_b.y, loc_b.x)
        )
        assert separation == pytest.approx(math.pi)

        for room_id, loc_id in [("room_a1", "loc_a"), ("room_a2", "loc_a"), ("room_b1", "loc_b")]:
            room = nodes[room_id]
            loc = nodes[loc_id]
            assert distance(room.position, loc.position) + room.visual_radius <= loc.visual_radius

    def test_leaf_radius_is_type_default(self, region_map):
        """Leaves get their per-type radius."""
        nodes = _by_id(apply_nested_circle_layout(region_map.nodes))
        assert nodes["room_a1"].visual_radius == default_radius_for_type(NodeType.ROOM)

    def test_containment_invariant(self, deep_map):
        """No child circle extends beyond its parent's circle."""
        positioned = apply_nested_circle_layout(deep_map.nodes)
        nodes = _by_id(positioned)
        hierarchy = Hierarchy.from_nodes(positioned)
        for node in positioned:
            parent_id = hierarchy.parent(node.id)
            if parent_id is None:
                continue
            parent = nodes[parent_id]
            reach = distance(node.position, parent.position) + node.visual_radius
            assert reach <= parent.visual_radius + 1e-9, node.id

    def test_siblings_do_not_overlap(self, deep_map):
        """Sibling circles never intersect."""
        positioned = apply_nested_circle_layout(deep_map.nodes)
        hierarchy = Hierarchy.from_nodes(positioned)
        nodes = _by_id(positioned)
        for node in positioned:
            children = [nodes[c] for c in hierarchy.children(node.id)]
            for i, first in enumerate(children):
                for second in children[i + 1 :]:
                    gap = distance(first.position, second.position)
                    assert gap >= first.visual_radius + second.visual_radius - 1e-9

    def test_deterministic(self, deep_map):
        """Identical inputs yield identical outputs."""
        first = apply_nested_circle_layout(deep_map.nodes)
        second = apply_nested_circle_layout(deep_map.nodes)
        assert first == second

    def test_idempotent(self, deep_map):
        """Laying out a laid-out map gives the same positions."""
        config = LayoutConfig(nested_padding=8, nested_angle_padding=0.1)
        once = apply_nested_circle_layout(deep_map.nodes, config)
        twice = apply_nested_circle_layout(once, config)
        for a, b in zip(once, twice):
            assert a.position.x == pytest.approx(b.position.x)
            assert a.position.y == pytest.approx(b.position.y)
            assert a.visual_radius == pytest.approx(b.visual_radius)

    def test_input_not_modified(self, region_map):
        """The input nodes keep their original positions and radii."""
        before = list(region_map.nodes)
        apply_nested_circle_layout(region_map.nodes)
        assert region_map.nodes == before
        assert all(node.visual_radius is None for node in region_map.nodes)

    def test_output_order_matches_input(self, deep_map):
        """Nodes come back in the order they were given."""
        positioned = apply_nested_circle_layout(deep_map.nodes)
        assert [n.id for n in positioned] == [n.id for n in deep_map.nodes]

    def test_single_child_not_concentric(self, make_node):
        """An only child is placed away from its parent's centre."""
        nodes = [
            make_node("house", NodeType.EXTERIOR),
            make_node("hall", NodeType.INTERIOR, "house"),
        ]
        positioned = _by_id(apply_nested_circle_layout(nodes))
        house = positioned["house"]
        hall = positioned["hall"]
        assert distance(house.position, hall.position) > 0
        assert distance(house.position, hall.position) + hall.visual_radius <= house.visual_radius

    def test_dangling_parent_becomes_root(self, make_node):
        """A node whose parent is missing is laid out as a top-level node."""
        nodes = [
            make_node("a", NodeType.REGION),
            make_node("orphan", NodeType.ROOM, "missing"),
        ]
        positioned = _by_id(apply_nested_circle_layout(nodes))
        assert set(positioned) == {"a", "orphan"}
        gap = distance(positioned["a"].position, positioned["orphan"].position)
        assert gap >= positioned["a"].visual_radius + positioned["orphan"].visual_radius

    def test_parent_cycle_does_not_crash(self, make_node):
        """A parent cycle is broken instead of recursing forever."""
        nodes = [
            make_node("x", NodeType.LOCATION, "y"),
            make_node("y", NodeType.LOCATION, "x"),
        ]
        positioned = apply_nested_circle_layout(nodes)
        assert len(positioned) == 2

    def test_multiple_roots_spread_by_ideal_edge_length(self, make_node):
        """Several top-level nodes share a ring without touching."""
        config = LayoutConfig(ideal_edge_length=120)
        nodes = [make_node("r1", NodeType.REGION), make_node("r2", NodeType.REGION)]
        positioned = _by_id(apply_nested_circle_layout(nodes, config))
        gap = distance(positioned["r1"].position, positioned["r2"].position)
        radii = positioned["r1"].visual_radius + positioned["r2"].visual_radius
        assert gap >= radii + config.ideal_edge_length - 1e-9

    def test_out_of_range_config_is_clamped(self, region_map):
        """Negative padding behaves like zero padding."""
        negative = apply_nested_circle_layout(region_map.nodes, LayoutConfig(nested_padding=-50))
        zero = apply_nested_circle_layout(region_map.nodes, LayoutConfig(nested_padding=0))
        assert negative == zero

    def test_larger_padding_grows_parent(self, region_map):
        """More padding gives a larger enclosing circle."""
        small = _by_id(apply_nested_circle_layout(region_map.nodes, LayoutConfig(nested_padding=5)))
        large = _by_id(apply_nested_circle_layout(region_map.nodes, LayoutConfig(nested_padding=30)))
        assert large["region"].visual_radius > small["region"].visual_radius

    def test_nan_padding_gives_finite_positions(self, region_map):
        """A NaN parameter behaves like its default instead of spreading NaN."""
        positioned = apply_nested_circle_layout(
            region_map.nodes, LayoutConfig(nested_padding=float("nan"))
        )
        for node in positioned:
            assert math.isfinite(node.position.x), node.id
            assert math.isfinite(node.position.y), node.id
            assert math.isfinite(node.visual_radius), node.id
        assert positioned == apply_nested_circle_layout(region_map.nodes, LayoutConfig())
