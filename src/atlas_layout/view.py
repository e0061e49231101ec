"""Host-facing map view session.

``MapView`` ties the pieces together the way a map panel uses them: it lays
out the host's map when the panel is shown, on an explicit refresh and after a
layout parameter change has settled, keeps the positioned snapshot and label
offsets, owns the viewport controller and recomputes the travel route when the
current node or the destination changes. Everything runs synchronously; the
debounce is driven by :meth:`MapView.poll` and an injectable clock.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from loguru import logger

from .geometry import Viewport
from .layout.labels import calculate_label_offsets
from .layout.nested import apply_nested_circle_layout
from .layout.overlays import IconOverlay, ItemPresence, compute_item_overlays
from .model import LayoutConfig, MapData, MapNode, TravelStep, ViewBox
from .pathfinding import TravelRouter
from .viewport import ViewportController

CONFIG_DEBOUNCE_SECONDS = 0.5


@dataclass(frozen=True)
class DestinationEvent:
    """Destination selection reported to the host."""

    action: Literal["set", "clear"]
    node_id: str


class MapView:
    """Interactive map session over one host map snapshot."""

    def __init__(
        self,
        map_data: MapData,
        viewport: Viewport,
        config: LayoutConfig | None = None,
        view_box: ViewBox | None = None,
        on_nodes_positioned: Callable[[tuple[MapNode, ...]], None] | None = None,
        on_view_box_change: Callable[[ViewBox], None] | None = None,
        on_destination_event: Callable[[DestinationEvent], None] | None = None,
        on_config_change: Callable[[LayoutConfig], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.map_data = map_data
        self.config = (config or LayoutConfig()).clamped()
        self.controller = ViewportController(viewport, view_box, on_change=on_view_box_change)
        self.router = TravelRouter(map_data)
        self.on_nodes_positioned = on_nodes_positioned
        self.on_destination_event = on_destination_event
        self.on_config_change = on_config_change
        self.clock = clock

        self.visible = False
        self.positioned_nodes: tuple[MapNode, ...] = ()
        self.label_offsets: Mapping[str, float] = MappingProxyType({})
        self.current_node_id: str | None = None
        self.destination_node_id: str | None = None
        self.travel_path: list[TravelStep] | None = None

        self._pending_config: LayoutConfig | None = None
        self._pending_deadline = 0.0

    # --- layout triggers ---

    def show(self) -> None:
        self.visible = True
        self.refresh()

    def hide(self) -> None:
        self.visible = False

    def resize(self, viewport: Viewport) -> None:
        """Track a new device viewport; the view box itself is kept."""
        self.controller.resize(viewport)

    def refresh(self) -> None:
        """Lay out the current map and replace the snapshot."""
        positioned = tuple(apply_nested_circle_layout(self.map_data.nodes, self.config))
        try:
            offsets = calculate_label_offsets(list(positioned), self.config)
        except Exception:
            logger.exception("Label offset computation failed; drawing labels unshifted")
            offsets = {}
        self.positioned_nodes = positioned
        self.label_offsets = MappingProxyType(offsets)
        if self.on_nodes_positioned:
            self.on_nodes_positioned(positioned)

    def set_map_data(self, map_data: MapData) -> None:
        self.map_data = map_data
        self.router.update(map_data)
        if self.visible:
            self.refresh()
        self._recompute_route()

    def request_config(self, config: LayoutConfig) -> None:
        """Schedule a parameter change; it applies once input has been quiet."""
        self._pending_config = config.clamped()
        self._pending_deadline = self.clock() + CONFIG_DEBOUNCE_SECONDS

    def reset_config(self) -> None:
        self.request_config(LayoutConfig())

    def poll(self) -> bool:
        """Apply a settled config change. Returns True when a relayout ran."""
        if self._pending_config is None or self.clock() < self._pending_deadline:
            return False
        config, self._pending_config = self._pending_config, None
        if config == self.config:
            return False
        self.config = config
        if self.on_config_change:
            self.on_config_change(config)
        if self.visible:
            self.refresh()
            return True
        return False

    # --- travel ---

    def toggle_destination(self, node_id: str) -> DestinationEvent:
        """Select ``node_id`` as destination, or clear it if already selected.

        The host owns the travel state and is expected to fold the event back
        through :meth:`set_travel_state`.
        """
        action: Literal["set", "clear"] = "clear" if node_id == self.destination_node_id else "set"
        event = DestinationEvent(action, node_id)
        if self.on_destination_event:
            self.on_destination_event(event)
        return event

    def set_travel_state(self, current_node_id: str | None, destination_node_id: str | None) -> None:
        changed = (current_node_id, destination_node_id) != (
            self.current_node_id,
            self.destination_node_id,
        )
        self.current_node_id = current_node_id
        self.destination_node_id = destination_node_id
        if changed:
            self._recompute_route()

    def _recompute_route(self) -> None:
        if not self.current_node_id or not self.destination_node_id:
            self.travel_path = None
            return
        try:
            self.travel_path = self.router.route(self.current_node_id, self.destination_node_id)
        except Exception:
            logger.exception(
                "Route from {} to {} failed; hiding the route overlay",
                self.current_node_id,
                self.destination_node_id,
            )
            self.travel_path = None

    # --- overlays ---

    def item_overlays(self, presence_by_node: Mapping[str, ItemPresence]) -> list[IconOverlay]:
        return compute_item_overlays(self.positioned_nodes, presence_by_node, self.config)
