"""Pan, wheel-zoom and pinch-zoom gestures over a view box.

The controller is a small state machine. Its state is exactly one of
``Idle``, ``Panning`` or ``Pinching``, so a pan and a pinch can never be active
together. Input events carry device coordinates; they are converted into map
coordinates through the current view box and the device viewport.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from loguru import logger

from .geometry import Point, Viewport, distance, midpoint, screen_to_local
from .model import VIEWBOX_HEIGHT_INITIAL, VIEWBOX_WIDTH_INITIAL, ViewBox

ZOOM_FACTOR = 1.1
MIN_DIM_RATIO = 0.1
MAX_DIM_RATIO = 10.0


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Panning:
    anchor: Point  # Last device point seen while dragging


@dataclass(frozen=True)
class Pinching:
    distance: float  # Last distance between the two fingers, device pixels


GestureState = Idle | Panning | Pinching


class _Cancelable:
    """Default-action suppression shared by all input events."""

    cancelable: bool
    default_prevented: bool

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True


@dataclass
class PointerEvent(_Cancelable):
    x: float
    y: float
    on_node: bool = False  # Pressed on a map node rather than empty space
    cancelable: bool = True
    default_prevented: bool = False

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class WheelEvent(_Cancelable):
    x: float
    y: float
    delta_y: float
    cancelable: bool = True
    default_prevented: bool = False

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class TouchEvent(_Cancelable):
    touches: Sequence[Point]  # Fingers still on the surface
    on_node: bool = False
    cancelable: bool = True
    default_prevented: bool = False


class ViewportController:
    """Owns the view box and updates it from pointer, wheel and touch input.

    Args:
        viewport: Device rectangle the map is drawn into.
        view_box: Initial view box, clamped into the allowed size range.
        on_change: Called with the new view box after every change.
        base_width: Base view box width the zoom limits derive from.
        base_height: Base view box height the zoom limits derive from.
    """

    def __init__(
        self,
        viewport: Viewport,
        view_box: ViewBox | None = None,
        on_change: Callable[[ViewBox], None] | None = None,
        base_width: float = VIEWBOX_WIDTH_INITIAL,
        base_height: float = VIEWBOX_HEIGHT_INITIAL,
    ):
        self.viewport = viewport
        self.on_change = on_change
        self._base_size = (base_width, base_height)
        base = min(base_width, base_height)
        self.min_dim = base * MIN_DIM_RATIO
        self.max_dim = base * MAX_DIM_RATIO
        self.state: GestureState = Idle()
        self._view_box = self._clamp_box(view_box or ViewBox.default(base_width, base_height))

    @property
    def view_box(self) -> ViewBox:
        return self._view_box

    def set_view_box(self, view_box: ViewBox) -> None:
        """Replace the view box from the host without reporting it back."""
        self._view_box = self._clamp_box(view_box)

    def resize(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def to_local(self, point: Point) -> Point:
        return screen_to_local(self._view_box, self.viewport, point)

    # --- state changes ---

    def _update(self, view_box: ViewBox) -> None:
        if view_box == self._view_box:
            return
        self._view_box = view_box
        if self.on_change:
            self.on_change(view_box)

    def _set_state(self, state: GestureState) -> None:
        if type(state) is not type(self.state):
            logger.trace("Viewport gesture {} -> {}", type(self.state).__name__, type(state).__name__)
        self.state = state

    # --- sizing ---

    def _clamped_size(self, width: float, height: float) -> tuple[float, float]:
        """Clamp both dimensions into [min_dim, max_dim], keeping the aspect ratio."""
        if width < self.min_dim:
            height *= self.min_dim / width
            width = self.min_dim
        if height < self.min_dim:
            width *= self.min_dim / height
            height = self.min_dim
        if width > self.max_dim:
            height *= self.max_dim / width
            width = self.max_dim
        if height > self.max_dim:
            width *= self.max_dim / height
            height = self.max_dim
        return width, height

    def _clamp_box(self, view_box: ViewBox) -> ViewBox:
        if view_box.width <= 0 or view_box.height <= 0:
            return ViewBox.default(*self._base_size)
        width, height = self._clamped_size(view_box.width, view_box.height)
        return replace(view_box, width=width, height=height)

    def zoom(self, scale: float, anchor: Point) -> None:
        """Zoom by ``scale`` (> 1 zooms in) keeping ``anchor``'s map point fixed.

        Args:
            scale: Magnification factor; the view box shrinks by this factor.
            anchor: Device point whose map coordinates stay put.
        """
        box = self._view_box
        if scale <= 0 or box.width <= 0 or box.height <= 0:
            return
        width, height = self._clamped_size(box.width / scale, box.height / scale)
        if math.isclose(width, box.width) and math.isclose(height, box.height):
            return
        local = self.to_local(anchor)
        self._update(
            ViewBox(
                min_x=local.x - (local.x - box.min_x) * (width / box.width),
                min_y=local.y - (local.y - box.min_y) * (height / box.height),
                width=width,
                height=height,
            )
        )

    def _pan(self, previous: Point, current: Point) -> None:
        start = self.to_local(previous)
        end = self.to_local(current)
        self._update(self._view_box.shifted(start.x - end.x, start.y - end.y))

    # --- pointer ---

    def pointer_down(self, event: PointerEvent) -> None:
        event.prevent_default()
        if event.on_node:
            return
        self._set_state(Panning(event.point))

    def pointer_move(self, event: PointerEvent) -> None:
        event.prevent_default()
        if not isinstance(self.state, Panning):
            return
        self._pan(self.state.anchor, event.point)
        self._set_state(Panning(event.point))

    def pointer_up(self, event: PointerEvent | None = None) -> None:
        if event is not None:
            event.prevent_default()
        if isinstance(self.state, Panning):
            self._set_state(Idle())

    pointer_leave = pointer_up

    # --- wheel ---

    def wheel(self, event: WheelEvent) -> None:
        event.prevent_default()
        if event.delta_y == 0:
            return
        scale = ZOOM_FACTOR if event.delta_y < 0 else 1 / ZOOM_FACTOR
        self.zoom(scale, event.point)

    # --- touch ---

    def touch_start(self, event: TouchEvent) -> None:
        event.prevent_default()
        touches = event.touches
        if len(touches) == 1:
            if event.on_node:
                return
            self._set_state(Panning(touches[0]))
        elif len(touches) >= 2:
            self._set_state(Pinching(distance(touches[0], touches[1])))

    def touch_move(self, event: TouchEvent) -> None:
        event.prevent_default()
        touches = event.touches
        if len(touches) == 1 and isinstance(self.state, Panning):
            self._pan(self.state.anchor, touches[0])
            self._set_state(Panning(touches[0]))
        elif len(touches) >= 2 and isinstance(self.state, Pinching):
            current = distance(touches[0], touches[1])
            if current == 0 or self.state.distance == 0:
                return
            self.zoom(current / self.state.distance, midpoint(touches[0], touches[1]))
            self._set_state(Pinching(current))

    def touch_end(self, event: TouchEvent) -> None:
        event.prevent_default()
        remaining = len(event.touches)
        if isinstance(self.state, Pinching) and remaining < 2:
            self._set_state(Idle())
        elif isinstance(self.state, Panning) and remaining == 0:
            self._set_state(Idle())
