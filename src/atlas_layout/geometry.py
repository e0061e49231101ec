"""Points, angles and screen/local coordinate transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Protocol


class Point(NamedTuple):
    """A 2D point in either device (screen) or local (map) coordinates."""

    x: float
    y: float


class ViewWindow(Protocol):
    """Anything exposing a view box origin and size (see ``model.ViewBox``)."""

    min_x: float
    min_y: float
    width: float
    height: float


@dataclass(frozen=True)
class Viewport:
    """The device rectangle the map is drawn into, in screen pixels."""

    width: float
    height: float
    left: float = 0.0
    top: float = 0.0

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def angle_between(a: Point, b: Point) -> float:
    """Angle in [-pi, pi] of the vector from ``a`` to ``b``."""
    return math.atan2(b.y - a.y, b.x - a.x)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def polar_offset(center: Point, radius: float, angle: float) -> Point:
    """Point at ``radius`` from ``center`` in direction ``angle`` (radians)."""
    return Point(center.x + radius * math.cos(angle), center.y + radius * math.sin(angle))


def normalize_angle(angle: float) -> float:
    """Normalize angle to [-pi, pi] range."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def _fit_transform(view_box: ViewWindow, viewport: Viewport) -> tuple[float, float, float] | None:
    """Return ``(scale, tx, ty)`` mapping local to screen, or None if degenerate.

    Mirrors SVG ``preserveAspectRatio="xMidYMid meet"``: the view box is scaled
    uniformly to fit inside the viewport and centred along the slack axis.
    """
    if viewport.is_degenerate or view_box.width <= 0 or view_box.height <= 0:
        return None
    scale = min(viewport.width / view_box.width, viewport.height / view_box.height)
    tx = viewport.left + (viewport.width - view_box.width * scale) / 2 - view_box.min_x * scale
    ty = viewport.top + (viewport.height - view_box.height * scale) / 2 - view_box.min_y * scale
    return scale, tx, ty


def screen_to_local(view_box: ViewWindow, viewport: Viewport, point: Point) -> Point:
    """Convert a device point into map coordinates.

    When the transform cannot be built (zero-size view box or viewport) the
    input point is returned unchanged.
    """
    transform = _fit_transform(view_box, viewport)
    if transform is None:
        return Point(point.x, point.y)
    scale, tx, ty = transform
    return Point((point.x - tx) / scale, (point.y - ty) / scale)


def local_to_screen(view_box: ViewWindow, viewport: Viewport, point: Point) -> Point:
    """Inverse of :func:`screen_to_local`."""
    transform = _fit_transform(view_box, viewport)
    if transform is None:
        return Point(point.x, point.y)
    scale, tx, ty = transform
    return Point(point.x * scale + tx, point.y * scale + ty)
