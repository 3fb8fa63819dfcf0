# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Canvas bounds and the bounded position updater.

"""
Canvas bounds and bounding-circle containment.

Every node movement made by the layout goes through
:func:`move_within_bounds`, which keeps the whole circle of the node
inside the canvas:

    center.x - radius >= 0      center.x + radius <= width
    center.y - radius >= 0      center.y + radius <= height

Containment can only hold when the canvas is at least ``2 * radius`` wide
and high. On an axis too short for the node, the node is centred on that
axis and overhangs both sides equally.
"""

from dataclasses import dataclass

import numpy as np

from .errors import ConfigError
from .geometry import Vector2
from .graph import Node

# Slack for float rounding in ``(width - r) + r``
BOUNDS_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Canvas:
    """A fixed rectangle with its origin at the top-left corner."""
    width: float
    height: float

    def __post_init__(self):
        if not self.width > 0 or not self.height > 0:
            raise ConfigError(
                f"Canvas dimensions must be positive, got {self.width}x{self.height}")

    @property
    def center(self) -> Vector2:
        return Vector2(self.width / 2.0, self.height / 2.0)

    def contains(self, center: Vector2, radius: float) -> bool:
        """True if a circle of ``radius`` at ``center`` lies inside the canvas."""
        tol = BOUNDS_TOLERANCE
        return (center.x - radius >= -tol
                and center.y - radius >= -tol
                and center.x + radius <= self.width + tol
                and center.y + radius <= self.height + tol)

    def random_point(self, rng: np.random.Generator) -> Vector2:
        return Vector2.random(rng, 0.0, 0.0, self.width, self.height)


def is_within_bounds(node: Node, canvas: Canvas) -> bool:
    return canvas.contains(node.center, node.radius)


def move_within_bounds(node: Node, proposed: Vector2, canvas: Canvas) -> Vector2:
    """
    Move ``node`` to ``proposed``, clamping so its circle stays on the canvas.

    Each side is tested with the border point of the node nearest that side;
    a centre that is itself past a side is clamped too. Top/bottom and
    left/right are each resolved independently.

    Returns:
        The node's final centre.
    """
    node.move_to(proposed)
    radius = node.radius
    x, y = proposed.x, proposed.y
    clamped = False

    # Top, then bottom
    if y <= 0 or node.edge_point_towards(Vector2(x, 0.0)).y <= 0:
        y = radius
        clamped = True
    elif y >= canvas.height or node.edge_point_towards(Vector2(x, canvas.height)).y >= canvas.height:
        y = canvas.height - radius
        clamped = True

    # Left, then right
    if x <= 0 or node.edge_point_towards(Vector2(0.0, proposed.y)).x <= 0:
        x = radius
        clamped = True
    elif x >= canvas.width or node.edge_point_towards(Vector2(canvas.width, proposed.y)).x >= canvas.width:
        x = canvas.width - radius
        clamped = True

    fx = _clamp(x, radius, canvas.width)
    fy = _clamp(y, radius, canvas.height)
    if clamped or (fx, fy) != (proposed.x, proposed.y):
        node.move_to(Vector2(fx, fy))
    return node.center


def _clamp(value: float, radius: float, size: float) -> float:
    """Clamp a coordinate to [radius, size - radius], or the midpoint if that is empty."""
    if size < 2 * radius:
        return size / 2.0
    return min(max(value, radius), size - radius)
