# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# 2D vector arithmetic for node centres and forces.

"""
Immutable 2D vectors.

A Vector2 is used both as a point on the canvas (a node centre) and as a
displacement or force. Every operation returns a new vector.
"""

from dataclasses import dataclass
from typing import Tuple
import math

import numpy as np


@dataclass(frozen=True)
class Vector2:
    """A 2D point or vector."""
    x: float = 0.0
    y: float = 0.0

    def add(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x + other.x, self.y + other.y)

    def sub(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, v: float) -> 'Vector2':
        return Vector2(self.x * v, self.y * v)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> 'Vector2':
        """Unit vector in the same direction, or (0, 0) for the zero vector."""
        mag = self.magnitude()
        if mag == 0.0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / mag, self.y / mag)

    def distance_to(self, other: 'Vector2') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def vector_to(self, other: 'Vector2') -> 'Vector2':
        """Unnormalised vector from this point to ``other``."""
        return Vector2(other.x - self.x, other.y - self.y)

    def direction_to(self, other: 'Vector2') -> 'Vector2':
        """Unit vector pointing from this point towards ``other``."""
        return self.vector_to(other).normalize()

    def midpoint(self, other: 'Vector2') -> 'Vector2':
        return Vector2((self.x + other.x) / 2.0, (self.y + other.y) / 2.0)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def random(
        cls,
        rng: np.random.Generator,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float
    ) -> 'Vector2':
        """Uniformly random point in the rectangle [min_x, max_x) x [min_y, max_y)."""
        return cls(float(rng.uniform(min_x, max_x)), float(rng.uniform(min_y, max_y)))

    @classmethod
    def from_angle(cls, angle: float, length: float = 1.0) -> 'Vector2':
        return cls(math.cos(angle) * length, math.sin(angle) * length)

    # Operator forms, so force sums read naturally
    def __add__(self, other: 'Vector2') -> 'Vector2':
        return self.add(other)

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return self.sub(other)

    def __mul__(self, v: float) -> 'Vector2':
        return self.scale(v)

    __rmul__ = __mul__

    def __neg__(self) -> 'Vector2':
        return Vector2(-self.x, -self.y)


ZERO = Vector2(0.0, 0.0)
