# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Force model for the force-directed layout, with NumPy acceleration.

"""
Force model: logarithmic springs, inverse-square repulsion, side repulsion.

For every node the net force is the sum over every other node of

- a spring ``k * ln(d / L)`` towards the other node when they are connected
  (attractive beyond the ideal length ``L``, repulsive inside it), or
- a repulsion ``K / d^2`` away from the other node when they are not,

plus, optionally, the repulsion of the four canvas sides, each treated as a
point at the perpendicular projection of the node centre onto that side.

Coincident centres would divide by zero; such pairs get a jitter force of
magnitude ``collision_constant / iteration`` in a random direction instead.

All forces of an iteration are computed from the same snapshot of centres
before any node moves. Graphs larger than ``vectorize_threshold`` nodes use
the NumPy implementation; both paths draw jitter from the generator in the
same pair order.
"""

from typing import List
import math

import numpy as np

from ..canvas import Canvas
from ..config import LayoutConfig
from ..geometry import Vector2, ZERO
from ..graph import Graph, Node


def repulsion_between(source: Vector2, target: Vector2, constant: float) -> Vector2:
    """Inverse-square push on ``target`` directed away from ``source``."""
    distance = source.distance_to(target)
    if distance == 0.0:
        return ZERO
    return source.direction_to(target) * (constant / (distance * distance))


def spring_between(start: Vector2, end: Vector2, constant: float, ideal_length: float) -> Vector2:
    """Logarithmic spring on ``start`` along the line towards ``end``."""
    distance = start.distance_to(end)
    if distance == 0.0:
        return ZERO
    return start.direction_to(end) * (constant * math.log(distance / ideal_length))


class ForceCalculator:
    """Computes one net force per node for a given iteration."""

    def __init__(self, config: LayoutConfig, rng: np.random.Generator):
        self.config = config
        self.rng = rng

    # ------------------------------------------------------------------
    # Pairwise terms
    # ------------------------------------------------------------------

    def collision_force(self, iteration: int) -> Vector2:
        """Random-direction jitter that shrinks as iterations advance."""
        angle = float(self.rng.uniform(0.0, 2.0 * math.pi))
        return Vector2.from_angle(angle, self.config.collision_constant / max(iteration, 1))

    def spring_force(self, node: Node, other: Node, iteration: int) -> Vector2:
        if node.center == other.center:
            return self.collision_force(iteration)
        return spring_between(
            node.center, other.center,
            self.config.spring_constant, self.config.edge_length
        )

    def repulsion_force(self, node: Node, other: Node, iteration: int) -> Vector2:
        if node.center == other.center:
            return self.collision_force(iteration)
        return repulsion_between(other.center, node.center, self.config.repulsion_constant)

    def force_between(self, node: Node, other: Node, connected: bool, iteration: int) -> Vector2:
        if connected:
            return self.spring_force(node, other, iteration)
        return self.repulsion_force(node, other, iteration)

    def side_repulsion(self, node: Node, canvas: Canvas) -> Vector2:
        """Push from the four canvas sides, each at the centre's projection onto it."""
        c = node.center
        constant = self.config.side_repulsion_constant
        force = ZERO
        for side in (
            Vector2(c.x, 0.0),
            Vector2(c.x, canvas.height),
            Vector2(0.0, c.y),
            Vector2(canvas.width, c.y),
        ):
            force = force + repulsion_between(side, c, constant)
        return force

    # ------------------------------------------------------------------
    # Whole-graph evaluation
    # ------------------------------------------------------------------

    def compute_forces(self, graph: Graph, canvas: Canvas, iteration: int) -> List[Vector2]:
        """Net force on every node, in graph node order."""
        nodes = graph.nodes
        if len(nodes) > self.config.vectorize_threshold:
            return self._numpy_forces(graph, nodes, canvas, iteration)
        return self._pure_python_forces(graph, nodes, canvas, iteration)

    def _pure_python_forces(
        self,
        graph: Graph,
        nodes: List[Node],
        canvas: Canvas,
        iteration: int
    ) -> List[Vector2]:
        """Pairwise loop over the node list."""
        forces = []
        for node in nodes:
            total = ZERO
            for other in nodes:
                if other is node:
                    continue
                total = total + self.force_between(
                    node, other, graph.are_connected(node, other), iteration)
            if self.config.sides_repel:
                total = total + self.side_repulsion(node, canvas)
            forces.append(total)
        return forces

    def _numpy_forces(
        self,
        graph: Graph,
        nodes: List[Node],
        canvas: Canvas,
        iteration: int
    ) -> List[Vector2]:
        """Vectorised equivalent of :meth:`_pure_python_forces`."""
        cfg = self.config
        n = len(nodes)
        pos = np.array([[node.center.x, node.center.y] for node in nodes], dtype=float)
        connected = graph.adjacency_matrix()

        # diff[i, j] points from node j to node i
        diff = pos[:, np.newaxis, :] - pos[np.newaxis, :, :]  # (n, n, 2)
        dist = np.sqrt(np.sum(diff ** 2, axis=2))  # (n, n)
        off_diagonal = ~np.eye(n, dtype=bool)
        coincident = (dist == 0.0) & off_diagonal
        safe = np.where(dist > 0.0, dist, 1.0)
        direction = diff / safe[:, :, np.newaxis]

        # Repulsion pushes i away from j; the spring pulls i towards j
        repulsion = cfg.repulsion_constant / (safe ** 2)
        spring = -cfg.spring_constant * np.log(safe / cfg.edge_length)
        magnitude = np.where(connected, spring, repulsion)
        magnitude = np.where(off_diagonal & ~coincident, magnitude, 0.0)

        forces = np.sum(direction * magnitude[:, :, np.newaxis], axis=1)

        for i, j in np.argwhere(coincident):
            jitter = self.collision_force(iteration)
            forces[i, 0] += jitter.x
            forces[i, 1] += jitter.y

        if cfg.sides_repel:
            forces += self._numpy_side_repulsion(pos, canvas)

        return [Vector2(float(fx), float(fy)) for fx, fy in forces]

    def _numpy_side_repulsion(self, pos: np.ndarray, canvas: Canvas) -> np.ndarray:
        constant = self.config.side_repulsion_constant
        forces = np.zeros_like(pos)
        for axis, extent in ((0, canvas.width), (1, canvas.height)):
            for offset in (pos[:, axis], pos[:, axis] - extent):
                safe = np.where(offset != 0.0, offset, 1.0)
                push = np.sign(offset) * constant / (safe ** 2)
                forces[:, axis] += np.where(offset != 0.0, push, 0.0)
        return forces

