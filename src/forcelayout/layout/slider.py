# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Kinematic interpolation between two node position snapshots.

"""
Node slider: glide nodes from their current centres to target centres.

On frame ``f`` of ``F`` each node moves ``distance_to_target / (F - f + 1)``
towards its target, measured from where the node is now rather than where
it started. For an undisturbed straight path this covers equal distances per
frame; if something else moves a node mid-slide, the remaining frames
correct for it. The last frame places every node exactly on its target.

The slider knows nothing about forces. It is used to show the result of a
hidden force-directed run, and to shuffle nodes to a new random layout.
"""

from typing import Callable, List, Optional, Sequence
import logging

from ..canvas import Canvas, move_within_bounds
from ..geometry import Vector2
from ..graph import Node
from ..ticks import TickSource

logger = logging.getLogger(__name__)


class NodeSlider:
    """Moves ``nodes`` to ``end_points`` over ``frame_count`` frames."""

    def __init__(
        self,
        nodes: Sequence[Node],
        end_points: Sequence[Vector2],
        frame_count: int,
        canvas: Optional[Canvas] = None,
        on_end: Optional[Callable[[], None]] = None
    ):
        """
        Args:
            nodes: Nodes to move.
            end_points: Target centre for each node, in the same order.
            frame_count: Number of frames the slide lasts (at least 1).
            canvas: If given, every move is clamped to the canvas bounds.
            on_end: Called once after the last frame.
        """
        if len(nodes) != len(end_points):
            raise ValueError(
                f"{len(nodes)} nodes but {len(end_points)} end points")
        if frame_count < 1:
            raise ValueError("frame_count must be at least 1")
        self.nodes: List[Node] = list(nodes)
        self.end_points: List[Vector2] = list(end_points)
        self.frame_count = frame_count
        self.canvas = canvas
        self.on_end = on_end
        self.frame = 0
        self._ticker: Optional[TickSource] = None

    @property
    def finished(self) -> bool:
        return self.frame >= self.frame_count

    def start(self, ticker: TickSource) -> None:
        """Advance one frame per tick of ``ticker``."""
        self._ticker = ticker
        ticker.start(self._on_tick)

    def run(self) -> None:
        """Play every remaining frame synchronously."""
        while self.tick():
            pass

    def tick(self) -> bool:
        """Advance one frame; returns True while frames remain."""
        if self.finished:
            return False

        self.frame += 1
        last = self.frame == self.frame_count
        remaining = self.frame_count - self.frame + 1

        for node, target in zip(self.nodes, self.end_points):
            if last:
                point = target
            else:
                centre = node.center
                step = centre.distance_to(target) / remaining
                point = centre + centre.direction_to(target) * step
            self._move(node, point)

        if last:
            logger.debug("Slide finished after %d frames", self.frame_count)
            if self._ticker is not None:
                self._ticker.stop()
                self._ticker = None
            if self.on_end is not None:
                self.on_end()
            return False
        return True

    def _on_tick(self) -> None:
        self.tick()

    def _move(self, node: Node, point: Vector2) -> None:
        if self.canvas is not None:
            move_within_bounds(node, point, self.canvas)
        else:
            node.move_to(point)
