# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Random node placement.

"""
Random placement of nodes on the canvas.

- :func:`random_placement` drops every node at a random point and clamps it
  into bounds. The force-directed layout starts from this.
- :func:`valid_random_positions` searches for random centres that are inside
  the canvas and keep ``min_space`` clearance between nodes.
- :func:`shuffle` slides the graph to a fresh valid random layout without
  running any physics.
"""

from typing import Callable, List, Optional
import logging

import numpy as np

from ..canvas import Canvas, move_within_bounds
from ..geometry import Vector2
from ..graph import Graph, MIN_SPACE, Node
from ..ticks import TickSource
from .slider import NodeSlider

logger = logging.getLogger(__name__)

MAX_NODE_MOVEMENTS = 1000


def random_placement(
    graph: Graph,
    canvas: Canvas,
    rng: np.random.Generator,
    uniform_size: bool = True
) -> None:
    """Move every node to a random in-bounds centre."""
    if uniform_size:
        graph.resize_nodes(match_largest=True, maintain_center=True)
    for node in graph.nodes:
        move_within_bounds(node, canvas.random_point(rng), canvas)


def _is_valid(center: Vector2, node: Node, placed: List[Node], centres: List[Vector2],
              canvas: Canvas, min_space: float) -> bool:
    if not canvas.contains(center, node.radius):
        return False
    for other, other_center in zip(placed, centres):
        gap = center.distance_to(other_center) - (node.radius + other.radius)
        if gap <= min_space:
            return False
    return True


def valid_random_positions(
    graph: Graph,
    canvas: Canvas,
    rng: np.random.Generator,
    min_space: float = MIN_SPACE,
    max_node_movements: int = MAX_NODE_MOVEMENTS
) -> List[Vector2]:
    """
    Random centres, one per node, that respect bounds and clearance.

    Each node is re-drawn up to ``max_node_movements`` times. Once a node
    runs out of attempts there is probably no room left, so the search stops
    and the remaining nodes keep their first random point.

    Returns:
        Centres in graph node order. Nodes are not moved.
    """
    nodes = graph.nodes
    placed: List[Node] = []
    centres: List[Vector2] = []
    searching = True

    for node in nodes:
        center = canvas.random_point(rng)
        attempts = 0
        while searching and not _is_valid(center, node, placed, centres, canvas, min_space):
            if attempts >= max_node_movements:
                logger.warning(
                    "Iterated too many times while trying to position node %d, "
                    "no longer repositioning any nodes.", node.id)
                searching = False
                break
            center = canvas.random_point(rng)
            attempts += 1
        placed.append(node)
        centres.append(center)

    return centres


def shuffle(
    graph: Graph,
    canvas: Canvas,
    rng: np.random.Generator,
    ticker: Optional[TickSource] = None,
    frame_count: int = 3000,
    min_space: float = MIN_SPACE,
    on_end: Optional[Callable[[], None]] = None
) -> NodeSlider:
    """
    Slide every node to a new valid random layout.

    With a ticker the slide is animated one frame per tick; without one it
    plays to the end before returning.
    """
    targets = valid_random_positions(graph, canvas, rng, min_space)
    slider = NodeSlider(graph.nodes, targets, frame_count, canvas=canvas, on_end=on_end)
    logger.info("Sliding nodes.")
    if ticker is not None:
        slider.start(ticker)
    else:
        slider.run()
    return slider
