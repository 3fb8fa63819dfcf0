# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# forcelayout: force-directed graph layout on a bounded canvas.

"""
Force-directed layout for directed and undirected graphs.

Connected nodes settle at an ideal edge length, unconnected nodes repel,
and every node stays inside the canvas. The engine only computes node
centres; drawing is left to the caller, who can subscribe to node changes
with :meth:`Graph.add_listener`.

The io module reads graphs from and writes positions to JSON Lines.
"""

from .canvas import Canvas, is_within_bounds, move_within_bounds
from .config import LayoutConfig, LayoutMode
from .errors import (
    ConfigError,
    DuplicateEdgeError,
    DuplicateNodeError,
    GraphError,
    InvalidEdgeError,
    InvalidNodeError,
    Result,
    UndefinedNodeError,
)
from .geometry import Vector2
from .graph import Edge, Graph, Node
from .layout import ForceDirectedLayout, LayoutResult, NodeSlider, shuffle
from .ticks import AsyncioTicker, ManualTicker, TickSource

__all__ = [
    'Canvas',
    'is_within_bounds',
    'move_within_bounds',
    'LayoutConfig',
    'LayoutMode',
    'ConfigError',
    'DuplicateEdgeError',
    'DuplicateNodeError',
    'GraphError',
    'InvalidEdgeError',
    'InvalidNodeError',
    'Result',
    'UndefinedNodeError',
    'Vector2',
    'Edge',
    'Graph',
    'Node',
    'ForceDirectedLayout',
    'LayoutResult',
    'NodeSlider',
    'shuffle',
    'AsyncioTicker',
    'ManualTicker',
    'TickSource',
]

__version__ = "0.1.0"
