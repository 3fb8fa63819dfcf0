# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Graph model: nodes with mutable centres, directed/undirected edges.

"""
Graph model consumed by the layout engine.

A :class:`Graph` owns its nodes (unique by id) and edges. Node centres are
the only mutable state; every move raises a node-changed notification that
renderers can subscribe to with :meth:`Graph.add_listener`. While a graph
is frozen the notifications are held back and flushed once per changed node
when it is unfrozen, so observers never see intermediate positions.

Usage:
    from forcelayout.graph import Graph

    result = Graph.build(
        nodes=[{"id": 0, "label": "a"}, {"id": 1, "label": "b"}],
        edges=[{"from": 0, "to": 1, "directed": False}],
    )
    if result.ok:
        graph = result.value
"""

from contextlib import contextmanager
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Set
)
import logging
import numbers

import numpy as np

from .errors import (
    DuplicateEdgeError,
    DuplicateNodeError,
    GraphError,
    InvalidEdgeError,
    InvalidNodeError,
    Result,
    UndefinedNodeError,
)
from .geometry import Vector2, ZERO

logger = logging.getLogger(__name__)

# Label metrics used to size a node from its text
FONT_SIZE = 30.0
CHAR_WIDTH_EM = 0.6
NODE_PADDING = 30.0
BORDER_WIDTH = 2.0

# Minimum clearance between node borders: three arrow-head heights
ARROW_HEIGHT = 30.0
MIN_SPACE = ARROW_HEIGHT * 3

NodeListener = Callable[['Node'], None]


def label_radius(label: str) -> float:
    """Radius of a node that fits ``label``, including padding and half the border."""
    text_width = len(label) * FONT_SIZE * CHAR_WIDTH_EM
    return text_width / 2 + NODE_PADDING + BORDER_WIDTH / 2


def _record_id(record: Mapping[str, Any], key: str, error: type) -> int:
    """Integral id stored under ``key``; ``error`` if missing, boolean or fractional."""
    if key not in record:
        raise error(f"Record is missing '{key}': {dict(record)!r}")
    value = record[key]
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise error(f"'{key}' must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if not float(value).is_integer():
        raise error(f"'{key}' must be an integer, got {value!r}")
    return int(value)


class Node:
    """
    A graph node.

    ``id`` and ``label`` are fixed at construction. The centre and radius
    change during layout; ``base_radius`` is the radius derived from the
    label (or the caller's override) and is what :meth:`reset_size`
    returns to.
    """

    def __init__(
        self,
        node_id: int,
        label: Optional[str] = None,
        radius: Optional[float] = None,
        weight: Optional[Any] = None,
        center: Vector2 = ZERO
    ):
        if node_id < 0:
            raise InvalidNodeError(f"Node id must be non-negative, got {node_id}")
        if radius is not None and (isinstance(radius, bool) or not isinstance(radius, numbers.Real)):
            raise InvalidNodeError(f"Node {node_id} radius must be a number, got {radius!r}")
        if radius is not None and radius <= 0:
            raise InvalidNodeError(f"Node {node_id} radius must be positive, got {radius}")

        self._id = int(node_id)
        self._label = str(node_id) if label is None else label
        self._base_radius = float(radius) if radius is not None else label_radius(self._label)
        self._radius = self._base_radius
        self._center = center
        self.weight = weight
        self._on_change: Optional[NodeListener] = None

    @classmethod
    def create(cls, node_id: int, **kwargs) -> Result['Node']:
        """Fallible constructor: returns a Result instead of raising."""
        try:
            return Result.success(cls(node_id, **kwargs))
        except GraphError as e:
            return Result.failure(e)

    @property
    def id(self) -> int:
        return self._id

    @property
    def label(self) -> str:
        return self._label

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def base_radius(self) -> float:
        return self._base_radius

    @property
    def center(self) -> Vector2:
        return self._center

    def move_to(self, point: Vector2) -> None:
        """Set the centre without any bounds checking."""
        self._center = point
        self._changed()

    def set_radius(self, radius: float, maintain_center: bool = True) -> None:
        """
        Resize the node.

        With ``maintain_center`` false the node grows or shrinks around the
        top-left corner of its bounding square, which shifts the centre.
        """
        if radius <= 0:
            raise InvalidNodeError(f"Node {self._id} radius must be positive, got {radius}")
        if not maintain_center:
            shift = radius - self._radius
            self._center = Vector2(self._center.x + shift, self._center.y + shift)
        self._radius = float(radius)
        self._changed()

    def reset_size(self, maintain_center: bool = True) -> None:
        self.set_radius(self._base_radius, maintain_center)

    def edge_point_towards(self, point: Vector2) -> Vector2:
        """Point on the node's border in the direction of ``point``."""
        return self._center + self._center.direction_to(point) * self._radius

    def gap_to(self, other: 'Node') -> float:
        """Distance between the two borders; negative when the nodes overlap."""
        return self._center.distance_to(other.center) - (self._radius + other.radius)

    def intersects(self, other: 'Node') -> bool:
        """True if the nodes touch, overlap or one contains the other."""
        return self.gap_to(other) <= 0

    def is_valid_among(self, nodes: Iterable['Node'], min_space: float = MIN_SPACE) -> bool:
        """True if this node keeps more than ``min_space`` clearance to every other node."""
        for node in nodes:
            if node is not self and node.id != self._id and self.gap_to(node) <= min_space:
                return False
        return True

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Node({self._id}, {self._label!r}, center=({self._center.x:.2f}, {self._center.y:.2f}))"


class Edge:
    """
    An edge between two distinct nodes.

    Directed edges compare by (start, end); undirected edges compare as an
    unordered pair. A directed edge never equals an undirected one.
    """

    def __init__(
        self,
        start: Node,
        end: Node,
        directed: bool = False,
        weight: Optional[Any] = None
    ):
        if start is None or end is None:
            raise InvalidEdgeError("Edge endpoints must both be defined")
        if start.id == end.id:
            raise InvalidEdgeError(f"Cannot create an edge from node {start.id} to itself")
        self._start = start
        self._end = end
        self._directed = bool(directed)
        self.weight = weight

    @classmethod
    def create(cls, start: Node, end: Node, directed: bool = False, **kwargs) -> Result['Edge']:
        """Fallible constructor: returns a Result instead of raising."""
        try:
            return Result.success(cls(start, end, directed, **kwargs))
        except GraphError as e:
            return Result.failure(e)

    @property
    def start(self) -> Node:
        return self._start

    @property
    def end(self) -> Node:
        return self._end

    @property
    def directed(self) -> bool:
        return self._directed

    def involves(self, node: Node) -> bool:
        return node.id == self._start.id or node.id == self._end.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        if self._directed != other._directed:
            return False
        same = self._start.id == other._start.id and self._end.id == other._end.id
        if self._directed:
            return same
        opposite = self._start.id == other._end.id and self._end.id == other._start.id
        return same or opposite

    def __hash__(self) -> int:
        if self._directed:
            return hash((True, self._start.id, self._end.id))
        return hash((False, frozenset((self._start.id, self._end.id))))

    def __repr__(self) -> str:
        arrow = "->" if self._directed else "--"
        return f"Edge({self._start.id} {arrow} {self._end.id})"


class Graph:
    """Nodes, edges and an adjacency index used to choose spring or repulsion."""

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()):
        self._nodes: Dict[int, Node] = {}
        self._edges: List[Edge] = []
        self._edge_set: Set[Edge] = set()
        self._adjacency: Dict[int, Set[int]] = {}
        self._listeners: List[NodeListener] = []
        self._frozen = False
        self._pending: Dict[int, Node] = {}

        for node in nodes:
            self._add_node(node)
        for edge in edges:
            self._add_edge(edge)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        nodes: Iterable[Mapping[str, Any]],
        edges: Iterable[Mapping[str, Any]] = ()
    ) -> Result['Graph']:
        """
        Build a graph from plain records.

        Args:
            nodes: Mappings with 'id' and optional 'label', 'radius', 'weight'.
            edges: Mappings with 'from', 'to' and optional 'directed', 'weight'.

        Returns:
            Result holding the graph, or the first structural error found.
        """
        try:
            graph = cls()
            for spec in nodes:
                graph._add_node(Node(
                    _record_id(spec, "id", InvalidNodeError),
                    label=spec.get("label"),
                    radius=spec.get("radius"),
                    weight=spec.get("weight"),
                ))
            for spec in edges:
                graph._add_edge(Edge(
                    graph._require(_record_id(spec, "from", InvalidEdgeError)),
                    graph._require(_record_id(spec, "to", InvalidEdgeError)),
                    directed=spec.get("directed", False),
                    weight=spec.get("weight"),
                ))
        except GraphError as e:
            logger.debug("Rejected graph: %s", e)
            return Result.failure(e)
        return Result.success(graph)

    @classmethod
    def from_adjacency_matrix(
        cls,
        matrix: Any,
        directed: bool = False,
        labels: Optional[List[str]] = None
    ) -> Result['Graph']:
        """
        Build a graph from a square boolean adjacency matrix.

        Node ids are the row indices. For an undirected graph ``matrix[i][j]``
        and ``matrix[j][i]`` describe the same edge. A set diagonal entry is a
        self-loop and is rejected.
        """
        adjacency = np.asarray(matrix, dtype=bool)
        if adjacency.ndim != 2 or adjacency.shape[0] != adjacency.shape[1]:
            return Result.failure(InvalidEdgeError(
                f"Adjacency matrix must be square, got shape {adjacency.shape}"))
        n = adjacency.shape[0]
        if np.any(np.diagonal(adjacency)):
            i = int(np.flatnonzero(np.diagonal(adjacency))[0])
            return Result.failure(InvalidEdgeError(f"Cannot create an edge from node {i} to itself"))

        if not directed:
            adjacency = np.triu(adjacency | adjacency.T, k=1)

        node_specs = [
            {"id": i, "label": labels[i] if labels is not None else None}
            for i in range(n)
        ]
        edge_specs = [
            {"from": int(i), "to": int(j), "directed": directed}
            for i, j in np.argwhere(adjacency)
        ]
        return cls.build(node_specs, edge_specs)

    def _add_node(self, node: Node) -> None:
        if node.id in self._nodes:
            raise DuplicateNodeError(node.id)
        self._nodes[node.id] = node
        self._adjacency[node.id] = set()
        node._on_change = self._node_changed

    def _add_edge(self, edge: Edge) -> None:
        for endpoint in (edge.start, edge.end):
            if self._nodes.get(endpoint.id) is not endpoint:
                raise UndefinedNodeError(endpoint.id)
        if edge in self._edge_set:
            raise DuplicateEdgeError(f"Duplicate edge {edge!r}")
        self._edges.append(edge)
        self._edge_set.add(edge)
        self._adjacency[edge.start.id].add(edge.end.id)
        self._adjacency[edge.end.id].add(edge.start.id)

    def _require(self, node_id: int) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise UndefinedNodeError(node_id)
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def are_connected(self, a: Node, b: Node) -> bool:
        """True if any edge links the two nodes, whatever its direction."""
        return b.id in self._adjacency.get(a.id, ())

    def neighbours(self, node: Node) -> Set[int]:
        return set(self._adjacency.get(node.id, ()))

    def get_edge(self, a: Node, b: Node, directed: bool) -> Optional[Edge]:
        """Edge from ``a`` to ``b``; when ``directed`` is false the reverse also matches."""
        for edge in self._edges:
            if edge.start.id == a.id and edge.end.id == b.id:
                return edge
            if not directed and edge.start.id == b.id and edge.end.id == a.id:
                return edge
        return None

    def has_edge(self, a: Node, b: Node, directed: bool) -> bool:
        return self.get_edge(a, b, directed) is not None

    def adjacency_matrix(self) -> np.ndarray:
        """Symmetric connection matrix in node order."""
        index = {node_id: i for i, node_id in enumerate(self._nodes)}
        matrix = np.zeros((len(index), len(index)), dtype=bool)
        for edge in self._edges:
            i, j = index[edge.start.id], index[edge.end.id]
            matrix[i, j] = True
            matrix[j, i] = True
        return matrix

    def max_node_radius(self) -> float:
        """Largest base radius among all nodes (0 for an empty graph)."""
        return max((n.base_radius for n in self._nodes.values()), default=0.0)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def positions(self) -> Dict[int, Vector2]:
        return {node_id: node.center for node_id, node in self._nodes.items()}

    def snapshot(self) -> List[Vector2]:
        """Node centres in node order."""
        return [node.center for node in self._nodes.values()]

    def restore(self, snapshot: List[Vector2]) -> None:
        """Move every node back to the centre recorded by :meth:`snapshot`."""
        if len(snapshot) != len(self._nodes):
            raise ValueError(
                f"Snapshot has {len(snapshot)} positions, graph has {len(self._nodes)} nodes")
        for node, point in zip(self._nodes.values(), snapshot):
            node.move_to(point)

    def resize_nodes(self, match_largest: bool = True, maintain_center: bool = True) -> None:
        """Resize every node to the largest base radius, or back to its own."""
        largest = self.max_node_radius()
        for node in self._nodes.values():
            if match_largest:
                node.set_radius(largest, maintain_center)
            else:
                node.reset_size(maintain_center)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_listener(self, listener: NodeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: NodeListener) -> None:
        self._listeners.remove(listener)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Hold node-changed notifications until :meth:`unfreeze`."""
        self._frozen = True

    def unfreeze(self) -> None:
        """Deliver one notification per node that changed while frozen."""
        if not self._frozen:
            return
        self._frozen = False
        pending = list(self._pending.values())
        self._pending.clear()
        for node in pending:
            self._notify(node)

    @contextmanager
    def frozen(self) -> Iterator['Graph']:
        self.freeze()
        try:
            yield self
        finally:
            self.unfreeze()

    def _node_changed(self, node: Node) -> None:
        if self._frozen:
            self._pending[node.id] = node
        else:
            self._notify(node)

    def _notify(self, node: Node) -> None:
        for listener in list(self._listeners):
            listener(node)
