# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# JSON Lines I/O for graphs and layout positions
#
# Lets the layout run as a pipe stage: node and edge records in,
# position records out.

"""
JSON Lines I/O for graph records and node positions.

Input lines are objects tagged with a "type" field:

    {"type": "node", "id": 0, "label": "a"}
    {"type": "edge", "from": 0, "to": 1, "directed": false}
    {"type": "config", "epsilon": 0.1, "seed": 7}

Output lines are positions:

    {"type": "position", "id": 0, "x": 123.4, "y": 56.7}

Usage:
    from forcelayout.io import read_graph, write_positions

    result, options = read_graph(sys.stdin)
    graph = result.unwrap()
    write_positions(graph.positions(), sys.stdout)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, TextIO, Tuple, Union
import argparse
import json
import logging
import sys

import yaml

from .canvas import Canvas
from .config import LayoutConfig
from .errors import ConfigError, Result
from .geometry import Vector2
from .graph import Graph
from .layout import ForceDirectedLayout

logger = logging.getLogger(__name__)


# ============================================================================
# RECORDS
# ============================================================================

@dataclass
class NodeRecord:
    """A node line."""
    id: int
    label: Optional[str] = None
    radius: Optional[float] = None
    weight: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {"type": "node", "id": self.id}
        for key in ("label", "radius", "weight"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'NodeRecord':
        return cls(
            id=d["id"],
            label=d.get("label"),
            radius=d.get("radius"),
            weight=d.get("weight"),
        )


@dataclass
class EdgeRecord:
    """An edge line."""
    from_id: int
    to_id: int
    directed: bool = False
    weight: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {"type": "edge", "from": self.from_id, "to": self.to_id, "directed": self.directed}
        if self.weight is not None:
            d["weight"] = self.weight
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'EdgeRecord':
        return cls(
            from_id=d["from"],
            to_id=d["to"],
            directed=bool(d.get("directed", False)),
            weight=d.get("weight"),
        )


@dataclass
class PositionRecord:
    """A node position line."""
    id: int
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "position", "id": self.id, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'PositionRecord':
        return cls(id=d["id"], x=float(d["x"]), y=float(d["y"]))


@dataclass
class ConfigRecord:
    """Layout options carried in the stream."""
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "config", **self.options}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'ConfigRecord':
        return cls({k: v for k, v in d.items() if k != "type"})


Record = Union[NodeRecord, EdgeRecord, PositionRecord, ConfigRecord]

_RECORD_TYPES = {
    "node": NodeRecord,
    "edge": EdgeRecord,
    "position": PositionRecord,
    "config": ConfigRecord,
}


# ============================================================================
# READERS
# ============================================================================

def read_records(stream: TextIO = sys.stdin) -> Iterator[Record]:
    """Read typed records; malformed lines are logged and skipped."""
    for lineno, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Line %d: invalid JSON (%s), skipped", lineno, e)
            continue
        record_type = _RECORD_TYPES.get(obj.get("type")) if isinstance(obj, dict) else None
        if record_type is None:
            logger.warning("Line %d: unknown record type, skipped", lineno)
            continue
        try:
            yield record_type.from_dict(obj)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Line %d: incomplete %s record (%s), skipped",
                           lineno, obj.get("type"), e)


def read_graph(stream: TextIO = sys.stdin) -> Tuple[Result[Graph], Dict[str, Any]]:
    """
    Read node and edge records into a Graph.

    Position records become initial centres. Config records are merged,
    later keys winning.

    Returns:
        The build result and the merged layout options.
    """
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []
    positions: Dict[int, Vector2] = {}
    options: Dict[str, Any] = {}

    for record in read_records(stream):
        if isinstance(record, NodeRecord):
            nodes.append({"id": record.id, "label": record.label,
                          "radius": record.radius, "weight": record.weight})
        elif isinstance(record, EdgeRecord):
            edges.append({"from": record.from_id, "to": record.to_id,
                          "directed": record.directed, "weight": record.weight})
        elif isinstance(record, PositionRecord):
            positions[record.id] = Vector2(record.x, record.y)
        elif isinstance(record, ConfigRecord):
            options.update(record.options)

    result = Graph.build(nodes, edges)
    if result.ok:
        for node_id, point in positions.items():
            node = result.value.node(node_id)
            if node is not None:
                node.move_to(point)
    return result, options


def read_positions(stream: TextIO = sys.stdin) -> Dict[int, Vector2]:
    """Read position records as {id: Vector2}."""
    return {
        r.id: Vector2(r.x, r.y)
        for r in read_records(stream)
        if isinstance(r, PositionRecord)
    }


# ============================================================================
# WRITERS
# ============================================================================

def write_record(record: Record, stream: TextIO = sys.stdout) -> None:
    print(json.dumps(record.to_dict(), ensure_ascii=False), file=stream)


def write_graph(graph: Graph, stream: TextIO = sys.stdout) -> None:
    """Write the node and edge records of ``graph``."""
    for node in graph.nodes:
        write_record(NodeRecord(node.id, node.label, node.base_radius, node.weight), stream)
    for edge in graph.edges:
        write_record(EdgeRecord(edge.start.id, edge.end.id, edge.directed, edge.weight), stream)


def write_positions(positions: Mapping[int, Vector2], stream: TextIO = sys.stdout) -> None:
    for node_id, point in positions.items():
        write_record(PositionRecord(node_id, point.x, point.y), stream)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Lay out a JSON Lines graph from stdin and print positions to stdout."""
    parser = argparse.ArgumentParser(description="Force-directed layout of a JSON Lines graph")
    parser.add_argument("--width", type=float, default=1500.0)
    parser.add_argument("--height", type=float, default=700.0)
    parser.add_argument("--config", help="YAML file of layout options")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    result, options = read_graph(sys.stdin)
    if not result.ok:
        print(f"Invalid graph: {result.error}", file=sys.stderr)
        return 1

    try:
        config = LayoutConfig.from_yaml(args.config) if args.config else LayoutConfig()
        if options:
            config = LayoutConfig.from_dict({**config.to_dict(), **options})
        if args.seed is not None:
            config = config.with_options(seed=args.seed)
        canvas = Canvas(args.width, args.height)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        print(f"Invalid layout options: {e}", file=sys.stderr)
        return 1

    layout = ForceDirectedLayout(result.value, canvas, config)
    outcome = layout.run()
    if not outcome.converged:
        logger.warning("Stopped after %d iterations without converging", outcome.iterations)
    write_positions(outcome.positions, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
