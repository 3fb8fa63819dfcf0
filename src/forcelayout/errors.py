# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Error taxonomy for graph construction and layout configuration.

"""
Errors raised while building graphs or configuring a layout.

Structural problems (self-loops, duplicate ids, dangling references) are
rejected when the graph is built, before any simulation starts. Callers
that prefer not to use exceptions go through the fallible factories
(``Node.create``, ``Edge.create``, ``Graph.build``), which return a
:class:`Result` instead.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class GraphError(ValueError):
    """Base class for invalid graph structure."""


class InvalidNodeError(GraphError):
    """Node with a negative id or a non-positive radius."""


class DuplicateNodeError(GraphError):
    """Two nodes share the same id."""

    def __init__(self, node_id: int):
        super().__init__(f"Duplicate node id {node_id}")
        self.node_id = node_id


class InvalidEdgeError(GraphError):
    """Edge from a node to itself, or with a missing endpoint."""


class DuplicateEdgeError(GraphError):
    """An equal edge already exists in the graph."""


class UndefinedNodeError(GraphError):
    """An edge refers to a node id the graph does not contain."""

    def __init__(self, node_id: int):
        super().__init__(f"Undefined node id {node_id}")
        self.node_id = node_id


class ConfigError(ValueError):
    """Invalid layout configuration or canvas dimensions."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a fallible construction: either a value or an error."""
    value: Optional[T] = None
    error: Optional[GraphError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: GraphError) -> 'Result[T]':
        return cls(error=error)
