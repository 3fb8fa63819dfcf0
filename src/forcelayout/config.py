# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
"""
Layout configuration.

Usage:
    from forcelayout.config import LayoutConfig, LayoutMode

    config = LayoutConfig(mode=LayoutMode.ANIMATED, seed=42)

    # Or from a YAML file
    config = LayoutConfig.from_yaml("layout.yaml")
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging
import numbers

import yaml

from .errors import ConfigError
from .graph import MIN_SPACE

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = (
    "repulsion_constant", "side_repulsion_constant", "spring_constant",
    "collision_constant", "min_space", "ideal_edge_length", "epsilon",
    "cooling_base", "max_iterations", "slide_frame_count", "vectorize_threshold",
)


class LayoutMode(Enum):
    """How a force-directed run is executed."""
    BATCH = "batch"  # Run to completion synchronously
    ANIMATED = "animated"  # One iteration per tick
    SLIDE_TO_END = "slide_to_end"  # Compute hidden, then glide to the result


@dataclass
class LayoutConfig:
    """Tunable constants for the force-directed layout."""
    repulsion_constant: float = 10000.0
    side_repulsion_constant: float = 1000.0
    spring_constant: float = 1.0
    collision_constant: float = 1.0
    min_space: float = MIN_SPACE
    ideal_edge_length: Optional[float] = None  # None -> 3 * min_space
    epsilon: float = 0.05
    cooling_base: float = 0.99999
    max_iterations: int = 1_000_000_000
    mode: LayoutMode = LayoutMode.BATCH
    slide_frame_count: int = 3000  # ~3 s at 1 ms per frame
    sides_repel: bool = True
    randomize_initial: bool = True
    uniform_node_size: bool = True
    seed: Optional[int] = None
    vectorize_threshold: int = 20  # Use NumPy forces above this node count

    def __post_init__(self):
        if isinstance(self.mode, str):
            self.mode = _parse_mode(self.mode)

    @property
    def edge_length(self) -> float:
        """Resolved ideal edge length."""
        if self.ideal_edge_length is not None:
            return self.ideal_edge_length
        return self.min_space * 3

    def cooling_factor(self, iteration: int) -> float:
        """``cooling_base ** iteration``; strictly decreasing towards 0."""
        return self.cooling_base ** iteration

    def validate(self) -> 'LayoutConfig':
        """Raise ConfigError for out-of-range values; returns self."""
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if name == "ideal_edge_length" and value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.mode, LayoutMode):
            raise ConfigError(f"mode must be a LayoutMode, got {self.mode!r}")
        if self.repulsion_constant < 0:
            raise ConfigError("repulsion_constant must be non-negative")
        if self.side_repulsion_constant < 0:
            raise ConfigError("side_repulsion_constant must be non-negative")
        if self.spring_constant < 0:
            raise ConfigError("spring_constant must be non-negative")
        if self.collision_constant <= 0:
            raise ConfigError("collision_constant must be positive")
        if self.min_space < 0:
            raise ConfigError("min_space must be non-negative")
        if self.edge_length <= 0:
            raise ConfigError("ideal_edge_length must be positive")
        if self.epsilon < 0:
            raise ConfigError("epsilon must be non-negative")
        if not 0 < self.cooling_base < 1:
            raise ConfigError("cooling_base must be in (0, 1)")
        if self.max_iterations < 0:
            raise ConfigError("max_iterations must be non-negative")
        if self.slide_frame_count < 1:
            raise ConfigError("slide_frame_count must be at least 1")
        return self

    def with_options(self, **options) -> 'LayoutConfig':
        """Copy with some fields replaced."""
        return replace(self, **options).validate()

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'LayoutConfig':
        """Create from a plain mapping; unknown keys are an error."""
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ConfigError(f"Unknown layout options: {', '.join(sorted(unknown))}")
        return cls(**d).validate()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'LayoutConfig':
        """Load a YAML mapping of options, optionally nested under 'layout'."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping of layout options")
        if isinstance(data.get("layout"), dict):
            data = data["layout"]
        logger.debug("Loaded layout config from %s", path)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d["mode"] = self.mode.value
        return d


def _parse_mode(name: str) -> LayoutMode:
    try:
        return LayoutMode(name.lower())
    except ValueError:
        raise ConfigError(
            f"Unknown layout mode {name!r}; expected one of "
            f"{', '.join(m.value for m in LayoutMode)}"
        ) from None
