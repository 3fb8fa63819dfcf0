# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Force-directed layout engine.

"""
Force-directed layout engine.

Provides:
- Force model (logarithmic springs, inverse-square repulsion, side repulsion)
- Simulation driver (cooling, convergence, batch/animated/slide modes)
- Node slider (kinematic interpolation between snapshots)
- Random placement and shuffling
"""

from .forces import ForceCalculator, repulsion_between, spring_between
from .simulation import (
    ForceDirectedLayout,
    LayoutResult,
    RunState,
    SimulationState,
)
from .slider import NodeSlider
from .placement import random_placement, shuffle, valid_random_positions

__all__ = [
    'ForceCalculator',
    'repulsion_between',
    'spring_between',
    'ForceDirectedLayout',
    'LayoutResult',
    'RunState',
    'SimulationState',
    'NodeSlider',
    'random_placement',
    'shuffle',
    'valid_random_positions',
]
