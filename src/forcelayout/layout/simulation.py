# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Force-directed layout driver.

"""
Force-directed layout driver.

Each iteration the force calculator evaluates every node against the same
snapshot of centres, each force is scaled by the cooling factor
``cooling_base ** iteration``, and nodes are moved through the bounded
updater. The run stops once the largest movement of an iteration is at or
below ``epsilon`` (converged) or ``max_iterations`` is reached (not
converged).

A layout is either idle or running. Starting while running is refused and
reported by ``start()`` returning False. Three execution modes:

- BATCH: iterate to completion inside ``start()``.
- ANIMATED: one iteration per tick of a :class:`~forcelayout.ticks.TickSource`.
- SLIDE_TO_END: compute the result with the graph frozen, put the nodes back,
  then glide them to the result with a :class:`NodeSlider`.

Usage:
    from forcelayout import Canvas, ForceDirectedLayout, Graph, LayoutConfig

    layout = ForceDirectedLayout(graph, Canvas(800, 600), LayoutConfig(seed=1))
    result = layout.run()
    print(result.converged, result.positions)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional
import logging

import numpy as np

from ..canvas import Canvas, move_within_bounds
from ..config import LayoutConfig, LayoutMode
from ..geometry import Vector2
from ..graph import Graph, Node
from ..ticks import TickSource
from .forces import ForceCalculator
from .placement import random_placement
from .slider import NodeSlider

logger = logging.getLogger(__name__)

StepCallback = Callable[[int, float], None]
CompleteCallback = Callable[[], None]


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class SimulationState:
    """Progress of the current or last run."""
    cooling_base: float
    iteration: int = 0
    max_displacement: float = float("inf")

    def cooling_factor(self, iteration: Optional[int] = None) -> float:
        t = self.iteration if iteration is None else iteration
        return self.cooling_base ** t


@dataclass
class LayoutResult:
    """Final centres of a finished run."""
    positions: Dict[int, Vector2]
    converged: bool
    iterations: int
    max_displacement: float


class ForceDirectedLayout:
    """Runs the force-directed algorithm over a graph on a canvas."""

    def __init__(
        self,
        graph: Graph,
        canvas: Canvas,
        config: Optional[LayoutConfig] = None,
        on_step: Optional[StepCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.graph = graph
        self.canvas = canvas
        self.config = (config or LayoutConfig()).validate()
        self.on_step = on_step
        self.on_complete = on_complete
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.forces = ForceCalculator(self.config, self.rng)

        self.run_state = RunState.IDLE
        self.state = SimulationState(self.config.cooling_base)
        self.result: Optional[LayoutResult] = None
        self.slider: Optional[NodeSlider] = None
        self._nodes: List[Node] = []
        self._ticker: Optional[TickSource] = None
        self._mode = self.config.mode

    @property
    def is_running(self) -> bool:
        return self.run_state is RunState.RUNNING

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(
        self,
        ticker: Optional[TickSource] = None,
        mode: Optional[LayoutMode] = None
    ) -> bool:
        """
        Start a run.

        Args:
            ticker: Tick source for ANIMATED and SLIDE_TO_END runs.
            mode: Overrides the configured mode for this run.

        Returns:
            False if a run is already in progress (nothing changes),
            True otherwise.
        """
        if self.is_running:
            logger.warning("Layout is already running; wait for it to finish.")
            return False

        mode = mode or self.config.mode
        if mode is not LayoutMode.BATCH and ticker is None:
            raise ValueError(f"{mode.value} layout needs a tick source")

        self.run_state = RunState.RUNNING
        self._mode = mode
        self.result = None
        self.slider = None
        self.state = SimulationState(self.config.cooling_base)
        self._nodes = self.graph.nodes

        try:
            if self.config.randomize_initial:
                logger.info("Placing nodes.")
                random_placement(self.graph, self.canvas, self.rng, self.config.uniform_node_size)

            logger.info("Applying forces.")
            if mode is LayoutMode.ANIMATED:
                self._ticker = ticker
                ticker.start(self._on_tick)
            elif mode is LayoutMode.SLIDE_TO_END:
                self._slide_to_end(ticker)
            else:
                self._run_to_completion()
        except Exception:
            self._abort()
            raise
        return True

    def run(self) -> Optional[LayoutResult]:
        """
        Run a batch layout regardless of the configured mode.

        Returns:
            The result, or None if another run is in progress.
        """
        if self.is_running:
            logger.warning("Layout is already running; wait for it to finish.")
            return None
        self.start(mode=LayoutMode.BATCH)
        return self.result

    def resume(self, ticker: TickSource) -> bool:
        """
        Continue a paused animated run on ``ticker``.

        Returns:
            False if there is no animated run in progress.
        """
        if not self.is_running or self._mode is not LayoutMode.ANIMATED or self.result is not None:
            return False
        if self._ticker is not None and self._ticker is not ticker:
            self._ticker.stop()
        self._ticker = ticker
        ticker.start(self._on_tick)
        return True

    def step(self) -> bool:
        """
        Perform one iteration.

        An exception from a callback or listener ends the run: the ticker is
        stopped, the layout goes back to idle and the exception propagates.

        Returns:
            True while the run should continue, False once it has stopped.
        """
        if not self.is_running or self.result is not None:
            return False
        try:
            return self._advance()
        except Exception:
            self._abort()
            raise

    def _advance(self) -> bool:
        if self.state.iteration >= self.config.max_iterations:
            self._forces_applied(converged=False)
            return False

        self.state.iteration += 1
        iteration = self.state.iteration
        max_move = self._apply_forces(iteration)
        self.state.max_displacement = max_move

        if self.on_step is not None:
            self.on_step(iteration, max_move)

        if max_move <= self.config.epsilon:
            self._forces_applied(converged=True)
            return False
        if iteration >= self.config.max_iterations:
            self._forces_applied(converged=False)
            return False
        return True

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def _apply_forces(self, iteration: int) -> float:
        """Move every node by its cooled force; returns the largest movement."""
        forces = self.forces.compute_forces(self.graph, self.canvas, iteration)
        cooling = self.config.cooling_factor(iteration)

        max_move = 0.0
        for node, force in zip(self._nodes, forces):
            start = node.center
            end = move_within_bounds(node, start + force * cooling, self.canvas)
            moved = start.distance_to(end)
            if moved > max_move:
                max_move = moved

        logger.debug("Iteration %d: max displacement %.6f", iteration, max_move)
        return max_move

    def _run_to_completion(self) -> None:
        while self.step():
            pass

    def _on_tick(self) -> None:
        self.step()

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _forces_applied(self, converged: bool) -> None:
        self.result = LayoutResult(
            positions=self.graph.positions(),
            converged=converged,
            iterations=self.state.iteration,
            max_displacement=self.state.max_displacement,
        )
        logger.info(
            "Forces applied after %d iterations (converged=%s).",
            self.state.iteration, converged)

        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

        # A slide run finishes when the slide does
        if self._mode is not LayoutMode.SLIDE_TO_END:
            self._stopped_running()

    def _slide_to_end(self, ticker: TickSource) -> None:
        start_snapshot = self.graph.snapshot()
        with self.graph.frozen():
            self._run_to_completion()
            end_snapshot = self.graph.snapshot()
            self.graph.restore(start_snapshot)

        logger.info("Sliding nodes.")
        self.slider = NodeSlider(
            self._nodes, end_snapshot, self.config.slide_frame_count,
            on_end=self._slide_complete)
        self._ticker = ticker
        ticker.start(self._on_slide_tick)

    def _on_slide_tick(self) -> None:
        try:
            self.slider.tick()
        except Exception:
            self._abort()
            raise

    def _slide_complete(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None
        logger.info("Sliding complete.")
        self._stopped_running()

    def _abort(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None
        if self.is_running:
            logger.warning("Layout run aborted after %d iterations.", self.state.iteration)
        self.run_state = RunState.IDLE

    def _stopped_running(self) -> None:
        self.run_state = RunState.IDLE
        if self.on_complete is not None:
            self.on_complete()
