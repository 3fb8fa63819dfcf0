"""Tests for the force-directed layout driver."""

import math

import numpy as np
import pytest

from forcelayout.canvas import Canvas, is_within_bounds
from forcelayout.config import LayoutConfig, LayoutMode
from forcelayout.geometry import Vector2
from forcelayout.graph import Graph
from forcelayout.layout.simulation import ForceDirectedLayout, RunState, SimulationState
from forcelayout.ticks import ManualTicker


def _graph(positions, edges=(), radius=20.0):
    graph = Graph.build(
        [{"id": i, "radius": radius} for i in range(len(positions))],
        [{"from": a, "to": b} for a, b in edges],
    ).unwrap()
    for node, (x, y) in zip(graph.nodes, positions):
        node.move_to(Vector2(x, y))
    return graph


def _config(**options):
    defaults = dict(randomize_initial=False, seed=1234)
    defaults.update(options)
    return LayoutConfig(**defaults)


class TestCooling:
    """Tests for the cooling schedule."""

    def test_strictly_decreasing(self):
        config = LayoutConfig()
        values = [config.cooling_factor(t) for t in range(0, 5000, 250)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_tends_to_zero(self):
        config = LayoutConfig(cooling_base=0.99)
        assert config.cooling_factor(10_000) < 1e-40

    def test_state_cooling_factor(self):
        state = SimulationState(cooling_base=0.5, iteration=3)
        assert state.cooling_factor() == 0.125
        assert state.cooling_factor(1) == 0.5


class TestBatchLayout:
    """Tests for batch runs."""

    def test_two_connected_nodes_settle_at_ideal_length(self):
        """Two nodes 500 apart with one edge end up about one ideal length apart."""
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        canvas = Canvas(800, 600)
        config = _config(ideal_edge_length=90.0)
        layout = ForceDirectedLayout(graph, canvas, config)

        result = layout.run()

        assert result.converged
        a, b = graph.nodes
        # Stops once ln(d / L) falls to epsilon; the side pushes add about 0.003
        gap = a.center.distance_to(b.center)
        assert 90.0 <= gap <= 90.0 * math.exp(config.epsilon + 0.01)
        assert is_within_bounds(a, canvas)
        assert is_within_bounds(b, canvas)
        assert result.positions[0] == a.center
        assert not layout.is_running

    def test_coincident_nodes_separate_after_one_iteration(self):
        """Four unconnected nodes at one point are pulled apart by the jitter."""
        graph = _graph([(400.0, 300.0)] * 4)
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(max_iterations=1))

        result = layout.run()

        assert result.iterations == 1
        centres = [n.center for n in graph.nodes]
        for i in range(4):
            for j in range(i + 1, 4):
                assert centres[i].distance_to(centres[j]) > 0

    def test_iteration_cap_reports_not_converged(self):
        graph = _graph([(100.0, 100.0), (700.0, 500.0)], edges=[(0, 1)])
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(max_iterations=5))

        result = layout.run()

        assert not result.converged
        assert result.iterations == 5
        assert layout.run_state is RunState.IDLE

    def test_zero_max_iterations(self):
        graph = _graph([(100.0, 100.0), (200.0, 100.0)])
        result = ForceDirectedLayout(graph, Canvas(800, 600), _config(max_iterations=0)).run()
        assert not result.converged
        assert result.iterations == 0
        assert graph.nodes[0].center == Vector2(100.0, 100.0)

    def test_failing_step_callback_returns_to_idle(self):
        """A run whose callback raises can be started again afterwards."""
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        calls = []

        def fail_once(iteration, max_move):
            calls.append(iteration)
            if len(calls) == 1:
                raise RuntimeError("renderer failed")

        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(), on_step=fail_once)
        with pytest.raises(RuntimeError):
            layout.run()
        assert layout.run_state is RunState.IDLE
        assert layout.result is None

        result = layout.run()
        assert result is not None
        assert result.converged

    def test_empty_graph_converges_immediately(self):
        result = ForceDirectedLayout(Graph(), Canvas(800, 600), _config()).run()
        assert result.converged
        assert result.iterations == 1
        assert result.positions == {}

    def test_nodes_stay_in_bounds(self):
        graph = _graph(
            [(10.0, 10.0), (15.0, 12.0), (790.0, 590.0), (400.0, 5.0), (3.0, 580.0)],
            edges=[(0, 2), (1, 3)],
        )
        canvas = Canvas(800, 600)
        steps = []

        def check(iteration, max_move):
            steps.append(iteration)
            for node in graph.nodes:
                assert is_within_bounds(node, canvas)

        ForceDirectedLayout(graph, canvas, _config(max_iterations=300), on_step=check).run()
        assert steps == list(range(1, len(steps) + 1))

    def test_callbacks(self):
        graph = _graph([(100.0, 100.0), (700.0, 500.0)])
        steps = []
        completed = []
        layout = ForceDirectedLayout(
            graph, Canvas(800, 600), _config(max_iterations=3),
            on_step=lambda i, m: steps.append((i, m)),
            on_complete=lambda: completed.append(True),
        )
        layout.run()
        assert [i for i, _ in steps] == [1, 2, 3]
        assert all(m >= 0 for _, m in steps)
        assert completed == [True]

    def test_deterministic_replay(self):
        """Same seed and start positions give bit-identical results."""
        def run():
            graph = _graph(
                [(300.0, 300.0), (300.0, 300.0), (500.0, 200.0), (120.0, 480.0)],
                edges=[(0, 2)],
            )
            layout = ForceDirectedLayout(
                graph, Canvas(800, 600), _config(randomize_initial=True, seed=99, max_iterations=200))
            return layout.run().positions

        assert run() == run()

    def test_tighter_epsilon_never_finishes_sooner(self):
        def halting_iteration(epsilon):
            graph = _graph([(150.0, 300.0), (650.0, 300.0), (400.0, 100.0)], edges=[(0, 1)])
            layout = ForceDirectedLayout(
                graph, Canvas(800, 600), _config(epsilon=epsilon, ideal_edge_length=120.0))
            return layout.run().iterations

        halts = [halting_iteration(eps) for eps in (1.0, 0.5, 0.2, 0.1)]
        assert halts == sorted(halts)

    def test_random_initial_placement_in_bounds(self):
        graph = _graph([(0.0, 0.0)] * 6)
        canvas = Canvas(600, 400)
        layout = ForceDirectedLayout(
            graph, canvas, LayoutConfig(seed=3, max_iterations=1))
        layout.run()
        for node in graph.nodes:
            assert is_within_bounds(node, canvas)

    def test_uniform_node_size_on_start(self):
        graph = Graph.build([
            {"id": 0, "radius": 10.0},
            {"id": 1, "radius": 30.0},
        ]).unwrap()
        ForceDirectedLayout(graph, Canvas(800, 600), LayoutConfig(seed=3, max_iterations=1)).run()
        assert [n.radius for n in graph.nodes] == [30.0, 30.0]


class TestAnimatedLayout:
    """Tests for tick-driven runs."""

    def test_one_iteration_per_tick(self):
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        ticker = ManualTicker()
        steps = []
        layout = ForceDirectedLayout(
            graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED, ideal_edge_length=90.0),
            on_step=lambda i, m: steps.append(i))

        assert layout.start(ticker)
        assert layout.is_running
        assert steps == []

        ticker.tick()
        ticker.tick()
        assert steps == [1, 2]

        ticker.run()
        assert not layout.is_running
        assert not ticker.active
        assert layout.result.converged

    def test_start_while_running_is_refused(self):
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        ticker = ManualTicker()
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED))

        assert layout.start(ticker)
        ticker.tick()
        before = [n.center for n in graph.nodes]

        assert layout.start(ManualTicker()) is False
        assert layout.run() is None
        assert [n.center for n in graph.nodes] == before
        assert layout.state.iteration == 1

    def test_paused_run_resumes(self):
        """Ticks stopped externally leave the run paused; restarting them continues it."""
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        ticker = ManualTicker()
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED))
        layout.start(ticker)
        ticker.tick()
        ticker.stop()
        assert layout.is_running
        assert layout.state.iteration == 1

        assert layout.resume(ticker)
        ticker.run()
        assert not layout.is_running
        assert layout.result.converged
        assert not layout.resume(ticker)

    def test_resume_on_new_ticker_detaches_old_one(self):
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        first, second = ManualTicker(), ManualTicker()
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED))
        layout.start(first)

        assert layout.resume(second)
        assert not first.active
        first.tick()
        second.tick()
        assert layout.state.iteration == 1

    def test_failing_tick_callback_returns_to_idle(self):
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        ticker = ManualTicker()

        def explode(iteration, max_move):
            raise RuntimeError("renderer failed")

        layout = ForceDirectedLayout(
            graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED), on_step=explode)
        layout.start(ticker)
        with pytest.raises(RuntimeError):
            ticker.tick()
        assert not layout.is_running
        assert not ticker.active

    def test_animated_needs_ticker(self):
        graph = _graph([(150.0, 300.0)])
        layout = ForceDirectedLayout(graph, Canvas(800, 600), _config(mode=LayoutMode.ANIMATED))
        with pytest.raises(ValueError):
            layout.start()
        assert not layout.is_running


class TestSlideToEnd:
    """Tests for slide-to-end runs."""

    def test_failing_listener_during_slide_returns_to_idle(self):
        graph = _graph([(150.0, 300.0), (650.0, 300.0)], edges=[(0, 1)])
        ticker = ManualTicker()
        layout = ForceDirectedLayout(
            graph, Canvas(800, 600),
            _config(mode=LayoutMode.SLIDE_TO_END, slide_frame_count=5))
        assert layout.start(ticker)

        def explode(node):
            raise RuntimeError("listener failed")

        graph.add_listener(explode)
        with pytest.raises(RuntimeError):
            ticker.tick()
        assert not layout.is_running
        assert not ticker.active

        graph.remove_listener(explode)
        assert layout.run().converged

    def test_slide_reaches_batch_result(self):
        start = [(150.0, 300.0), (650.0, 300.0), (400.0, 80.0)]
        edges = [(0, 1), (1, 2)]

        batch_graph = _graph(start, edges)
        expected = ForceDirectedLayout(batch_graph, Canvas(800, 600), _config()).run().positions

        graph = _graph(start, edges)
        seen = []
        graph.add_listener(lambda node: seen.append(node.id))
        ticker = ManualTicker()
        completed = []
        layout = ForceDirectedLayout(
            graph, Canvas(800, 600),
            _config(mode=LayoutMode.SLIDE_TO_END, slide_frame_count=20),
            on_complete=lambda: completed.append(True))

        assert layout.start(ticker)

        # Physics ran hidden; nodes are back at the start, nothing observed mid-run
        assert [n.center.to_tuple() for n in graph.nodes] == start
        assert layout.result.positions == expected
        assert layout.is_running
        assert len(seen) == 3

        ticks = ticker.run()
        assert ticks == 20
        assert completed == [True]
        assert not layout.is_running
        assert graph.positions() == expected

    def test_slide_needs_ticker(self):
        layout = ForceDirectedLayout(
            _graph([(1.0, 1.0)]), Canvas(800, 600), _config(mode=LayoutMode.SLIDE_TO_END))
        with pytest.raises(ValueError):
            layout.start()


class TestVectorisedLayout:
    """Tests for runs large enough to use the NumPy force path."""

    def test_large_graph_stays_in_bounds(self):
        rng = np.random.default_rng(8)
        n = 30
        points = [(float(x), float(y)) for x, y in rng.uniform(50, 950, size=(n, 2))]
        edges = [(i, (i + 1) % n) for i in range(n)]
        graph = _graph(points, edges, radius=15.0)
        canvas = Canvas(1000, 1000)

        result = ForceDirectedLayout(graph, canvas, _config(max_iterations=50)).run()

        assert result.iterations <= 50
        for node in graph.nodes:
            assert is_within_bounds(node, canvas)
