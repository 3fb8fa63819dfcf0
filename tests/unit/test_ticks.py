"""Tests for tick sources."""

import asyncio

from forcelayout.canvas import Canvas
from forcelayout.config import LayoutConfig, LayoutMode
from forcelayout.geometry import Vector2
from forcelayout.graph import Graph
from forcelayout.layout.simulation import ForceDirectedLayout
from forcelayout.ticks import AsyncioTicker, ManualTicker


class TestManualTicker:
    """Tests for ManualTicker."""

    def test_tick_without_callback(self):
        ticker = ManualTicker()
        assert ticker.tick() is False
        assert ticker.ticks == 0

    def test_callback_can_stop_ticker(self):
        ticker = ManualTicker()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 3:
                ticker.stop()

        ticker.start(callback)
        assert ticker.run() == 3
        assert not ticker.active

    def test_run_respects_max_ticks(self):
        ticker = ManualTicker()
        ticker.start(lambda: None)
        assert ticker.run(max_ticks=7) == 7
        assert ticker.active


class TestAsyncioTicker:
    """Tests for AsyncioTicker."""

    def test_ticks_until_stopped(self):
        async def scenario():
            ticker = AsyncioTicker(interval=0.0)
            calls = []

            def callback():
                calls.append(1)
                if len(calls) == 5:
                    ticker.stop()

            ticker.start(callback)
            await asyncio.wait_for(ticker.wait(), timeout=5.0)
            return calls

        assert len(asyncio.run(scenario())) == 5

    def test_drives_animated_layout(self):
        async def scenario():
            graph = Graph.build(
                [{"id": 0, "radius": 20.0}, {"id": 1, "radius": 20.0}],
                [{"from": 0, "to": 1}],
            ).unwrap()
            graph.node(0).move_to(Vector2(300.0, 300.0))
            graph.node(1).move_to(Vector2(500.0, 300.0))
            config = LayoutConfig(
                mode=LayoutMode.ANIMATED, randomize_initial=False,
                ideal_edge_length=150.0, seed=1)
            layout = ForceDirectedLayout(graph, Canvas(800, 600), config)
            ticker = AsyncioTicker(interval=0.0)
            assert layout.start(ticker)
            await asyncio.wait_for(ticker.wait(), timeout=30.0)
            return layout

        layout = asyncio.run(scenario())
        assert not layout.is_running
        assert layout.result.converged
