# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Tick sources that drive animated layouts and slides.

"""
Tick sources.

The layout engine never blocks and never starts threads. Animated runs and
slides register a callback with a tick source and are advanced one step per
tick; the source decides when ticks happen. Anything with ``start`` and
``stop`` satisfies :class:`TickSource`: a fixed-rate timer, a game loop, or
a test calling :meth:`ManualTicker.tick` directly.
"""

from typing import Callable, Optional, Protocol
import asyncio
import logging

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickSource(Protocol):
    """Protocol for schedulers that call back once per tick."""

    def start(self, callback: TickCallback) -> None:
        """Begin calling ``callback`` once per tick, replacing any previous one."""
        ...

    def stop(self) -> None:
        """Stop ticking. Safe to call from inside the callback."""
        ...


class ManualTicker:
    """Tick source advanced explicitly by the caller."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def tick(self) -> bool:
        """Deliver one tick; returns True while a callback is still registered."""
        callback = self._callback
        if callback is None:
            return False
        self.ticks += 1
        callback()
        return self.active

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until stopped or ``max_ticks`` is reached; returns ticks delivered."""
        delivered = 0
        while self.active and (max_ticks is None or delivered < max_ticks):
            self.tick()
            delivered += 1
        return delivered


class AsyncioTicker:
    """Fixed-interval tick source on an asyncio event loop."""

    def __init__(self, interval: float = 0.001, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.interval = interval
        self._loop = loop
        self._callback: Optional[TickCallback] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._done: Optional[asyncio.Event] = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        if self._done is None:
            self._done = asyncio.Event()
        self._done.clear()
        self._callback = callback
        if self._handle is None:
            self._handle = self._loop.call_later(self.interval, self._fire)

    def stop(self) -> None:
        self._callback = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._done is not None:
            self._done.set()

    def _fire(self) -> None:
        self._handle = None
        callback = self._callback
        if callback is None:
            return
        callback()
        # The callback may have stopped this ticker or started a new one
        if self._callback is not None and self._handle is None:
            self._handle = self._loop.call_later(self.interval, self._fire)

    async def wait(self) -> None:
        """Wait until the ticker is stopped with no callback restarted."""
        while self.active:
            await self._done.wait()
            if self.active:
                self._done.clear()
