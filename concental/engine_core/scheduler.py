"""
Scheduler - Cancellable deferred and repeating calls.

GameSession never sleeps. Turn resolution delays and the one-second
ticker are scheduled through a Scheduler so that:
- Tests drive time explicitly (ManualScheduler)
- The API server runs on the event loop (AsyncioScheduler)
- Reset and game over can cancel anything still pending
"""

from __future__ import annotations
import asyncio
from abc import ABC, abstractmethod
from typing import Callable

Callback = Callable[[], None]


class ScheduledCall:
    """Handle for a scheduled callback. Cancelling is idempotent."""

    def __init__(self, callback: Callback, when: float, interval: float | None = None):
        self.callback = callback
        self.when = when
        self.interval = interval
        self._cancelled = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self):
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class Scheduler(ABC):
    """Source of deferred execution for a GameSession."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        """Run callback once, `delay` seconds from now."""
        pass

    @abstractmethod
    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        """Run callback every `interval` seconds until cancelled."""
        pass


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler. Nothing runs until the owner moves time.

    Usage:
        scheduler = ManualScheduler()
        session = GameSession(scheduler=scheduler)
        ...
        scheduler.advance(1.0)   # resolves a mismatch, ticks the timer once
        scheduler.run_pending()  # resolve deferred turns without ticking
    """

    def __init__(self):
        self.now = 0.0
        self._calls: list[ScheduledCall] = []

    @property
    def pending(self) -> int:
        """Number of live scheduled calls."""
        return sum(1 for c in self._calls if not c.cancelled)

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(callback, when=self.now + max(0.0, delay))
        self._calls.append(call)
        return call

    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        if interval <= 0:
            raise ValueError("interval must be positive")
        call = ScheduledCall(callback, when=self.now + interval, interval=interval)
        self._calls.append(call)
        return call

    def advance(self, seconds: float):
        """Move the clock forward, running every call that falls due in order."""
        target = self.now + max(0.0, seconds)
        while True:
            call = self._next_due(target)
            if call is None:
                break
            self.now = max(self.now, call.when)
            self._run(call)
        self.now = target
        self._prune()

    def run_pending(self):
        """Run all pending one-shot calls now, leaving repeating calls alone."""
        while True:
            one_shots = [c for c in self._calls if not c.cancelled and not c.repeating]
            if not one_shots:
                break
            self._run(min(one_shots, key=lambda c: c.when))
        self._prune()

    def _next_due(self, target: float) -> ScheduledCall | None:
        due = [c for c in self._calls if not c.cancelled and c.when <= target]
        if not due:
            return None
        # min() keeps insertion order among equal deadlines
        return min(due, key=lambda c: c.when)

    def _run(self, call: ScheduledCall):
        if call.repeating:
            call.when += call.interval
        else:
            call.cancel()
        call.callback()

    def _prune(self):
        self._calls = [c for c in self._calls if not c.cancelled]


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        loop = self.loop
        call = ScheduledCall(callback, when=loop.time() + max(0.0, delay))

        def fire():
            if call.cancelled:
                return
            call._timer = None
            call.cancel()
            callback()

        call._timer = loop.call_later(max(0.0, delay), fire)
        return call

    def call_every(self, interval: float, callback: Callback) -> ScheduledCall:
        if interval <= 0:
            raise ValueError("interval must be positive")
        loop = self.loop
        call = ScheduledCall(callback, when=loop.time() + interval, interval=interval)

        def fire():
            if call.cancelled:
                return
            call.when += interval
            call._timer = loop.call_later(interval, fire)
            callback()

        call._timer = loop.call_later(interval, fire)
        return call
