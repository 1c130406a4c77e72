"""
Turn Scheduler - Deferred start of the next turn.

When a turn ends and the duel goes on, the engine asks a scheduler to
start the next turn "after a delay". How long that is, and what drives
the clock, belongs to the host:

- ManualScheduler: the host calls tick() (sessions, CLI, tests)
- AsyncioScheduler: the running event loop fires it after `delay` seconds

Every scheduled turn returns a handle the engine keeps, so a pending
start can be cancelled when the engine is closed or a turn is started
by hand.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable
import asyncio
import logging

logger = logging.getLogger(__name__)

TurnCallback = Callable[[], None]


class ScheduledTurn(ABC):
    """Handle to one pending turn start."""

    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class TurnScheduler(ABC):
    """Runs a callback once, some time after it was scheduled."""

    @abstractmethod
    def schedule(self, delay: float, callback: TurnCallback) -> ScheduledTurn:
        """
        Schedule a callback.

        Args:
            delay: Seconds the host should wait before running it
            callback: Function starting the next turn

        Returns:
            Handle that can cancel the callback before it runs
        """
        pass


# =============================================================================
# Manual (tick-driven)
# =============================================================================

@dataclass
class ManualTurn(ScheduledTurn):
    callback: TurnCallback
    delay: float
    fired: bool = False
    _cancelled: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_live(self) -> bool:
        return not (self.fired or self._cancelled)


class ManualScheduler(TurnScheduler):
    """
    Scheduler driven by explicit ticks.

    Usage:
        scheduler = ManualScheduler()
        engine = DuelEngine(deck_a, deck_b, scheduler=scheduler)
        ...
        if scheduler.pending:
            scheduler.tick()  # starts the next turn
    """

    def __init__(self):
        self._queue: list[ManualTurn] = []

    def schedule(self, delay: float, callback: TurnCallback) -> ManualTurn:
        turn = ManualTurn(callback=callback, delay=delay)
        self._queue.append(turn)
        logger.debug("Turn start scheduled (delay %.2fs)", delay)
        return turn

    @property
    def pending(self) -> bool:
        """Whether a live callback is waiting."""
        return any(t.is_live for t in self._queue)

    def tick(self) -> bool:
        """
        Run the oldest live callback.

        Returns True if one ran.
        """
        self._queue = [t for t in self._queue if t.is_live]
        if not self._queue:
            return False
        turn = self._queue.pop(0)
        turn.fired = True
        turn.callback()
        return True

    def clear(self) -> None:
        """Cancel everything still waiting."""
        for turn in self._queue:
            turn.cancel()
        self._queue.clear()


# =============================================================================
# asyncio
# =============================================================================

class AsyncioTurn(ScheduledTurn):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(TurnScheduler):
    """
    Scheduler backed by an asyncio event loop.

    Without an explicit loop, the scheduler must be created while a loop
    is running; it binds to asyncio.get_running_loop() and raises
    RuntimeError otherwise, before any duel relies on it.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    def schedule(self, delay: float, callback: TurnCallback) -> AsyncioTurn:
        return AsyncioTurn(self._loop.call_later(delay, callback))
