"""
Scheduler Abstraction

Provides the pluggable clock and timer source used by ad units for the
remaining-time ticker and the deferred AdStopped dispatch. Real playback runs
on the asyncio event loop; tests and headless runs use a virtual clock that
only moves when advanced.
"""

import asyncio
import heapq
import itertools
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from .log_config import get_context_logger


class ScheduledTask:
    """
    Handle for a one-shot or periodic callback registered with a Scheduler.

    Cancelling is idempotent and safe after the task has already run.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        args: tuple[Any, ...] = (),
        interval: float | None = None,
        name: str | None = None,
    ):
        self._callback = callback
        self._args = args
        self.interval = interval
        self.name = name or getattr(callback, "__name__", "task")
        self.deadline = 0.0
        self._cancelled = False
        self._done = False
        self._handle: Any = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def periodic(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        """True while the task may still fire."""
        return not (self._cancelled or self._done)

    def cancel(self) -> None:
        """Prevent any further run of this task."""
        if not self.active:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        if not self.active:
            return
        if not self.periodic:
            self._done = True
        self._callback(*self._args)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "done" if self._done else "pending"
        return f"<ScheduledTask {self.name} {state} deadline={self.deadline:.3f}>"


class Scheduler(ABC):
    """
    Abstract base class for schedulers.

    Subclasses provide the clock (`now`) and the mechanics of arming timers.
    """

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""

    @abstractmethod
    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        """Run callback once after delay seconds."""

    @abstractmethod
    def call_every(
        self, interval: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        """Run callback every interval seconds until cancelled."""

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the calling coroutine for seconds on this scheduler's clock."""

    @abstractmethod
    def get_mode(self) -> str:
        """Get scheduler mode identifier."""

    @staticmethod
    def _check_interval(interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")


class AsyncioScheduler(Scheduler):
    """
    Real-time scheduler on top of the asyncio event loop.

    Timers are armed with loop.call_later, so the scheduler must be used from
    code running inside the loop (or be given the loop explicitly).

    Examples:
        >>> scheduler = AsyncioScheduler()
        >>> task = scheduler.call_later(0.075, print, "stopped")
        >>> await asyncio.sleep(0.1)
        stopped
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self.logger = get_context_logger("asyncio_scheduler")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return time.monotonic()

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        task = ScheduledTask(callback, args, name=name)
        task.deadline = self.now() + max(delay, 0.0)
        task._handle = self.loop.call_later(max(delay, 0.0), task._run)
        return task

    def call_every(
        self, interval: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        self._check_interval(interval)
        task = ScheduledTask(callback, args, interval=interval, name=name)

        def tick() -> None:
            task._run()
            if task.active:
                task.deadline += interval
                task._handle = self.loop.call_later(interval, tick)

        task.deadline = self.now() + interval
        task._handle = self.loop.call_later(interval, tick)
        return task

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def get_mode(self) -> str:
        return "real"


class SimulatedScheduler(Scheduler):
    """
    Virtual-time scheduler for headless playback and deterministic tests.

    Time only moves when advance() is called. Due tasks fire in deadline
    order (ties in scheduling order) with the clock set to each task's
    deadline while it runs, so callbacks observe consistent timestamps.

    Examples:
        >>> scheduler = SimulatedScheduler()
        >>> fired = []
        >>> scheduler.call_later(0.075, fired.append, "AdStopped")
        >>> scheduler.advance(0.05)
        >>> fired
        []
        >>> scheduler.advance(0.05)
        >>> fired
        ['AdStopped']
    """

    def __init__(self, speed: float = 1.0, initial_time: float = 0.0):
        """
        Initialize simulated scheduler.

        Args:
            speed: Speed multiplier applied by advance() and sleep()
            initial_time: Starting virtual time

        Raises:
            ValueError: If speed <= 0
        """
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.speed = speed
        self.virtual_time = initial_time
        self._queue: list[tuple[float, int, ScheduledTask]] = []
        self._sequence = itertools.count()
        self.logger = get_context_logger("simulated_scheduler")

    def now(self) -> float:
        return self.virtual_time

    def _push(self, task: ScheduledTask) -> None:
        heapq.heappush(self._queue, (task.deadline, next(self._sequence), task))

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        task = ScheduledTask(callback, args, name=name)
        task.deadline = self.virtual_time + max(delay, 0.0)
        self._push(task)
        return task

    def call_every(
        self, interval: float, callback: Callable[..., Any], *args: Any, name: str | None = None
    ) -> ScheduledTask:
        self._check_interval(interval)
        task = ScheduledTask(callback, args, interval=interval, name=name)
        task.deadline = self.virtual_time + interval
        self._push(task)
        return task

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing every task that falls due.

        Args:
            seconds: Duration to advance (scaled by speed)

        Returns:
            Number of task runs performed
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative duration: {seconds}")
        target = self.virtual_time + seconds * self.speed
        runs = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, task = heapq.heappop(self._queue)
            if not task.active:
                continue
            self.virtual_time = deadline
            task._run()
            runs += 1
            if task.active and task.periodic:
                task.deadline = deadline + task.interval
                self._push(task)
        self.virtual_time = target
        return runs

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)
        # Let other coroutines observe the new virtual time
        await asyncio.sleep(0)

    def pending(self) -> list[ScheduledTask]:
        """Tasks that may still fire, in deadline order."""
        return [task for _, _, task in sorted(self._queue) if task.active]

    def set_speed(self, speed: float) -> None:
        """Change simulation speed.

        Raises:
            ValueError: If speed <= 0
        """
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        self.speed = speed
        self.logger.info("Simulation speed changed", speed=speed)

    def get_mode(self) -> str:
        return "simulated"


def create_scheduler(mode: str = "real", **kwargs: Any) -> Scheduler:
    """
    Factory function to create the appropriate scheduler.

    Args:
        mode: 'real' or 'simulated'
        **kwargs: Additional arguments passed to the scheduler

    Returns:
        Configured Scheduler instance

    Raises:
        ValueError: For an unknown mode

    Examples:
        >>> scheduler = create_scheduler("simulated", speed=2.0)
    """
    if mode == "simulated":
        return SimulatedScheduler(**kwargs)
    if mode == "real":
        return AsyncioScheduler(**kwargs)
    raise ValueError(f"Unknown scheduler mode: {mode!r}")


__all__ = [
    "ScheduledTask",
    "Scheduler",
    "AsyncioScheduler",
    "SimulatedScheduler",
    "create_scheduler",
]
