"""Clocks and the cooperative frame scheduler.

Everything time-dependent reads time from an injectable Clock, so a
ManualClock can drive the whole pipeline deterministically in tests
and in offline file analysis.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional


class Clock(ABC):
    """Source of monotonic time in seconds."""

    @abstractmethod
    def now(self) -> float:
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        pass

    def sleep_until(self, deadline: float) -> None:
        self.sleep(deadline - self.now())


class MonotonicClock(Clock):
    """Wall-clock time for live sessions."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class ManualClock(Clock):
    """A clock that only moves when told to; sleeping advances it instantly."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += seconds

    def sleep_until(self, deadline: float) -> None:
        self._now = max(self._now, deadline)


@dataclass
class ScheduledTask:
    """A callback repeated at a fixed interval."""

    name: str
    interval: float  # seconds
    callback: Callable[[], None]
    next_due: float
    active: bool = True


class FrameScheduler:
    """Single-threaded polling loop running interval callbacks.

    Callbacks run in due-time order; a callback never overlaps the next
    one, so a frame's audio analysis completes before the next frame.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or MonotonicClock()
        self.tasks: List[ScheduledTask] = []
        self._running = False

    def every(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str = "",
        immediate: bool = False,
    ) -> ScheduledTask:
        """
        Schedule a repeating callback.

        Args:
            interval: Seconds between calls
            callback: Function called with no arguments
            name: Label for debugging
            immediate: Run the first call now instead of after one interval
        """
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        now = self.clock.now()
        task = ScheduledTask(
            name=name or getattr(callback, "__name__", "task"),
            interval=interval,
            callback=callback,
            next_due=now if immediate else now + interval,
        )
        self.tasks.append(task)
        return task

    def cancel(self, task: ScheduledTask) -> None:
        task.active = False
        if task in self.tasks:
            self.tasks.remove(task)

    def stop(self) -> None:
        """Stop the loop after the current callback returns."""
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def run_pending(self) -> int:
        """Run every task that is due now. Returns the number of calls made."""
        calls = 0
        now = self.clock.now()
        for task in sorted(self.tasks, key=lambda t: t.next_due):
            if task.active and task.next_due <= now:
                task.next_due += task.interval
                # Skip missed intervals rather than bursting
                if task.next_due <= now:
                    task.next_due = now + task.interval
                task.callback()
                calls += 1
        return calls

    def run(
        self,
        until: Optional[Callable[[], bool]] = None,
        max_duration: Optional[float] = None,
    ) -> None:
        """
        Run the loop until stopped.

        Args:
            until: Predicate checked after each pass; the loop ends when it is true
            max_duration: Safety limit in seconds
        """
        self._running = True
        started = self.clock.now()
        try:
            while self._running and self.tasks:
                self.run_pending()
                if not self._running:
                    break
                if until is not None and until():
                    break
                now = self.clock.now()
                if max_duration is not None and now - started >= max_duration:
                    break
                if self.tasks:
                    self.clock.sleep_until(min(task.next_due for task in self.tasks))
        finally:
            self._running = False
