"""Deferred task queue drained after the synchronous part of a run.

Tasks are ordered by ``(due, seq)`` in a heap, so ready tasks always run in
due-time order and tasks sharing a due time run in the order they were
scheduled. Between tasks the loop waits exactly until the next due time
rather than polling.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def sleep_ms(delay: float) -> None:
    time.sleep(max(0.0, delay) / 1000.0)


@dataclass(order=True)
class Task:
    """One deferred callback. Runs once at or after ``due`` (milliseconds)."""
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    label: str = field(default="task", compare=False)


class Scheduler:
    def __init__(self, clock: Optional[Clock] = None, sleep: Optional[Sleeper] = None):
        self.clock: Clock = clock or monotonic_ms
        self.sleep: Sleeper = sleep or sleep_ms
        self._queue: List[Task] = []
        self._counter = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None], label: str = "task") -> Task:
        """Queue ``callback`` to run ``delay`` ms from now (negative delays count as 0)."""
        due = self.clock() + max(0.0, delay)
        task = Task(due=due, seq=next(self._counter), callback=callback, label=label)
        heapq.heappush(self._queue, task)
        logger.debug("scheduled %s #%d due at %.3f", task.label, task.seq, task.due)

        return task

    def pending(self) -> int:
        return len(self._queue)

    def next_due(self) -> Optional[float]:
        return self._queue[0].due if self._queue else None

    def run_ready(self) -> int:
        """Run every task already due, without waiting. Returns how many ran."""
        ran = 0

        while self._queue and self._queue[0].due <= self.clock():
            self._run(heapq.heappop(self._queue))
            ran += 1

        return ran

    def drain(self) -> int:
        """Run tasks until the queue is empty, waiting for each due time.

        Tasks scheduled by a running task join the same drain. If a task
        raises, the error propagates and the remaining tasks stay queued.
        """
        ran = 0

        while self._queue:
            wait = self._queue[0].due - self.clock()
            if wait > 0:
                logger.debug("idle for %.3f ms", wait)
                self.sleep(wait)
                continue

            self._run(heapq.heappop(self._queue))
            ran += 1

        return ran

    run_until_idle = drain

    def clear(self) -> None:
        self._queue.clear()

    def _run(self, task: Task) -> None:
        logger.debug("running %s #%d", task.label, task.seq)
        task.callback()


class VirtualClock:
    """Deterministic clock whose ``sleep`` advances time instead of blocking."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.slept: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, delay: float) -> None:
        self.slept.append(delay)
        self.now += max(0.0, delay)

    def advance(self, delay: float) -> None:
        self.now += delay
