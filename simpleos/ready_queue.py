"""Priority queue of processes waiting for a CPU."""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from dataclasses import dataclass, field

DEFAULT_CAPACITY = 100


@dataclass
class Process:
    """A submitted job and the scheduler's bookkeeping for it."""

    pid: int
    name: str
    first_arg: str = "NULL"
    priority: int = 1
    prev_queued_time: float = field(default_factory=time.time)
    wait_time: float = 0.0
    execution_time: float | None = None


class QueueFullError(Exception):
    """The ready queue already holds as many processes as it may."""


class ReadyQueue:
    """Min-heap of processes ordered by priority, then by queueing time.

    Lower priority numbers run first. Among equal priorities the process
    queued earliest comes first, or the latest one when newest_first is set.
    The lock guards the queue when it is shared between threads.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, newest_first: bool = False) -> None:
        self.capacity = capacity
        self.newest_first = newest_first
        self.first_arrival: float | None = None
        self.lock = threading.RLock()
        self._heap: list[tuple[tuple[int, float, int], Process]] = []
        self._counter = itertools.count()

    def insert(self, process: Process) -> None:
        """Queue process; raises QueueFullError when at capacity."""
        if len(self._heap) >= self.capacity:
            raise QueueFullError(f"ready queue is full ({self.capacity} processes)")
        queued = process.prev_queued_time
        order = -queued if self.newest_first else queued
        heapq.heappush(self._heap, ((process.priority, order, next(self._counter)), process))
        if self.first_arrival is None:
            self.first_arrival = queued

    def extract_min(self) -> Process:
        """Remove and return the process that should run next."""
        if not self._heap:
            raise IndexError("extract from an empty ready queue")
        return heapq.heappop(self._heap)[1]

    def __len__(self) -> int:
        return len(self._heap)