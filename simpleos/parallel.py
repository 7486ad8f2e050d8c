"""Run a loop body over integer ranges on a fixed number of threads."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from itertools import product


def _chunk_bounds(low: int, high: int, num_threads: int) -> Iterator[range]:
    """Split [low, high) into num_threads contiguous, non-overlapping ranges."""
    if num_threads < 1:
        raise ValueError(f"num_threads must be at least 1, got {num_threads}")
    span = high - low
    for i in range(num_threads):
        yield range(low + i * span // num_threads, low + (i + 1) * span // num_threads)


def _run_threads(chunks: list[range], body: Callable[[range], None]) -> float:
    """Run body once per chunk, each on its own thread, and return the elapsed time.

    The first exception raised by any worker is re-raised after all threads finish.
    """
    errors: list[BaseException] = []
    lock = threading.Lock()

    def worker(chunk: range) -> None:
        try:
            body(chunk)
        except BaseException as exc:  # re-raised in the calling thread
            with lock:
                errors.append(exc)

    start = time.perf_counter()
    threads = [threading.Thread(target=worker, args=(chunk,)) for chunk in chunks]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    elapsed = time.perf_counter() - start

    if errors:
        raise errors[0]
    print(f"Execution Time: {elapsed:f} seconds")
    return elapsed


def parallel_for(
    low: int, high: int, func: Callable[[int], object], num_threads: int
) -> float:
    """Call func(i) for every i in [low, high), spread over num_threads threads.

    Returns the wall-clock time taken, which is also printed.
    """
    chunks = list(_chunk_bounds(low, high, num_threads))

    def body(chunk: range) -> None:
        for index in chunk:
            func(index)

    return _run_threads(chunks, body)


def parallel_for_2d(
    low1: int,
    high1: int,
    low2: int,
    high2: int,
    func: Callable[[int, int], object],
    num_threads: int,
) -> float:
    """Call func(i, j) for every i in [low1, high1) and j in [low2, high2).

    The outer range is split between threads; each thread walks the whole
    inner range. Returns the wall-clock time taken, which is also printed.
    """
    chunks = list(_chunk_bounds(low1, high1, num_threads))
    inner = range(low2, high2)

    def body(chunk: range) -> None:
        for i, j in product(chunk, inner):
            func(i, j)

    return _run_threads(chunks, body)