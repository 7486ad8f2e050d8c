"""Round-robin scheduler that time-slices stopped child processes."""

from __future__ import annotations

import os
import signal
import threading
import time

from .ready_queue import Process, ReadyQueue

_RULE = "--------------------------------"
_HEADER = "Name   PID   Wait Time    Execution Time"


def _send(pid: int, sig: int) -> None:
    try:
        os.kill(pid, sig)
    except ProcessLookupError:
        pass


def _has_exited(pid: int) -> bool:
    """Reap pid if it has exited; a pid that is no longer our child counts as exited."""
    try:
        done, _ = os.waitpid(pid, os.WNOHANG)
    except ChildProcessError:
        return True
    return done == pid


class Scheduler:
    """Runs up to ncpus queued processes for tslice_ms milliseconds at a time."""

    def __init__(self, ncpus: int, tslice_ms: int, queue: ReadyQueue) -> None:
        if ncpus < 1:
            raise ValueError(f"ncpus must be at least 1, got {ncpus}")
        if tslice_ms < 0:
            raise ValueError(f"tslice_ms must not be negative, got {tslice_ms}")
        self.ncpus = ncpus
        self.tslice_ms = tslice_ms
        self.queue = queue
        self.completed: list[Process] = []

    def run_slice(self) -> list[Process]:
        """Run one time slice and return the processes that finished during it.

        Returns an empty list at once when nothing is queued.
        """
        running: list[Process] = []
        with self.queue.lock:
            while len(self.queue) and len(running) < self.ncpus:
                process = self.queue.extract_min()
                _send(process.pid, signal.SIGCONT)
                process.wait_time += time.time() - process.prev_queued_time
                running.append(process)
        if not running:
            return []

        time.sleep(self.tslice_ms / 1000)

        finished: list[Process] = []
        with self.queue.lock:
            for process in running:
                if _has_exited(process.pid):
                    process.execution_time = time.time()
                    self.completed.append(process)
                    finished.append(process)
                else:
                    _send(process.pid, signal.SIGSTOP)
                    process.prev_queued_time = time.time()
                    self.queue.insert(process)
        return finished

    def run(self, stop_event: threading.Event) -> list[Process]:
        """Schedule until stop_event is set; return every process that completed."""
        idle_wait = max(self.tslice_ms / 1000, 0.001)
        while not stop_event.is_set():
            with self.queue.lock:
                empty = len(self.queue) == 0
            if empty:
                stop_event.wait(idle_wait)
                continue
            self.run_slice()
        return list(self.completed)

    def report(self) -> str:
        """Table of completed processes with wait time and completion time."""
        origin = self.queue.first_arrival or 0.0
        lines = ["", _RULE, _HEADER]
        for process in self.completed:
            finished_at = process.execution_time or origin
            lines.append(
                f"{process.name} {process.pid} {process.wait_time:.2f} seconds "
                f"{finished_at - origin:.2f} seconds"
            )
        return "\n".join(lines) + "\n"