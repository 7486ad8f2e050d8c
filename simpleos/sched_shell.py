"""Interactive shell that submits jobs to the round-robin scheduler."""

from __future__ import annotations

import os
import re
import signal
import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .ready_queue import DEFAULT_CAPACITY, Process, ReadyQueue
from .scheduler import Scheduler

PROMPT = ">>> $ "
MIN_PRIORITY = 1
MAX_PRIORITY = 4
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class SubmitError(ValueError):
    """A submit command that cannot be carried out."""


@dataclass(frozen=True)
class SubmitRequest:
    """What a submit command asks to run."""

    executable: str
    argv: list[str] = field(default_factory=list)
    priority: int = MIN_PRIORITY

    @property
    def first_arg(self) -> str:
        """The program's first argument, or "NULL" when it has none."""
        return self.argv[1] if len(self.argv) > 1 else "NULL"


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_submit(arguments: Sequence[str]) -> SubmitRequest:
    """Parse the tokens of "submit <./prog> [args...] [priority]".

    With more than one token after "submit" the last is the priority, which
    must lie in [1, 4]. The program name passed as argv[0] is the executable
    without its first two characters (the "./").
    """
    if len(arguments) < 2:
        raise SubmitError("Usage: submit <pname>")
    executable = arguments[1]
    if len(executable) < 3:
        raise SubmitError(f"Invalid input: {executable}")
    extra = list(arguments[2:])
    priority = MIN_PRIORITY
    if extra:
        priority = _atoi(extra.pop())
        if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
            raise SubmitError("Valid priority is in the range [1,4].")
    return SubmitRequest(executable, [executable[2:], *extra], priority)


def _spawn_stopped(executable: str, argv: list[str]) -> int:
    """Fork a child that stops itself before exec, and wait until it has stopped."""
    pid = os.fork()
    if pid == 0:
        try:
            os.kill(os.getpid(), signal.SIGSTOP)
            os.execvp(executable, argv)
        except OSError as exc:
            print(f"execvp: {exc.strerror}", file=sys.stderr)
        finally:
            os._exit(10)
    os.waitpid(pid, os.WUNTRACED)
    return pid


class SchedulerShell:
    """Reads submit commands and feeds the jobs to a scheduler thread."""

    def __init__(self, ncpus: int, tslice_ms: int) -> None:
        self.queue = ReadyQueue(DEFAULT_CAPACITY)
        self.scheduler = Scheduler(ncpus, tslice_ms, self.queue)

    def submit(self, arguments: Sequence[str]) -> Process:
        """Start the requested program stopped and put it on the ready queue."""
        request = parse_submit(arguments)
        with self.queue.lock:
            if len(self.queue) >= self.queue.capacity:
                raise SubmitError("Maximum process limit reached.")
        pid = _spawn_stopped(request.executable, request.argv)
        process = Process(
            pid=pid,
            name=request.executable,
            first_arg=request.first_arg,
            priority=request.priority,
        )
        with self.queue.lock:
            self.queue.insert(process)
        return process

    def run(self, stream: TextIO) -> list[Process]:
        """Read commands until end of input or Ctrl-C, then print the report.

        Returns the processes that completed.
        """
        stop = threading.Event()
        worker = threading.Thread(target=self.scheduler.run, args=(stop,), daemon=True)
        worker.start()
        try:
            while True:
                print(PROMPT, end="", flush=True)
                line = stream.readline()
                if not line:
                    break
                tokens = line.split()
                if not tokens or tokens[0] != "submit":
                    continue
                try:
                    self.submit(tokens)
                except SubmitError as exc:
                    print(exc)
        except KeyboardInterrupt:
            pass
        finally:
            stop.set()
            worker.join()
        print(self.scheduler.report(), end="")
        return list(self.scheduler.completed)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the shell: arguments are <NCPU> <TSLICE>."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("Usage: sched_shell <NCPU> <TSLICE>", file=sys.stderr)
        return 1
    try:
        shell = SchedulerShell(int(args[0]), int(args[1]))
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    shell.run(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())