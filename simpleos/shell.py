"""A small interactive shell with history, pipes, background jobs and scripts."""

from __future__ import annotations

import enum
import os
import subprocess
import sys
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TextIO

PROMPT = ">>> simpleshell $ "
HISTORY_LIMIT = 100
_REPORT_HEADER = "No. : Command    PID    Start Time   Execution Time"


class InputKind(enum.Enum):
    """How a line of input is to be run."""

    COMMAND = "command"
    PIPE = "pipe"
    BACKGROUND = "background"
    BACKGROUND_PIPE = "background_pipe"


@dataclass
class HistoryEntry:
    """One line the user entered and what running it cost."""

    command: str
    pid: int = 0
    start_time: float = 0.0
    execution_ms: int = 0


def classify_input(line: str) -> InputKind:
    """Decide whether line is a plain command, a pipeline, or a background job."""
    piped = "|" in line
    background = "&" in line
    if piped and background:
        return InputKind.BACKGROUND_PIPE
    if piped:
        return InputKind.PIPE
    if background:
        return InputKind.BACKGROUND
    return InputKind.COMMAND


def strip_ampersands(line: str) -> str:
    """Drop everything from the first '&' onwards."""
    return line.split("&", 1)[0]


def split_pipeline(line: str) -> list[list[str]]:
    """Split a pipeline into the argument lists of its commands; blank stages are dropped."""
    stages = (stage.split() for stage in line.split("\n", 1)[0].split("|"))
    return [stage for stage in stages if stage]


class Shell:
    """Runs commands and keeps a history of what was run, when and for how long."""

    def __init__(self) -> None:
        self.history: list[HistoryEntry] = []
        self._current: HistoryEntry | None = None
        self._background: list[subprocess.Popen] = []

    def record(self, line: str) -> HistoryEntry | None:
        """Add line to the history, which keeps at most HISTORY_LIMIT entries.

        Once the history is full, timings go to its last entry.
        """
        if len(self.history) >= HISTORY_LIMIT:
            return None
        entry = HistoryEntry(line.rstrip("\n"))
        self.history.append(entry)
        self._current = entry
        return entry

    @contextmanager
    def _timed(self) -> Iterator[HistoryEntry | None]:
        entry = self._current
        started = time.monotonic()
        if entry is not None:
            entry.start_time = time.time()
        try:
            yield entry
        finally:
            if entry is not None:
                entry.execution_ms = int((time.monotonic() - started) * 1000)

    def execute(self, line: str) -> None:
        """Record line and run it, reporting failures instead of raising them."""
        self.record(line)
        kind = classify_input(line)
        try:
            if kind is InputKind.BACKGROUND_PIPE:
                self.run_pipeline(split_pipeline(strip_ampersands(line)), background=True)
            elif kind is InputKind.PIPE:
                self.run_pipeline(split_pipeline(line), background=False)
            elif kind is InputKind.BACKGROUND:
                arguments = strip_ampersands(line).split()
                if arguments:
                    self.run_background(arguments)
            else:
                self._run_simple(line.split())
        except OSError as exc:
            target = exc.filename if exc.filename is not None else line.strip()
            print(f"{target}: {exc.strerror or exc}", file=sys.stderr)

    def _run_simple(self, arguments: list[str]) -> None:
        if not arguments:
            return
        command = arguments[0]
        if command == "history":
            with self._timed():
                for text in self.history_lines():
                    print(text)
        elif command == "cd":
            if len(arguments) > 1:
                try:
                    self.change_directory(arguments[1])
                except OSError as exc:
                    print(f"cd: {exc.strerror or exc}", file=sys.stderr)
        elif command == "rs":
            if len(arguments) > 1:
                try:
                    self.run_script(arguments[1])
                except OSError as exc:
                    print(f"Error opening script file: {exc.strerror or exc}", file=sys.stderr)
        else:
            self.run_command(arguments)

    def run_command(self, arguments: Sequence[str]) -> int:
        """Run a program in the foreground and return its exit status.

        A program killed by a signal gives the negated signal number.
        """
        with self._timed() as entry:
            process = subprocess.Popen(list(arguments))
            if entry is not None:
                entry.pid = process.pid
            status = process.wait()
        if status < 0:
            print(f"Abnormal termination of {process.pid}")
        return status

    def run_background(self, arguments: Sequence[str]) -> int:
        """Start a program without waiting for it; print and return its pid."""
        with self._timed() as entry:
            process = subprocess.Popen(list(arguments))
            if entry is not None:
                entry.pid = process.pid
        self._background.append(process)
        print(process.pid)
        return process.pid

    def run_pipeline(
        self, commands: Sequence[Sequence[str]], background: bool = False
    ) -> list[subprocess.Popen]:
        """Connect commands stdout-to-stdin and start them.

        In the foreground every stage is waited for and stages that exit with
        an error status are reported. Returns the started processes.
        """
        stages = [list(arguments) for arguments in commands if arguments]
        processes: list[subprocess.Popen] = []
        with self._timed() as entry:
            previous = None
            try:
                for position, arguments in enumerate(stages):
                    last = position == len(stages) - 1
                    process = subprocess.Popen(
                        arguments,
                        stdin=previous,
                        stdout=None if last else subprocess.PIPE,
                    )
                    if previous is not None:
                        previous.close()
                    previous = process.stdout
                    processes.append(process)
            except OSError:
                if previous is not None:
                    previous.close()
                for process in processes:
                    process.wait()
                raise
            if entry is not None and processes:
                entry.pid = processes[0].pid
            if background:
                self._background.extend(processes)
            else:
                for process in processes:
                    if process.wait() > 0:
                        print(
                            f"Child process {process.pid} exited with an error status",
                            file=sys.stderr,
                        )
        return processes

    def change_directory(self, path: str | os.PathLike[str]) -> None:
        """Change the working directory; raises OSError when that fails."""
        with self._timed():
            os.chdir(path)

    def run_script(self, path: str | os.PathLike[str]) -> list[int]:
        """Run each line of a script through /bin/sh and return their exit statuses."""
        statuses: list[int] = []
        with self._timed(), open(path, encoding="utf-8") as script:
            for line in script:
                status = subprocess.run(["/bin/sh", "-c", line.rstrip("\n")]).returncode
                if status != 0:
                    print("Command returned non-zero exit status")
                statuses.append(status)
        return statuses

    def history_lines(self) -> list[str]:
        """The history as numbered lines, oldest first."""
        return [f"{number}- {entry.command}" for number, entry in enumerate(self.history, 1)]

    def exit_report(self) -> str:
        """Table of every recorded command with its pid, start time and duration."""
        lines = ["", _REPORT_HEADER]
        for number, entry in enumerate(self.history, 1):
            started = time.asctime(time.localtime(entry.start_time))
            lines.append(
                f"{number} : {entry.command}    {entry.pid}    {started}    "
                f"{entry.execution_ms:02d} milliseconds"
            )
        return "\n".join(lines) + "\n"

    def _reap(self) -> None:
        self._background = [process for process in self._background if process.poll() is None]

    def loop(self, stream: TextIO) -> list[HistoryEntry]:
        """Read and run lines until end of input or Ctrl-C, then print the report."""
        try:
            while True:
                self._reap()
                print(PROMPT, end="", flush=True)
                line = stream.readline()
                if not line:
                    break
                self.execute(line)
        except KeyboardInterrupt:
            pass
        print(self.exit_report(), end="")
        return list(self.history)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive shell on standard input."""
    Shell().loop(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())