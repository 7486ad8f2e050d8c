import io
import os
import shutil
import signal

import pytest

from simpleos.ready_queue import Process
from simpleos.sched_shell import SchedulerShell, SubmitError, SubmitRequest, main, parse_submit

TRUE = shutil.which("true")


def test_parse_plain_submit():
    request = parse_submit(["submit", "./fib"])
    assert request == SubmitRequest("./fib", ["fib"], 1)
    assert request.first_arg == "NULL"


def test_parse_submit_with_args_and_priority():
    request = parse_submit(["submit", "./fib", "10", "3"])
    assert request.executable == "./fib"
    assert request.argv == ["fib", "10"]
    assert request.priority == 3
    assert request.first_arg == "10"


def test_parse_single_trailing_token_is_priority():
    request = parse_submit(["submit", "./fib", "4"])
    assert request.argv == ["fib"]
    assert request.priority == 4


@pytest.mark.parametrize("priority", ["5", "0", "x", "-1"])
def test_parse_rejects_bad_priority(priority):
    with pytest.raises(SubmitError, match=r"Valid priority is in the range \[1,4\]\."):
        parse_submit(["submit", "./fib", priority])


def test_parse_rejects_short_executable():
    with pytest.raises(SubmitError, match="Invalid input: ab"):
        parse_submit(["submit", "ab"])


def test_parse_requires_program():
    with pytest.raises(SubmitError, match="Usage: submit <pname>"):
        parse_submit(["submit"])


def test_submit_rejected_when_queue_full():
    shell = SchedulerShell(1, 10)
    for pid in range(shell.queue.capacity):
        shell.queue.insert(Process(pid=pid + 1, name="filler"))
    with pytest.raises(SubmitError, match="Maximum process limit reached."):
        shell.submit(["submit", "./fib"])
    assert len(shell.queue) == shell.queue.capacity


def test_submit_runs_to_completion():
    shell = SchedulerShell(1, 10)
    process = shell.submit(["submit", TRUE, "2"])
    try:
        assert process.name == TRUE
        assert process.priority == 2
        assert len(shell.queue) == 1
        for _ in range(500):
            shell.scheduler.run_slice()
            if not len(shell.queue):
                break
        assert [p.pid for p in shell.scheduler.completed] == [process.pid]
    finally:
        try:
            os.kill(process.pid, signal.SIGKILL)
            os.kill(process.pid, signal.SIGCONT)
            os.waitpid(process.pid, 0)
        except (ProcessLookupError, ChildProcessError):
            pass


def test_run_reports_errors_and_prints_report(capsys):
    shell = SchedulerShell(1, 10)
    completed = shell.run(io.StringIO("\nsubmit ./fib 9\nls -l\n"))
    out = capsys.readouterr().out
    assert completed == []
    assert "Valid priority is in the range [1,4]." in out
    assert out.startswith(">>> $ ")
    assert "Name   PID   Wait Time    Execution Time" in out


def test_main_requires_two_arguments(capsys):
    assert main(["2"]) == 1
    assert "Usage" in capsys.readouterr().err