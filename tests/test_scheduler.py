import os
import shutil
import signal
import subprocess
import threading

import pytest

from simpleos.ready_queue import Process, ReadyQueue
from simpleos.scheduler import Scheduler

TRUE = shutil.which("true")
SLEEP = shutil.which("sleep")
SH = shutil.which("sh")

_STOP_THEN_EXEC = 'kill -STOP $$; exec "$@"'


@pytest.fixture
def spawn():
    pids = []

    def spawn_stopped(*argv):
        child = subprocess.Popen([SH, "-c", _STOP_THEN_EXEC, "sh", *argv])
        os.waitpid(child.pid, os.WUNTRACED)
        pids.append(child.pid)
        return child.pid

    yield spawn_stopped
    for pid in pids:
        for sig in (signal.SIGKILL, signal.SIGCONT):
            try:
                os.kill(pid, sig)
            except ProcessLookupError:
                pass
        try:
            os.waitpid(pid, 0)
        except ChildProcessError:
            pass


def run_until_done(scheduler, limit=500):
    for _ in range(limit):
        scheduler.run_slice()
        if len(scheduler.queue) == 0:
            return
    raise AssertionError("processes did not finish")


def test_short_process_completes(spawn):
    queue = ReadyQueue()
    pid = spawn(TRUE)
    queue.insert(Process(pid=pid, name="./true"))
    scheduler = Scheduler(1, 10, queue)
    run_until_done(scheduler)
    assert [p.pid for p in scheduler.completed] == [pid]
    done = scheduler.completed[0]
    assert done.wait_time >= 0
    assert done.execution_time >= queue.first_arrival


def test_empty_queue_slice_returns_nothing():
    scheduler = Scheduler(2, 10, ReadyQueue())
    assert scheduler.run_slice() == []
    assert scheduler.completed == []


def test_only_ncpus_processes_run_per_slice(spawn):
    queue = ReadyQueue()
    low = Process(pid=spawn(SLEEP, "5"), name="low", priority=1)
    high = Process(pid=spawn(SLEEP, "5"), name="high", priority=2)
    queue.insert(high)
    queue.insert(low)
    scheduler = Scheduler(1, 10, queue)
    assert scheduler.run_slice() == []
    assert len(queue) == 2
    assert low.wait_time > 0
    assert high.wait_time == 0.0


def test_unfinished_process_is_requeued_with_new_time(spawn):
    queue = ReadyQueue()
    process = Process(pid=spawn(SLEEP, "5"), name="sleeper")
    first_queued = process.prev_queued_time
    queue.insert(process)
    scheduler = Scheduler(2, 10, queue)
    scheduler.run_slice()
    assert len(queue) == 1
    assert process.prev_queued_time >= first_queued
    assert queue.extract_min() is process


def test_run_stops_when_event_set(spawn):
    queue = ReadyQueue()
    pids = [spawn(TRUE), spawn(TRUE), spawn(TRUE)]
    for pid in pids:
        queue.insert(Process(pid=pid, name="./true"))
    scheduler = Scheduler(2, 10, queue)
    stop = threading.Event()

    def watch():
        for _ in range(500):
            if len(scheduler.completed) == len(pids):
                break
            stop.wait(0.01)
        stop.set()

    watcher = threading.Thread(target=watch)
    watcher.start()
    completed = scheduler.run(stop)
    watcher.join(timeout=10)
    assert sorted(p.pid for p in completed) == sorted(pids)


def test_run_with_event_already_set_returns_empty():
    stop = threading.Event()
    stop.set()
    assert Scheduler(1, 10, ReadyQueue()).run(stop) == []


def test_report_lists_completed(spawn):
    queue = ReadyQueue()
    pid = spawn(TRUE)
    queue.insert(Process(pid=pid, name="./true"))
    scheduler = Scheduler(1, 10, queue)
    run_until_done(scheduler)
    lines = scheduler.report().splitlines()
    assert lines[1] == "--------------------------------"
    assert lines[2] == "Name   PID   Wait Time    Execution Time"
    assert lines[3].startswith(f"./true {pid} ")
    assert lines[3].endswith(" seconds")


def test_invalid_cpu_count_rejected():
    with pytest.raises(ValueError):
        Scheduler(0, 10, ReadyQueue())