# simpleos

simpleos gathers four small operating-systems tools in one package:

- a `parallel_for` helper that splits index ranges across threads,
- an ELF inspector that reads and checks 32-bit ELF headers,
- a priority round-robin scheduler with a shell that submits jobs to it,
- an interactive command shell with history, pipes, background jobs and scripts.

The process-control parts (the scheduler and the shells) need a POSIX system.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Parallel loops

`simpleos.parallel` runs a function over every index in a range. The range is
cut into `num_threads` contiguous chunks, one thread per chunk. Each call
prints `Execution Time: ... seconds` and returns the elapsed time. If a worker
raises, the first exception is raised again once all threads have finished.
`num_threads` must be at least 1.

```python
from simpleos.parallel import parallel_for, parallel_for_2d

results = [0] * 10
parallel_for(0, 10, lambda i: results.__setitem__(i, i * i), 4)

cells = {}
parallel_for_2d(0, 3, 0, 3, lambda i, j: cells.__setitem__((i, j), i + j), 2)
```

`parallel_for_2d` splits only the outer range between threads; each thread
walks the whole inner range.

Two demonstration commands check the helper on arrays filled with ones:

```
simpleos-vector [NUM_THREADS] [SIZE]
simpleos-matrix [NUM_THREADS] [SIZE]
```

`simpleos-vector` adds two vectors (default size 48,000,000) and checks that
every element is 2; `simpleos-matrix` multiplies two square matrices (default
size 1024) and checks that every element equals the size. Both default to 2
threads. The same work is available as
`simpleos.vector.add_vectors(size, num_threads)` and
`simpleos.matrix.multiply_ones(size, num_threads)`.

## Inspecting ELF files

`simpleos.elf` reads the ELF header and program header table of a 32-bit
little-endian file, checks the magic number, class, byte order, machine
(i386), version and type (relocatable or executable), and finds the loadable
segment that holds the entry point.

```python
from pathlib import Path
from simpleos.elf import (
    ElfError,
    check_supported,
    entry_segment_image,
    find_entry_segment,
    parse_elf_header,
    parse_program_headers,
)

data = Path("fib").read_bytes()
header = parse_elf_header(data)
check_supported(header)          # raises ElfError when unsupported
segments = parse_program_headers(data, header)
entry = find_entry_segment(header, segments)
image, entry_offset = entry_segment_image(data)
```

`entry_segment_image` returns the segment's memory image (its file contents
followed by zeros up to its memory size) and the offset of the entry point
within that image. Problems with the file are raised as `ElfError`.

## Scheduler shell

```
simpleos-sched-shell NCPU TSLICE
```

starts a shell with a scheduler running in a background thread. The scheduler
resumes up to `NCPU` queued jobs, lets them run for `TSLICE` milliseconds, then
stops the ones still running and puts them back in the ready queue. Lower
priority numbers run first; jobs of equal priority run in order of when they
were queued.

At the `>>> $` prompt, submit a program:

```
submit ./prog [ARGS...] [PRIORITY]
```

When anything follows the program, the last token is the priority, which must
lie between 1 and 4; otherwise the priority is 1. The program receives its
name without the leading two characters (`./`) as its first argument. The
ready queue holds at most 100 jobs. Lines that do not start with `submit` are
ignored. At end of input or on Ctrl+C the shell stops the scheduler and prints
each finished job's name, PID, wait time and completion time, measured from
the first submission.

`simpleos.ready_queue.ReadyQueue`, `simpleos.scheduler.Scheduler` and
`simpleos.sched_shell.parse_submit` can also be used directly from Python.

## Shell

```
simpleos-shell
```

starts an interactive shell at the `>>> simpleshell $` prompt. It supports:

- ordinary commands, run in the foreground,
- `cmd1 | cmd2 | ...` pipelines,
- `&` to run a command or pipeline in the background (everything after the
  first `&` is dropped),
- `cd DIR`,
- `history`, listing the commands entered so far (up to 100 are kept),
- `rs FILE`, running each line of a script file through `/bin/sh`.

At end of input or on Ctrl+C the shell prints every recorded command with its
PID, start time and execution time in milliseconds.

## What this package does not do

The ELF module only reads and checks files and builds a segment's memory
image; it does not map that image into memory or run the program's code.
The scheduler works on processes started by the scheduler shell in the same
Python process; there is no separate scheduler program or shared-memory queue
for other programs to use.