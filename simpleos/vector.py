"""Parallel addition of two vectors of ones."""

from __future__ import annotations

import sys
from array import array
from collections.abc import Sequence

from .parallel import parallel_for

DEFAULT_THREADS = 2
DEFAULT_SIZE = 48_000_000


def add_vectors(size: int, num_threads: int) -> array:
    """Add two vectors of ones element-wise in parallel and return the sum."""
    a = array("i", [1]) * size
    b = array("i", [1]) * size
    c = array("i", [0]) * size

    def body(i: int) -> None:
        c[i] = a[i] + b[i]

    parallel_for(0, size, body, num_threads)
    return c


def main(argv: Sequence[str] | None = None) -> int:
    """Run the vector test: arguments are [threads] [size]."""
    args = list(sys.argv[1:] if argv is None else argv)
    num_threads = int(args[0]) if len(args) > 0 else DEFAULT_THREADS
    size = int(args[1]) if len(args) > 1 else DEFAULT_SIZE

    result = add_vectors(size, num_threads)
    if any(value != 2 for value in result):
        print("Test Failed", file=sys.stderr)
        return 1
    print("Test Success")
    return 0


if __name__ == "__main__":
    sys.exit(main())