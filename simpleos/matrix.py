"""Parallel multiplication of two square matrices of ones."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .parallel import parallel_for, parallel_for_2d

DEFAULT_THREADS = 2
DEFAULT_SIZE = 1024


def multiply_ones(size: int, num_threads: int) -> list[list[int]]:
    """Multiply two size x size matrices of ones in parallel and return the product."""
    a: list[list[int]] = [[] for _ in range(size)]
    b: list[list[int]] = [[] for _ in range(size)]
    c: list[list[int]] = [[] for _ in range(size)]

    def allocate(i: int) -> None:
        a[i] = [1] * size
        b[i] = [1] * size
        c[i] = [0] * size

    parallel_for(0, size, allocate, num_threads)

    def multiply(i: int, j: int) -> None:
        row = a[i]
        c[i][j] += sum(row[k] * b[k][j] for k in range(size))

    parallel_for_2d(0, size, 0, size, multiply, num_threads)
    return c


def main(argv: Sequence[str] | None = None) -> int:
    """Run the matrix test: arguments are [threads] [size]."""
    args = list(sys.argv[1:] if argv is None else argv)
    num_threads = int(args[0]) if len(args) > 0 else DEFAULT_THREADS
    size = int(args[1]) if len(args) > 1 else DEFAULT_SIZE

    product = multiply_ones(size, num_threads)
    if any(value != size for row in product for value in row):
        print("Test Failed", file=sys.stderr)
        return 1
    print("Test Success. ")
    return 0


if __name__ == "__main__":
    sys.exit(main())