"""Parallel loops, ELF header inspection, a round-robin scheduler and a command shell."""

__version__ = "0.1.0"