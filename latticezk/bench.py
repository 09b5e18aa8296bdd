"""Accumulating timer for simple benchmarks."""

from __future__ import annotations

import time


class Bench:
    """Sums the time between ``before`` and ``after`` calls, in nanoseconds.

    Also usable as a context manager: entering calls ``before`` and leaving
    calls ``after``.
    """

    def __init__(self) -> None:
        self._before = 0
        self._after = 0
        self._total = 0

    def reset(self) -> None:
        """Clear the accumulated total."""
        self._total = 0

    def before(self) -> None:
        """Record the start of one timed run."""
        self._before = time.perf_counter_ns()

    def after(self) -> None:
        """Record the end of one timed run and add it to the total."""
        self._after = time.perf_counter_ns()
        self._total += self._after - self._before

    def compute(self, runs: int) -> None:
        """Turn the accumulated total into the mean over ``runs`` runs."""
        if runs <= 0:
            raise ValueError("number of runs must be positive")
        self._total //= runs

    def measure(self) -> int:
        """Return the current total."""
        return self._total

    def report(self) -> str:
        """Print the total followed by a blank line and return the printed text."""
        text = f"{self._total} ns\n"
        print(text)
        return text

    def __enter__(self) -> Bench:
        self.before()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.after()