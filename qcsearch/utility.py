"""Timing and number formatting helpers."""

import time

__all__ = ["Timer", "integer_to_string"]


class Timer:
    """Stopwatch that reports elapsed time in microseconds."""

    def __init__(self):
        self._start = self._now()

    @staticmethod
    def _now():
        return time.monotonic_ns() // 1000

    def restart(self):
        """Start measuring again from now."""
        self._start = self._now()

    def elapsed(self):
        """Microseconds since creation or the last restart."""
        return self._now() - self._start


def integer_to_string(number):
    """Format a non-negative integer with commas between groups of three digits."""
    if number < 0:
        raise ValueError(f"cannot format negative number {number}")
    groups = []
    while True:
        number, rest = divmod(number, 1000)
        groups.append(rest)
        if number == 0:
            break
    head, *tail = reversed(groups)
    return str(head) + "".join(f",{group:03d}" for group in tail)