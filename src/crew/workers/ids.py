"""Monotonic worker uid source."""

import itertools


class UidCounter:
    """Hands out increasing integer uids, never reusing one.

    Pools and workers take a counter at construction. They all default to
    ``process_uids`` so uids stay unique across every pool in the process.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


process_uids = UidCounter()
