"""Abstract base class for outcome caches.

Caches are observers that store finished-worker records. They do NOT emit
events. Subscribe to pool.* events on the pool emitter instead.
"""

from abc import ABC, abstractmethod

from ..domain.outcomes import Outcomes, WorkerOutcome


class BaseOutcomeCache(ABC):
    """Stores outcome records of workers a pool has accounted for."""

    @abstractmethod
    def record(self, outcome: WorkerOutcome) -> None:
        """Append a record for ``outcome`` to the matching list."""
        pass

    @abstractmethod
    def snapshot(self) -> Outcomes:
        """Return the cached records in the order they were recorded."""
        pass
