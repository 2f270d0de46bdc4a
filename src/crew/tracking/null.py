"""Null object implementation of the outcome cache."""

from ..domain.outcomes import Outcomes, WorkerOutcome
from .base import BaseOutcomeCache


class NullOutcomeCache(BaseOutcomeCache):
    """Cache that records nothing.

    Used by pools created with ``caching_enabled=False``.
    """

    def record(self, outcome: WorkerOutcome) -> None:
        pass

    def snapshot(self) -> Outcomes:
        """No-op: always empty."""
        return Outcomes()
