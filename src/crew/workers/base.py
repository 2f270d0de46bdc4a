"""Interface through which workers report their outcome."""

from abc import ABC, abstractmethod

from ..domain.outcomes import WorkerOutcome


class BaseOutcomeObserver(ABC):
    """Receives the terminal outcome message of every worker bound to it.

    The Pool is the production implementation. Each worker reports exactly
    one outcome, but implementations must not trust that: the outcome carries
    the identity the process reported and must be checked before use.
    """

    @abstractmethod
    async def on_outcome(self, outcome: WorkerOutcome) -> None:
        """Handle a worker's terminal outcome. Must not raise."""
        pass
