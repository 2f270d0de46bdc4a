"""Workers and the pool that admits them."""

from .base import BaseOutcomeObserver
from .ids import UidCounter, process_uids
from .pool import Pool
from .worker import Worker

__all__ = ["BaseOutcomeObserver", "Pool", "UidCounter", "Worker", "process_uids"]
