"""crew - bounded-concurrency pool of external worker processes."""

from .config import Settings
from .domain import (
    CrewError,
    LostWorkerError,
    OutcomeRecord,
    Outcomes,
    PoolClosedError,
    PoolConfig,
    ProcessError,
    ProcessExitError,
    SpawnOptions,
    UnboundError,
    ValidationError,
    WorkerKilledError,
    WorkerSpec,
    WorkerState,
)
from .events import EventEmitter, NullEmitter
from .tracking import NullOutcomeCache, OutcomeCache
from .workers import Pool, UidCounter, Worker

__all__ = [
    "CrewError",
    "EventEmitter",
    "LostWorkerError",
    "NullEmitter",
    "NullOutcomeCache",
    "OutcomeCache",
    "OutcomeRecord",
    "Outcomes",
    "Pool",
    "PoolClosedError",
    "PoolConfig",
    "ProcessError",
    "ProcessExitError",
    "Settings",
    "SpawnOptions",
    "UidCounter",
    "UnboundError",
    "ValidationError",
    "Worker",
    "WorkerKilledError",
    "WorkerSpec",
    "WorkerState",
]
