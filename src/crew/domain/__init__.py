"""Domain models and exceptions."""

from .exceptions import (
    CrewError,
    LostWorkerError,
    PoolClosedError,
    PoolError,
    ProcessError,
    ProcessExitError,
    UnboundError,
    ValidationError,
    WorkerAlreadyStartedError,
    WorkerError,
    WorkerKilledError,
    WorkerOwnershipError,
)
from .outcomes import (
    ErrorInfo,
    OutcomeRecord,
    Outcomes,
    WorkerCompleted,
    WorkerFailed,
    WorkerKilled,
    WorkerOutcome,
)
from .pool import PoolConfig
from .worker import SpawnOptions, WorkerSpec, WorkerState

__all__ = [
    "CrewError",
    "ErrorInfo",
    "LostWorkerError",
    "OutcomeRecord",
    "Outcomes",
    "PoolClosedError",
    "PoolConfig",
    "PoolError",
    "ProcessError",
    "ProcessExitError",
    "SpawnOptions",
    "UnboundError",
    "ValidationError",
    "WorkerAlreadyStartedError",
    "WorkerCompleted",
    "WorkerError",
    "WorkerFailed",
    "WorkerKilled",
    "WorkerKilledError",
    "WorkerOutcome",
    "WorkerOwnershipError",
    "WorkerSpec",
    "WorkerState",
]
