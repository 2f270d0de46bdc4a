"""Event data models."""

from ...domain.outcomes import ErrorInfo
from .base import BaseEvent
from .pool import (
    PoolAdmittedEvent,
    PoolCompletedEvent,
    PoolDyingEvent,
    PoolEvent,
    PoolFailedEvent,
    PoolIdleEvent,
    PoolKilledEvent,
    PoolLostWorkerEvent,
    PoolQueuedEvent,
    PoolShutdownEvent,
    PoolWorkerEvent,
)
from .worker import (
    WorkerErrorEvent,
    WorkerEvent,
    WorkerExitEvent,
    WorkerMessageEvent,
    WorkerStartedEvent,
    WorkerTerminatedEvent,
)

__all__ = [
    "BaseEvent",
    "ErrorInfo",
    "PoolAdmittedEvent",
    "PoolCompletedEvent",
    "PoolDyingEvent",
    "PoolEvent",
    "PoolFailedEvent",
    "PoolIdleEvent",
    "PoolKilledEvent",
    "PoolLostWorkerEvent",
    "PoolQueuedEvent",
    "PoolShutdownEvent",
    "PoolWorkerEvent",
    "WorkerErrorEvent",
    "WorkerEvent",
    "WorkerExitEvent",
    "WorkerMessageEvent",
    "WorkerStartedEvent",
    "WorkerTerminatedEvent",
]
