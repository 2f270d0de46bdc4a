"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    ErrorInfo,
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
    WorkerErrorEvent,
    WorkerEvent,
    WorkerExitEvent,
    WorkerMessageEvent,
    WorkerStartedEvent,
    WorkerTerminatedEvent,
)
from .null import NullEmitter
from .subscription import Subscription

__all__ = [
    # Base and implementations
    "BaseEmitter",
    "EventEmitter",
    "NullEmitter",
    "Subscription",
    "BaseEvent",
    "ErrorInfo",
    # Worker events
    "WorkerEvent",
    "WorkerStartedEvent",
    "WorkerMessageEvent",
    "WorkerErrorEvent",
    "WorkerExitEvent",
    "WorkerTerminatedEvent",
    # Pool events
    "PoolEvent",
    "PoolWorkerEvent",
    "PoolQueuedEvent",
    "PoolAdmittedEvent",
    "PoolCompletedEvent",
    "PoolFailedEvent",
    "PoolKilledEvent",
    "PoolLostWorkerEvent",
    "PoolDyingEvent",
    "PoolIdleEvent",
    "PoolShutdownEvent",
]
