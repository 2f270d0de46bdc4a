"""Events emitted by a Pool on its own emitter."""

from pydantic import Field

from ...domain.outcomes import ErrorInfo
from .base import BaseEvent


class PoolEvent(BaseEvent):
    """Base class for pool events."""

    event_type: str = Field(default="pool.base")


class PoolWorkerEvent(PoolEvent):
    """Pool event concerning one worker."""

    uid: int = Field(description="Worker uid")
    path: str = Field(description="Path of the worker script")
    pid: int | None = None


class PoolQueuedEvent(PoolWorkerEvent):
    event_type: str = Field(default="pool.queued")
    queue_size: int = Field(ge=0)


class PoolAdmittedEvent(PoolWorkerEvent):
    event_type: str = Field(default="pool.admitted")
    active_count: int = Field(ge=0)


class PoolCompletedEvent(PoolWorkerEvent):
    event_type: str = Field(default="pool.completed")
    code: int = 0


class PoolFailedEvent(PoolWorkerEvent):
    event_type: str = Field(default="pool.failed")
    error: ErrorInfo
    code: int | None = None
    signal: str | None = None


class PoolKilledEvent(PoolWorkerEvent):
    event_type: str = Field(default="pool.killed")
    signal: str | None = None


class PoolLostWorkerEvent(PoolWorkerEvent):
    """An outcome arrived for a worker the pool does not track as active."""

    event_type: str = Field(default="pool.lost_worker")
    error: ErrorInfo


class PoolDyingEvent(PoolEvent):
    event_type: str = Field(default="pool.dying")
    reason: str = ""
    active_count: int = Field(ge=0)


class PoolIdleEvent(PoolEvent):
    """Queue and active set are both empty."""

    event_type: str = Field(default="pool.idle")


class PoolShutdownEvent(PoolEvent):
    """Terminal shutdown; ``exit_status`` is 0 for a clean idle shutdown."""

    event_type: str = Field(default="pool.shutdown")
    exit_status: int
