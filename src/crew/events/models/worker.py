"""Events emitted by a Worker on its own emitter."""

import typing as t

from pydantic import Field

from ...domain.outcomes import ErrorInfo
from ...domain.worker import WorkerState
from .base import BaseEvent


class WorkerEvent(BaseEvent):
    """Base class for worker lifecycle events."""

    uid: int = Field(description="Worker uid")
    path: str = Field(description="Path of the worker script")
    pid: int | None = Field(default=None, description="OS pid once spawned")
    event_type: str = Field(default="worker.base")


class WorkerStartedEvent(WorkerEvent):
    """Emitted once the process has been spawned."""

    event_type: str = Field(default="worker.started")


class WorkerMessageEvent(WorkerEvent):
    """Emitted for every message the process sends."""

    event_type: str = Field(default="worker.message")
    message: t.Any = Field(default=None, description="Decoded message payload")


class WorkerErrorEvent(WorkerEvent):
    """Emitted when the worker fails (non-zero exit or process fault)."""

    event_type: str = Field(default="worker.error")
    error: ErrorInfo
    code: int | None = None
    signal: str | None = None


class WorkerExitEvent(WorkerEvent):
    """Emitted last, once the worker reached its terminal state."""

    event_type: str = Field(default="worker.exit")
    state: WorkerState
    code: int | None = None
    signal: str | None = None


class WorkerTerminatedEvent(WorkerEvent):
    """Emitted exactly once when a ``kill()`` completes."""

    event_type: str = Field(default="worker.terminated")
    signal: str | None = None
