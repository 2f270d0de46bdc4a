"""Outcome messages reported by workers and the compact records the pool keeps.

Workers report exactly one terminal outcome message to their pool. The
message carries the identity the process reported (pid and stamped tag) so
the pool can check it against what it tracks before trusting it.
"""

import traceback
import typing as t
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

if t.TYPE_CHECKING:
    from ..workers.worker import Worker


class ErrorInfo(BaseModel):
    """Serialisable description of an exception."""

    model_config = ConfigDict(frozen=True)

    exc_type: str = Field(description="Fully qualified exception type")
    message: str = Field(description="Exception message")
    traceback: str | None = Field(default=None, description="Formatted traceback")

    @classmethod
    def from_exception(
        cls, exc: BaseException, include_traceback: bool = False
    ) -> "ErrorInfo":
        exc_cls = type(exc)
        formatted = (
            "".join(traceback.format_exception(exc)) if include_traceback else None
        )
        return cls(
            exc_type=f"{exc_cls.__module__}.{exc_cls.__qualname__}",
            message=str(exc),
            traceback=formatted,
        )


@dataclass(frozen=True, slots=True)
class WorkerOutcome:
    """Base outcome message.

    Attributes:
        worker: The reporting worker handle
        pid: OS pid reported by the process handle (None if it never spawned)
        tag: Tag stamped on the process handle at spawn
    """

    worker: "Worker"
    pid: int | None
    tag: int


@dataclass(frozen=True, slots=True)
class WorkerCompleted(WorkerOutcome):
    """The process exited with code 0."""

    code: int = 0


@dataclass(frozen=True, slots=True)
class WorkerFailed(WorkerOutcome):
    """The process exited non-zero or hit a process-level fault."""

    error: BaseException
    code: int | None = None
    signal: str | None = None


@dataclass(frozen=True, slots=True)
class WorkerKilled(WorkerOutcome):
    """The process went away after an explicit ``kill()``."""

    error: BaseException
    code: int | None = None
    signal: str | None = None


class OutcomeRecord(BaseModel):
    """Compact post-mortem record of a finished worker.

    Holds identity, path and result only, never the live worker.
    """

    model_config = ConfigDict(frozen=True)

    uid: int
    pid: int | None = None
    path: str
    code: int | None = None
    signal: str | None = None
    error: ErrorInfo | None = None

    @classmethod
    def from_outcome(cls, outcome: WorkerOutcome) -> "OutcomeRecord":
        match outcome:
            case WorkerCompleted(code=code):
                return cls(
                    uid=outcome.tag,
                    pid=outcome.pid,
                    path=outcome.worker.path,
                    code=code,
                )
            case WorkerFailed(error=error, code=code, signal=signal) | WorkerKilled(
                error=error, code=code, signal=signal
            ):
                return cls(
                    uid=outcome.tag,
                    pid=outcome.pid,
                    path=outcome.worker.path,
                    code=code,
                    signal=signal,
                    error=ErrorInfo.from_exception(error),
                )
            case _:
                raise TypeError(f"Unsupported outcome: {outcome!r}")


class Outcomes(BaseModel):
    """Snapshot of cached outcome records."""

    model_config = ConfigDict(frozen=True)

    completed: tuple[OutcomeRecord, ...] = ()
    errors: tuple[OutcomeRecord, ...] = ()
