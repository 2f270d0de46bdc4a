"""Worker domain models: lifecycle states and construction parameters."""

import enum
import os
import typing as t
from collections.abc import Sequence

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ValidationError

WorkerHandler = t.Callable[..., t.Any]


class WorkerState(enum.StrEnum):
    """Worker lifecycle states.

    Flow: CREATED -> RUNNING -> (SUCCEEDED | FAILED), with KILLED reachable
    from CREATED or RUNNING. Terminal states are never left.
    """

    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    KILLED = "killed"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkerState.SUCCEEDED, WorkerState.FAILED, WorkerState.KILLED)


def _fspath(value: t.Any) -> t.Any:
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    return value


class SpawnOptions(BaseModel):
    """Options controlling how the external process is launched."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str | None = Field(
        default=None,
        description="Interpreter used to run the worker script (default: sys.executable)",
    )
    cwd: str | None = Field(default=None, description="Working directory")
    env: dict[str, str] | None = Field(
        default=None, description="Environment for the process (default: inherit)"
    )
    discard_stderr: bool = Field(
        default=False,
        description="Discard the child's stderr instead of inheriting it",
    )

    @field_validator("executable", "cwd", mode="before")
    @classmethod
    def _coerce_paths(cls, value: t.Any) -> t.Any:
        return _fspath(value)


class WorkerSpec(BaseModel):
    """Validated construction parameters for a worker."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(min_length=1, description="Path of the worker script")
    args: tuple[str, ...] = Field(
        default=(), description="String arguments passed to the script"
    )
    data: t.Any = Field(
        default=None, description="Payload sent to the process right after spawn"
    )
    options: SpawnOptions = Field(default_factory=SpawnOptions)
    on_message: WorkerHandler | None = None
    on_error: WorkerHandler | None = None
    on_exit: WorkerHandler | None = None

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: t.Any) -> t.Any:
        value = _fspath(value)
        if not isinstance(value, str):
            raise ValueError("Path must be of str type")
        return value

    @field_validator("args", mode="before")
    @classmethod
    def _check_args(cls, value: t.Any) -> t.Any:
        if value is None:
            return ()
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ValueError("Args must be a sequence of str")
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _default_options(cls, value: t.Any) -> t.Any:
        return SpawnOptions() if value is None else value

    @classmethod
    def parse(cls, **values: t.Any) -> "WorkerSpec":
        """Validate ``values`` into a spec.

        Raises:
            ValidationError: If any argument is malformed
        """
        try:
            return cls.model_validate(values)
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid worker spec: {exc}") from exc
