"""Pool configuration model."""

import os
import typing as t

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ValidationError


def hardware_concurrency() -> int:
    """Number of CPUs available to this process (at least 1)."""
    return os.cpu_count() or 1


class PoolConfig(BaseModel):
    """Recognised pool options.

    ``max_procs`` defaults to the hardware concurrency. A larger value is
    clamped to it unless ``oversubscribe`` is set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_procs: int | None = Field(
        default=None, ge=1, description="Maximum concurrently running processes"
    )
    die_on_error: bool = Field(
        default=True, description="Enter the die state when a worker fails"
    )
    die_on_empty: bool = Field(
        default=True,
        description="Signal shutdown once queue and active set are both empty",
    )
    caching_enabled: bool = Field(
        default=True, description="Record compact outcome records"
    )
    oversubscribe: bool = Field(
        default=False,
        description="Allow max_procs above the hardware concurrency",
    )

    def resolve_max_procs(self, available: int | None = None) -> int:
        """Effective concurrency limit for this configuration."""
        available = available or hardware_concurrency()
        if self.max_procs is None:
            return available
        if self.max_procs > available and not self.oversubscribe:
            return available
        return self.max_procs

    @classmethod
    def build(cls, **overrides: t.Any) -> "PoolConfig":
        """Validate options, ignoring ``None`` overrides except ``max_procs``.

        Raises:
            ValidationError: If an option is malformed
        """
        values = {
            key: value
            for key, value in overrides.items()
            if value is not None or key == "max_procs"
        }
        try:
            return cls.model_validate(values)
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid pool config: {exc}") from exc
