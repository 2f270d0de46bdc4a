"""Application settings and helpers for building them."""

import os
import typing as t
from dataclasses import dataclass, fields, replace
from enum import Enum

from ..domain.pool import PoolConfig


class Environment(Enum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior
    without introducing configuration dependencies.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_ENV_PREFIX = "CREW_"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Settings container used to bootstrap the app.

    Core code only depends on this shape. The CLI (or an embedding
    application) decides how values are populated: explicit overrides,
    environment variables, or defaults.
    """

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    max_procs: int | None = None
    die_on_error: bool = True
    die_on_empty: bool = True
    caching_enabled: bool = True
    oversubscribe: bool = False

    def pool_config(self) -> PoolConfig:
        """Build the pool configuration described by these settings."""
        return PoolConfig(
            max_procs=self.max_procs,
            die_on_error=self.die_on_error,
            die_on_empty=self.die_on_empty,
            caching_enabled=self.caching_enabled,
            oversubscribe=self.oversubscribe,
        )

    @classmethod
    def from_env(cls, environ: t.Mapping[str, str] | None = None) -> "Settings":
        """Read settings from ``CREW_*`` environment variables.

        Unset variables keep their defaults. Example: ``CREW_MAX_PROCS=4``,
        ``CREW_DIE_ON_ERROR=false``, ``CREW_LOG_LEVEL=DEBUG``.
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, t.Any] = {}
        for field in fields(cls):
            raw = environ.get(f"{_ENV_PREFIX}{field.name.upper()}")
            if raw is None:
                continue
            overrides[field.name] = _parse_env_value(field.name, raw)
        return build_settings(**overrides)


def _parse_env_value(name: str, raw: str) -> t.Any:
    match name:
        case "environment":
            return Environment(raw.lower())
        case "log_level":
            return LogLevel(raw.upper())
        case "max_procs":
            return int(raw)
        case _:
            return raw.strip().lower() in _TRUTHY


def build_settings(base: Settings | None = None, **overrides: t.Any) -> Settings:
    """Return settings with every non-None override applied.

    ``None`` means "not provided" so CLI options that were left unset do not
    clobber defaults.
    """
    settings = base or Settings()
    applied = {key: value for key, value in overrides.items() if value is not None}
    return replace(settings, **applied)
