"""CLI state container."""

import typing as t

from ..config.settings import Settings, build_settings
from ..domain.pool import PoolConfig
from ..workers import Pool

PoolFactory = t.Callable[[PoolConfig], Pool]


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factory used to build pools, so tests can swap in
    a pool wired to a fake launcher.
    """

    def __init__(self, settings: Settings, pool_factory: PoolFactory | None = None):
        self.settings = settings
        self._pool_factory = pool_factory or Pool

    def create_pool(self, **overrides: t.Any) -> Pool:
        """Create a pool from the settings, applying non-None overrides."""
        settings = build_settings(self.settings, **overrides)
        return self._pool_factory(settings.pool_config())
