"""Shared fixtures for CLI tests."""

import pytest

from crew.cli.app import create_cli_app
from crew.cli.state import CLIState
from crew.config.settings import Environment, LogLevel, Settings
from crew.domain.pool import PoolConfig
from crew.workers import Pool


@pytest.fixture
def test_settings():
    """Provide test Settings with known values."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.DEBUG,
        max_procs=2,
        oversubscribe=True,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def cli_launcher(launcher, fake_behaviour):
    """FakeLauncher whose processes exit cleanly unless told otherwise."""
    launcher.default = fake_behaviour(code=0)
    return launcher


@pytest.fixture
def cli_state_with_fake_launcher(test_settings, cli_launcher, mock_logger, uids):
    """CLIState whose pools spawn FakeProcesses instead of subprocesses."""
    created: list[Pool] = []

    def fake_pool_factory(config: PoolConfig) -> Pool:
        pool = Pool(config, launcher=cli_launcher, logger=mock_logger, uids=uids)
        created.append(pool)
        return pool

    state = CLIState(test_settings, pool_factory=fake_pool_factory)
    state.created_pools = created
    return state


@pytest.fixture
def app_with_fake_launcher(cli_state_with_fake_launcher):
    """CLI app with the fake pool factory for testing."""
    return create_cli_app(state=cli_state_with_fake_launcher)


@pytest.fixture
def script_file(tmp_path):
    """Factory writing empty worker scripts (the fake launcher never runs them)."""

    def _make(name: str = "job.py") -> str:
        path = tmp_path / name
        path.write_text("")
        return str(path)

    return _make
