"""Pytest configuration and fixtures for crew tests."""

import asyncio
import itertools
import typing as t
from dataclasses import dataclass, field

import loguru
import pytest
from typer.testing import CliRunner

from crew.app import create_app
from crew.cli.app import create_cli_app
from crew.config.settings import Environment, LogLevel, Settings
from crew.domain.pool import PoolConfig
from crew.domain.worker import SpawnOptions
from crew.events import BaseEmitter, EventEmitter
from crew.infrastructure.logging import reset_logging
from crew.processes.base import BaseLauncher, BaseProcess
from crew.processes.codec import encode_message
from crew.workers import Pool, UidCounter

_EOF = object()


@dataclass
class FakeBehaviour:
    """How a fake process behaves once spawned.

    Attributes:
        code: Exit code to exit with right after spawn. None keeps the process
              running until the test calls ``exit()``.
        messages: Messages the process sends before exiting
        echo: Send every received message straight back
        ignore_signals: Record signals without exiting
        stdin_closed: The child closed its end of the channel before spawn
                      returned, so every send raises BrokenPipeError
    """

    code: int | None = None
    messages: tuple[t.Any, ...] = ()
    echo: bool = False
    ignore_signals: bool = False
    stdin_closed: bool = False


class FakeProcess(BaseProcess):
    """In-memory process driven by the test."""

    def __init__(
        self,
        pid: int,
        tag: int,
        path: str,
        args: t.Sequence[str],
        options: SpawnOptions,
        behaviour: FakeBehaviour,
    ) -> None:
        self._pid = pid
        self._tag = tag
        self.path = path
        self.args = tuple(args)
        self.options = options
        self.behaviour = behaviour
        self.received: list[t.Any] = []
        self.signals: list[int] = []
        self.disconnects = 0
        self._connected = not behaviour.stdin_closed
        self._returncode: int | None = None
        self._outbox: asyncio.Queue[t.Any] = asyncio.Queue()
        self._exited = asyncio.Event()

    @property
    def pid(self) -> int:
        return self._pid

    @property
    def tag(self) -> int:
        return self._tag

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def returncode(self) -> int | None:
        return self._returncode

    async def send(self, data: t.Any) -> None:
        if not self._connected:
            raise BrokenPipeError("channel closed")
        encode_message(data)
        self.received.append(data)
        if self.behaviour.echo:
            self.emit(data)

    async def messages(self) -> t.AsyncIterator[t.Any]:
        while True:
            message = await self._outbox.get()
            if message is _EOF:
                return
            yield message

    async def wait(self) -> int:
        await self._exited.wait()
        assert self._returncode is not None
        return self._returncode

    async def disconnect(self) -> None:
        self.disconnects += 1
        self._connected = False

    def send_signal(self, signum: int) -> None:
        if self._returncode is not None:
            raise ProcessLookupError(self._pid)
        self.signals.append(signum)
        if not self.behaviour.ignore_signals:
            self.exit(-signum)

    def emit(self, message: t.Any) -> None:
        """Send a message to the parent."""
        self._outbox.put_nowait(message)

    def exit(self, code: int = 0) -> None:
        """Terminate with ``code`` (negative for a signal)."""
        if self._returncode is not None:
            return
        self._returncode = code
        self._connected = False
        self._outbox.put_nowait(_EOF)
        self._exited.set()

    @property
    def running(self) -> bool:
        return self._returncode is None


@dataclass
class FakeLauncher(BaseLauncher):
    """Launcher handing out FakeProcess instances.

    ``behaviours`` maps a script path to its FakeBehaviour, other paths use
    ``default``. ``fail_paths`` raise FileNotFoundError at spawn. While
    ``gate`` is set to an unset asyncio.Event, spawns block on it.
    """

    behaviours: dict[str, FakeBehaviour] = field(default_factory=dict)
    default: FakeBehaviour = field(default_factory=FakeBehaviour)
    fail_paths: set[str] = field(default_factory=set)
    pids: t.Iterator[int] = field(default_factory=lambda: itertools.count(1000))
    gate: asyncio.Event | None = None
    processes: list[FakeProcess] = field(default_factory=list)

    async def spawn(
        self,
        path: str,
        args: t.Sequence[str],
        options: SpawnOptions,
        *,
        tag: int,
    ) -> FakeProcess:
        if self.gate is not None:
            await self.gate.wait()
        if path in self.fail_paths:
            raise FileNotFoundError(f"No such file: {path}")

        behaviour = self.behaviours.get(path, self.default)
        process = FakeProcess(next(self.pids), tag, path, args, options, behaviour)
        self.processes.append(process)
        for message in behaviour.messages:
            process.emit(message)
        if behaviour.code is not None:
            asyncio.get_running_loop().call_soon(process.exit, behaviour.code)
        return process

    def running(self) -> list[FakeProcess]:
        return [process for process in self.processes if process.running]

    def for_tag(self, tag: int) -> FakeProcess:
        return next(process for process in self.processes if process.tag == tag)


async def settle(rounds: int = 50) -> None:
    """Let every ready task run until the loop goes quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def test_settings():
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    return emitter


@pytest.fixture
def real_emitter(mock_logger):
    """Provide a real EventEmitter with a mocked logger."""
    return EventEmitter(mock_logger)


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def uids():
    """Provide a fresh uid counter so tests see predictable uids."""
    return UidCounter()


@pytest.fixture
def launcher():
    """Provide a FakeLauncher whose processes run until told to exit."""
    return FakeLauncher()


@pytest.fixture
def fake_behaviour():
    """Expose FakeBehaviour to tests without importing conftest."""
    return FakeBehaviour


@pytest.fixture
def settle_loop():
    """Expose the settle() helper to tests."""
    return settle


@pytest.fixture
def make_pool(launcher, mock_logger, uids) -> t.Callable[..., Pool]:
    """Factory fixture to create Pools wired to the fake launcher."""

    def _make_pool(**config: t.Any) -> Pool:
        config.setdefault("oversubscribe", True)
        return Pool(
            PoolConfig(**config),
            launcher=launcher,
            logger=mock_logger,
            uids=uids,
        )

    return _make_pool


# CLI-specific fixtures (shared across all tests)


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def default_app():
    """Provide CLI app with default settings."""
    return create_cli_app()
