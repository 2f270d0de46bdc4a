"""asyncio subprocess launcher.

Runs ``[executable, path, *args]`` with stdin/stdout pipes. stdin carries
messages to the child and stdout carries messages back, one JSON document
per line. Closing stdin is the graceful disconnect.
"""

import asyncio
import sys
import typing as t

from ..domain.worker import SpawnOptions
from ..infrastructure.logging import get_logger
from .base import BaseLauncher, BaseProcess
from .codec import decode_message, encode_message

if t.TYPE_CHECKING:
    import loguru

# Maximum size of a single message line read from a child.
DEFAULT_STREAM_LIMIT: t.Final = 2**20


class SubprocessProcess(BaseProcess):
    """BaseProcess backed by ``asyncio.subprocess.Process``."""

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        tag: int,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self._process = process
        self._tag = tag
        self._logger = logger

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def tag(self) -> int:
        return self._tag

    @property
    def connected(self) -> bool:
        stdin = self._process.stdin
        return stdin is not None and not stdin.is_closing()

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    async def send(self, data: t.Any) -> None:
        stdin = self._process.stdin
        if stdin is None or stdin.is_closing():
            raise BrokenPipeError(f"Channel to process {self.pid} is closed")
        stdin.write(encode_message(data))
        await stdin.drain()

    async def messages(self) -> t.AsyncIterator[t.Any]:
        stdout = self._process.stdout
        if stdout is None:
            return
        async for line in stdout:
            if not line.strip():
                continue
            yield decode_message(line)

    async def wait(self) -> int:
        return await self._process.wait()

    async def disconnect(self) -> None:
        stdin = self._process.stdin
        if stdin is None or stdin.is_closing():
            return
        if stdin.transport.get_write_buffer_size():
            # wait_closed() would block until a child that stopped reading drains it.
            stdin.transport.abort()
            return
        stdin.close()
        try:
            await stdin.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as exc:
            # The child already closed its end.
            self._logger.debug(f"Channel to process {self.pid} already closed: {exc}")

    def send_signal(self, signum: int) -> None:
        self._process.send_signal(signum)


class SubprocessLauncher(BaseLauncher):
    """Launches worker scripts as asyncio subprocesses.

    Usage:
        launcher = SubprocessLauncher()
        process = await launcher.spawn("job.py", ["--fast"], SpawnOptions(), tag=1)
        await process.send({"n": 3})
        async for message in process.messages():
            ...
        code = await process.wait()
    """

    def __init__(
        self,
        logger: "loguru.Logger" = get_logger(__name__),
        stream_limit: int = DEFAULT_STREAM_LIMIT,
    ) -> None:
        self._logger = logger
        self._stream_limit = stream_limit

    async def spawn(
        self,
        path: str,
        args: t.Sequence[str],
        options: SpawnOptions,
        *,
        tag: int,
    ) -> SubprocessProcess:
        executable = options.executable or sys.executable
        self._logger.debug(f"Spawning {executable} {path} {list(args)}")
        process = await asyncio.create_subprocess_exec(
            executable,
            path,
            *args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL if options.discard_stderr else None,
            cwd=options.cwd,
            env=options.env,
            limit=self._stream_limit,
        )
        return SubprocessProcess(process, tag=tag, logger=self._logger)
