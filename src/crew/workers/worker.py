"""Worker bound to a single external process.

A Worker owns the lifecycle of one process: validation of its construction
parameters, spawning, the data channel, kill, and detection of its single
terminal outcome, which it reports to the pool it is bound to.
"""

import asyncio
import os
import signal as signals
import typing as t

from ..domain.exceptions import (
    ProcessError,
    UnboundError,
    WorkerAlreadyStartedError,
    WorkerKilledError,
    WorkerOwnershipError,
)
from ..domain.exit_codes import exit_error, signal_name, split_returncode
from ..domain.outcomes import (
    ErrorInfo,
    WorkerCompleted,
    WorkerFailed,
    WorkerKilled,
    WorkerOutcome,
)
from ..domain.worker import SpawnOptions, WorkerHandler, WorkerSpec, WorkerState
from ..events import (
    BaseEmitter,
    EventEmitter,
    WorkerErrorEvent,
    WorkerExitEvent,
    WorkerMessageEvent,
    WorkerStartedEvent,
    WorkerTerminatedEvent,
)
from ..infrastructure.logging import get_logger
from ..processes.base import BaseLauncher, BaseProcess
from ..processes.launcher import SubprocessLauncher
from .base import BaseOutcomeObserver
from .ids import UidCounter, process_uids

if t.TYPE_CHECKING:
    import loguru


class Worker:
    """A unit of work bound to exactly one external process.

    Lifecycle: CREATED -> RUNNING -> (SUCCEEDED | FAILED), or KILLED through
    ``kill()`` from CREATED or RUNNING. Terminal states are never left.

    Identity: ``uid`` is assigned at construction and never reused. ``pid``
    is assigned by the OS at spawn and may be recycled after the process
    exits, so outcomes are matched on both (see ``verify_identity``).

    Events on ``worker.emitter``:
    - worker.started: process spawned
    - worker.message: one per message received from the process
    - worker.error: the worker failed (emitted after the pool was notified)
    - worker.exit: terminal state reached (always last)
    - worker.terminated: a ``kill()`` completed (exactly once)

    Usage:
        worker = Worker("job.py", args=["--n", "3"], data={"task": 1},
                        on_message=lambda event: print(event.message))
        await pool.submit(worker)
        await worker.send({"more": True})
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        args: t.Sequence[str] | None = None,
        data: t.Any = None,
        options: SpawnOptions | t.Mapping[str, t.Any] | None = None,
        *,
        on_message: WorkerHandler | None = None,
        on_error: WorkerHandler | None = None,
        on_exit: WorkerHandler | None = None,
        launcher: BaseLauncher | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        uids: UidCounter | None = None,
    ) -> None:
        """Validate the parameters and create the worker.

        Args:
            path: Path of the worker script
            args: String arguments for the script
            data: Payload sent to the process immediately after spawn
            options: Spawn options (interpreter, cwd, env, stderr handling)
            on_message: Handler subscribed to worker.message
            on_error: Handler subscribed to worker.error
            on_exit: Handler subscribed to worker.exit
            launcher: Launcher used to spawn the process. Defaults to
                      SubprocessLauncher.
            logger: Logger for lifecycle messages
            emitter: Emitter for worker events. If None, a new EventEmitter
                     is created so every worker dispatches its own events.
            uids: Uid source. Defaults to the process-wide counter.

        Raises:
            ValidationError: If any parameter is malformed
        """
        spec = WorkerSpec.parse(
            path=path,
            args=args,
            data=data,
            options=options,
            on_message=on_message,
            on_error=on_error,
            on_exit=on_exit,
        )

        self._spec = spec
        self._uid = (uids or process_uids).next()
        self._logger = logger
        self._launcher = launcher or SubprocessLauncher(logger=logger)
        self._emitter = emitter or EventEmitter(logger)

        self._data = spec.data
        self._state = WorkerState.CREATED
        self._observer: BaseOutcomeObserver | None = None
        self._process: BaseProcess | None = None
        self._pid: int | None = None
        self._task: asyncio.Task[None] | None = None
        self._fault: ProcessError | None = None
        self._kill_signal: int | None = None
        self._terminated = False
        self._exit_code: int | None = None
        self._exit_signal: str | None = None

        for event_type, handler in (
            ("worker.message", spec.on_message),
            ("worker.error", spec.on_error),
            ("worker.exit", spec.on_exit),
        ):
            if handler is not None:
                self._emitter.on(event_type, handler)

    @classmethod
    def from_spec(
        cls,
        spec: WorkerSpec,
        *,
        launcher: BaseLauncher | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        uids: UidCounter | None = None,
    ) -> "Worker":
        """Create a worker from an already validated spec."""
        return cls(
            spec.path,
            args=spec.args,
            data=spec.data,
            options=spec.options,
            on_message=spec.on_message,
            on_error=spec.on_error,
            on_exit=spec.on_exit,
            launcher=launcher,
            logger=logger,
            emitter=emitter,
            uids=uids,
        )

    def __repr__(self) -> str:
        return f"<Worker uid={self._uid} path={self.path!r} state={self._state}>"

    @property
    def uid(self) -> int:
        return self._uid

    @property
    def pid(self) -> int | None:
        """OS pid, set once at spawn."""
        return self._pid

    @property
    def path(self) -> str:
        return self._spec.path

    @property
    def args(self) -> tuple[str, ...]:
        return self._spec.args

    @property
    def options(self) -> SpawnOptions:
        return self._spec.options

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def pool(self) -> BaseOutcomeObserver | None:
        """The pool this worker reports to, until it is released."""
        return self._observer

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for worker events."""
        return self._emitter

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

    @property
    def exit_signal(self) -> str | None:
        return self._exit_signal

    @property
    def data(self) -> t.Any:
        """Payload sent to the process right after it spawns."""
        return self._data

    @data.setter
    def data(self, value: t.Any) -> None:
        if self._state is not WorkerState.CREATED:
            raise WorkerAlreadyStartedError(
                f"Cannot replace initial data of worker {self._uid}: {self._state}"
            )
        self._data = value

    def is_killed(self) -> bool:
        return self._state is WorkerState.KILLED

    def is_exited(self) -> bool:
        return self._state in (WorkerState.SUCCEEDED, WorkerState.FAILED)

    def is_terminal(self) -> bool:
        return self._state.is_terminal

    def verify_identity(self, pid: int | None, tag: int) -> bool:
        """True only if both the reported pid and tag are this worker's."""
        return tag == self._uid and pid == self._pid

    def bind_pool(self, pool: BaseOutcomeObserver) -> "Worker":
        """Record the pool this worker reports its outcome to.

        Raises:
            WorkerOwnershipError: If the worker already belongs to another pool
        """
        if self._observer is not None and self._observer is not pool:
            raise WorkerOwnershipError(f"Worker {self._uid} already belongs to a pool")
        self._observer = pool
        return self

    def release(self) -> None:
        """Drop the process handle and pool reference.

        Called by the pool once the outcome has been accounted for. State and
        identity stay readable on the handle.
        """
        self._observer = None
        self._process = None

    def start(self) -> "Worker":
        """Spawn the process in the background and move to RUNNING.

        Must be called from a running event loop. The spawn, the initial data
        transmission and outcome detection all happen in a supervisor task.

        Raises:
            UnboundError: If no pool is bound
            WorkerAlreadyStartedError: If the worker already left CREATED
        """
        if self._observer is None:
            raise UnboundError(f"Worker {self._uid} cannot be started without a pool")
        if self._state is not WorkerState.CREATED:
            raise WorkerAlreadyStartedError(
                f"Worker {self._uid} cannot be started: {self._state}"
            )

        loop = asyncio.get_running_loop()
        self._state = WorkerState.RUNNING
        self._task = loop.create_task(
            self._supervise(), name=f"crew-worker-{self._uid}"
        )
        return self

    async def wait(self) -> WorkerState:
        """Wait until the worker reached its terminal state and reported it."""
        if self._task is not None:
            await asyncio.shield(self._task)
        return self._state

    async def send(self, data: t.Any) -> "Worker":
        """Send a message to the process, or buffer it until spawn.

        A message for a worker that has not spawned yet replaces the initial
        payload. A child that already closed its end only gets a warning, any
        other channel failure is a process-level fault and ends the worker as
        FAILED.

        Raises:
            ValueError: If ``data`` cannot be serialised
        """
        process = self._process
        if self._state is WorkerState.RUNNING and process is not None:
            if not process.connected:
                self._logger.warning(
                    f"Worker {self._uid} channel is closed, dropping message"
                )
                return self
            try:
                await process.send(data)
            except (BrokenPipeError, ConnectionResetError) as exc:
                self._logger.warning(
                    f"Worker {self._uid} stopped reading, dropping message: {exc}"
                )
            except OSError as exc:
                await self._fault_process(
                    ProcessError(
                        f"Failed to send message: {exc} File: {self.path}",
                        path=self.path,
                    )
                )
            return self

        if self._state.is_terminal:
            self._logger.warning(
                f"Worker {self._uid} is {self._state}, dropping message"
            )
            return self

        self._data = data
        return self

    async def kill(self, signum: int = signals.SIGTERM) -> "Worker":
        """Terminate the worker's process.

        No-op on a worker that already reached a terminal state. When the
        channel is open it is disconnected first, then the signal is sent.
        Emits worker.terminated exactly once.
        """
        if self._state.is_terminal:
            return self

        previous = self._state
        self._state = WorkerState.KILLED
        self._kill_signal = signum
        self._logger.debug(
            f"Killing worker {self._uid} ({self.path}) with {signal_name(signum)}"
        )

        if previous is WorkerState.CREATED:
            await self._emit_terminated()
        elif self._process is not None:
            await self._terminate()
        # Otherwise the spawn is in flight and the supervisor terminates the
        # process as soon as it exists.
        return self

    async def _supervise(self) -> None:
        try:
            process = await self._launcher.spawn(
                self.path, self.args, self.options, tag=self._uid
            )
        except Exception as exc:
            self._logger.error(f"Failed to spawn worker {self._uid} ({self.path}): {exc}")
            fault = ProcessError(
                f"Failed to spawn: {exc} File: {self.path}", path=self.path
            )
            fault.__cause__ = exc
            if self._state is WorkerState.KILLED:
                await self._emit_terminated()
            await self._finish(error=fault)
            return

        self._process = process
        self._pid = process.pid
        self._logger.debug(f"Worker {self._uid} spawned {self.path} as pid {self._pid}")

        if self._state is WorkerState.KILLED:
            await self._terminate()
        else:
            # Initial data goes out before anything else can reach send().
            if self._data is not None:
                try:
                    await process.send(self._data)
                except (BrokenPipeError, ConnectionResetError) as exc:
                    # The exit code decides the outcome.
                    self._logger.warning(
                        f"Worker {self._uid} closed its channel before reading "
                        f"initial data: {exc}"
                    )
                except (OSError, ValueError) as exc:
                    await self._fault_process(
                        ProcessError(
                            f"Failed to send initial data: {exc} File: {self.path}",
                            path=self.path,
                        )
                    )
            await self._emitter.emit(
                "worker.started",
                WorkerStartedEvent(uid=self._uid, path=self.path, pid=self._pid),
            )

        try:
            async for message in process.messages():
                await self._emitter.emit(
                    "worker.message",
                    WorkerMessageEvent(
                        uid=self._uid, path=self.path, pid=self._pid, message=message
                    ),
                )
        except (OSError, ValueError) as exc:
            await self._fault_process(
                ProcessError(f"Channel failure: {exc} File: {self.path}", path=self.path)
            )

        returncode = await process.wait()
        code, signal = split_returncode(returncode)
        await self._finish(code=code, signal=signal, error=self._fault)

    async def _fault_process(self, fault: ProcessError) -> None:
        """Record a process-level fault and bring the process down."""
        if self._fault is not None or self._state.is_terminal:
            return
        self._logger.error(f"Worker {self._uid} process fault: {fault}")
        self._fault = fault
        process = self._process
        if process is None:
            return
        await process.disconnect()
        try:
            process.send_signal(signals.SIGTERM)
        except ProcessLookupError:
            self._logger.debug(f"Worker {self._uid} process already gone")

    async def _terminate(self) -> None:
        process = self._process
        signum = self._kill_signal if self._kill_signal is not None else signals.SIGTERM
        if process is not None:
            if process.connected:
                await process.disconnect()
            try:
                process.send_signal(signum)
            except ProcessLookupError:
                self._logger.debug(
                    f"Worker {self._uid} process {process.pid} already gone"
                )
        await self._emit_terminated()

    async def _emit_terminated(self) -> None:
        if self._terminated:
            return
        self._terminated = True
        await self._emitter.emit(
            "worker.terminated",
            WorkerTerminatedEvent(
                uid=self._uid,
                path=self.path,
                pid=self._pid,
                signal=signal_name(self._kill_signal) if self._kill_signal else None,
            ),
        )

    async def _finish(
        self,
        *,
        code: int | None = None,
        signal: str | None = None,
        error: ProcessError | None = None,
    ) -> None:
        """Resolve the terminal state and report it, pool first."""
        process = self._process
        pid, tag = (process.pid, process.tag) if process else (self._pid, self._uid)
        self._exit_code = code
        self._exit_signal = signal

        outcome: WorkerOutcome
        if self._state is WorkerState.KILLED:
            kill_signal = signal or (
                signal_name(self._kill_signal) if self._kill_signal else None
            )
            outcome = WorkerKilled(
                self,
                pid,
                tag,
                error=WorkerKilledError(path=self.path, signal=kill_signal),
                code=code,
                signal=kill_signal,
            )
        elif error is None and code == 0:
            self._state = WorkerState.SUCCEEDED
            outcome = WorkerCompleted(self, pid, tag, code=0)
        else:
            self._state = WorkerState.FAILED
            if error is None:
                error = exit_error(self.path, code if code is not None else 1, signal)
            outcome = WorkerFailed(self, pid, tag, error=error, code=code, signal=signal)

        self._logger.debug(
            f"Worker {self._uid} ({self.path}) finished: {self._state}, code={code}"
        )

        observer = self._observer
        if observer is not None:
            await observer.on_outcome(outcome)

        if isinstance(outcome, WorkerFailed):
            await self._emitter.emit(
                "worker.error",
                WorkerErrorEvent(
                    uid=self._uid,
                    path=self.path,
                    pid=self._pid,
                    error=ErrorInfo.from_exception(outcome.error),
                    code=code,
                    signal=signal,
                ),
            )
        await self._emitter.emit(
            "worker.exit",
            WorkerExitEvent(
                uid=self._uid,
                path=self.path,
                pid=self._pid,
                state=self._state,
                code=code,
                signal=signal,
            ),
        )
