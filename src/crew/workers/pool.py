"""Bounded-concurrency pool of process-backed workers.

The pool owns a FIFO queue of pending workers and a bounded active set. It
admits workers in submission order, routes every worker outcome back through
an identity check, and applies the drain, die and empty policies.
"""

import asyncio
import signal as signals
import typing as t
from collections import deque
from collections.abc import Mapping

from ..domain.exceptions import (
    LostWorkerError,
    PoolClosedError,
    ValidationError,
    WorkerAlreadyStartedError,
    WorkerOwnershipError,
)
from ..domain.outcomes import (
    ErrorInfo,
    Outcomes,
    WorkerCompleted,
    WorkerFailed,
    WorkerKilled,
    WorkerOutcome,
)
from ..domain.pool import PoolConfig, hardware_concurrency
from ..domain.worker import WorkerSpec, WorkerState
from ..events import (
    BaseEmitter,
    EventEmitter,
    PoolAdmittedEvent,
    PoolCompletedEvent,
    PoolDyingEvent,
    PoolEvent,
    PoolFailedEvent,
    PoolIdleEvent,
    PoolKilledEvent,
    PoolLostWorkerEvent,
    PoolQueuedEvent,
    PoolShutdownEvent,
    Subscription,
)
from ..events.base import EventHandler
from ..infrastructure.logging import get_logger
from ..processes.base import BaseLauncher
from ..processes.launcher import SubprocessLauncher
from ..tracking import BaseOutcomeCache, NullOutcomeCache, OutcomeCache
from .base import BaseOutcomeObserver
from .ids import UidCounter, process_uids
from .worker import Worker

if t.TYPE_CHECKING:
    import loguru

Submittable = Worker | WorkerSpec | Mapping[str, t.Any]


class Pool(BaseOutcomeObserver):
    """Admits workers in FIFO order, never running more than ``max_procs``.

    Admission runs after every submit and after every accounted outcome, and
    is the only place a worker moves from the queue to the active set.

    Policies:
    - drain: one-shot barrier. No admissions until the active set empties,
      then the barrier clears itself and admission resumes.
    - die: terminal. Entered on ``die()`` or on a worker failure while
      ``die_on_error`` is set. Kills every active worker, admits nothing
      further, and shuts down with status 1 once the active set is empty.
    - empty: when queue and active set are both empty the pool emits
      ``pool.idle`` and, with ``die_on_empty``, shuts down with status 0.

    Events are published on the pool's own emitter after each transition:
    pool.queued, pool.admitted, pool.completed, pool.failed, pool.killed,
    pool.lost_worker, pool.dying, pool.idle, pool.shutdown.

    Usage:
        pool = Pool(PoolConfig(max_procs=2))
        pool.on("pool.failed", lambda event: print(event.error.message))
        for n in range(4):
            await pool.submit({"path": "square.py", "data": n})
        status = await pool.wait_closed()
    """

    def __init__(
        self,
        config: PoolConfig | None = None,
        *,
        launcher: BaseLauncher | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        uids: UidCounter | None = None,
        cache: BaseOutcomeCache | None = None,
    ) -> None:
        """Initialise the pool.

        Args:
            config: Pool options. Defaults to PoolConfig().
            launcher: Launcher handed to workers built from parameters.
                      Defaults to SubprocessLauncher.
            logger: Logger instance for pool events.
            emitter: Emitter for pool events. If None, a new EventEmitter is
                     created.
            uids: Uid source for workers built from parameters.
            cache: Outcome cache used when caching is enabled. If None, an
                   OutcomeCache is created. Ignored when caching is disabled.
        """
        self._config = config or PoolConfig()
        self._logger = logger
        self._launcher = launcher or SubprocessLauncher(logger=logger)
        self._emitter = emitter or EventEmitter(logger)
        self._uids = uids or process_uids

        self._max_procs = self._config.resolve_max_procs()
        if (
            self._config.max_procs is not None
            and self._max_procs < self._config.max_procs
        ):
            self._logger.warning(
                f"max_procs={self._config.max_procs} exceeds hardware concurrency "
                f"({hardware_concurrency()}), clamped to {self._max_procs}"
            )

        if not self._config.caching_enabled:
            self._cache: BaseOutcomeCache = NullOutcomeCache()
        else:
            self._cache = cache if cache is not None else OutcomeCache(logger=logger)

        self._queue: deque[Worker] = deque()
        self._active: dict[int, Worker] = {}
        self._draining = False
        self._dying = False
        self._closed = False
        self._exit_status: int | None = None
        self._shutdown = asyncio.Event()

        self._logger.debug(f"Pool initialised with max_procs={self._max_procs}")

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def max_procs(self) -> int:
        return self._max_procs

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for pool events."""
        return self._emitter

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def is_dying(self) -> bool:
        return self._dying

    @property
    def is_closed(self) -> bool:
        """True once terminal shutdown has been signalled."""
        return self._closed

    @property
    def exit_status(self) -> int | None:
        """Shutdown status: 0 after a clean idle shutdown, 1 after die."""
        return self._exit_status

    def on(self, event_type: str, handler: EventHandler) -> Subscription:
        """Subscribe to pool events (``*`` for all of them)."""
        return self._emitter.on(event_type, handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        self._emitter.off(event_type, handler)

    def active_count(self) -> int:
        return len(self._active)

    def queue_size(self) -> int:
        return len(self._queue)

    def is_queue_empty(self) -> bool:
        return not self._queue

    def is_pool_full(self) -> bool:
        return len(self._active) >= self._max_procs

    def get_outcomes(self) -> Outcomes:
        """Snapshot of cached outcome records.

        Both sequences are always empty when caching is disabled.
        """
        return self._cache.snapshot()

    async def submit(self, work: Submittable) -> Worker:
        """Queue a worker and attempt admission.

        Args:
            work: A Worker, a WorkerSpec, or a mapping of Worker construction
                  parameters

        Returns:
            The queued worker handle, for direct ``send``/``kill`` calls

        Raises:
            PoolClosedError: If the pool already shut down
            ValidationError: If construction parameters are malformed
            WorkerAlreadyStartedError: If the worker already left CREATED
            WorkerOwnershipError: If the worker belongs to another pool
        """
        if self._closed:
            raise PoolClosedError("Cannot submit to a pool that has shut down")

        worker = self._coerce(work)
        if worker.pool is not None and worker.pool is not self:
            raise WorkerOwnershipError(f"Worker {worker.uid} belongs to another pool")
        if worker.state is not WorkerState.CREATED:
            raise WorkerAlreadyStartedError(
                f"Worker {worker.uid} cannot be submitted: {worker.state}"
            )
        if any(queued is worker for queued in self._queue):
            raise WorkerOwnershipError(f"Worker {worker.uid} is already queued")

        worker.bind_pool(self)
        self._queue.append(worker)
        if self._dying:
            self._logger.warning(
                f"Pool is dying, worker {worker.uid} ({worker.path}) will not run"
            )
        else:
            self._logger.debug(f"Queued worker {worker.uid} ({worker.path})")

        events: list[PoolEvent] = [
            PoolQueuedEvent(
                uid=worker.uid, path=worker.path, queue_size=len(self._queue)
            )
        ]
        events.extend(self._admit())
        await self._publish(events)
        return worker

    def drain(self) -> None:
        """Suspend admission until the active set is empty.

        Idempotent. The barrier clears itself on the next admission attempt
        that finds no active workers.
        """
        if self._draining:
            return
        self._draining = True
        self._logger.info(
            f"Draining pool: {len(self._active)} active, {len(self._queue)} queued"
        )

    async def die(self, reason: str = "requested") -> None:
        """Enter the terminal die state.

        Kills every active worker, admits nothing further, and shuts the pool
        down with a non-zero status once the active set is empty.
        """
        if self._closed:
            return
        events: list[PoolEvent] = []
        victims = self._enter_die(reason, events)
        events.extend(self._check_empty())
        await self._publish(events)
        await self._kill_all(victims)

    async def wait_closed(self) -> int:
        """Wait for terminal shutdown and return the exit status."""
        await self._shutdown.wait()
        return t.cast(int, self._exit_status)

    async def on_outcome(self, outcome: WorkerOutcome) -> None:
        """Account for a worker's terminal outcome.

        The outcome is trusted only if it names a worker in the active set by
        uid, is the very same handle, and the reported pid matches the one
        recorded at spawn. Anything else takes the lost-worker path.
        """
        worker = outcome.worker
        tracked = self._active.get(outcome.tag)
        if tracked is not worker or not worker.verify_identity(
            outcome.pid, outcome.tag
        ):
            await self._lost_worker(outcome)
            return

        del self._active[outcome.tag]
        self._cache.record(outcome)

        events: list[PoolEvent] = []
        victims: list[Worker] = []
        match outcome:
            case WorkerCompleted(code=code):
                self._logger.debug(f"Worker {worker.uid} ({worker.path}) completed")
                events.append(
                    PoolCompletedEvent(
                        uid=worker.uid, path=worker.path, pid=outcome.pid, code=code
                    )
                )
            case WorkerKilled(signal=signal):
                self._logger.debug(f"Worker {worker.uid} ({worker.path}) killed")
                events.append(
                    PoolKilledEvent(
                        uid=worker.uid, path=worker.path, pid=outcome.pid, signal=signal
                    )
                )
            case WorkerFailed(error=error, code=code, signal=signal):
                self._logger.error(f"Worker {worker.uid} failed: {error}")
                events.append(
                    PoolFailedEvent(
                        uid=worker.uid,
                        path=worker.path,
                        pid=outcome.pid,
                        error=ErrorInfo.from_exception(error),
                        code=code,
                        signal=signal,
                    )
                )
                if self._config.die_on_error:
                    victims = self._enter_die(
                        f"worker {worker.uid} failed", events
                    )

        worker.release()
        events.extend(self._admit())
        events.extend(self._check_empty())
        await self._publish(events)
        await self._kill_all(victims)

    def _coerce(self, work: Submittable) -> Worker:
        match work:
            case Worker():
                return work
            case WorkerSpec():
                spec = work
            case Mapping():
                spec = WorkerSpec.parse(**work)
            case _:
                raise ValidationError(
                    f"Expected a Worker, WorkerSpec or mapping, got {type(work).__name__}"
                )
        return Worker.from_spec(
            spec, launcher=self._launcher, logger=self._logger, uids=self._uids
        )

    def _admit(self) -> list[PoolEvent]:
        """Move queued workers into free slots, head first."""
        events: list[PoolEvent] = []
        if self._draining and not self._active:
            self._draining = False
            self._logger.info("Drain complete, resuming admission")

        while (
            len(self._active) < self._max_procs
            and self._queue
            and not self._dying
            and not self._draining
        ):
            worker = self._queue.popleft()
            if worker.is_killed():
                # Killed while queued; never started.
                self._logger.debug(f"Discarding killed worker {worker.uid}")
                worker.release()
                continue
            self._active[worker.uid] = worker
            worker.start()
            self._logger.debug(
                f"Admitted worker {worker.uid} ({worker.path}), "
                f"{len(self._active)}/{self._max_procs} active"
            )
            events.append(
                PoolAdmittedEvent(
                    uid=worker.uid,
                    path=worker.path,
                    active_count=len(self._active),
                )
            )
        return events

    def _enter_die(self, reason: str, events: list[PoolEvent]) -> list[Worker]:
        """Set the die flag once and return the active workers to kill."""
        if self._dying:
            return []
        self._dying = True
        self._logger.warning(f"Pool dying ({reason}), killing {len(self._active)}")
        events.append(PoolDyingEvent(reason=reason, active_count=len(self._active)))
        return list(self._active.values())

    def _check_empty(self) -> list[PoolEvent]:
        if self._closed or self._active:
            return []
        events: list[PoolEvent] = []
        if not self._queue:
            events.append(PoolIdleEvent())
        if self._dying:
            events.append(self._signal_shutdown(1))
        elif not self._queue and self._config.die_on_empty:
            events.append(self._signal_shutdown(0))
        return events

    def _signal_shutdown(self, status: int) -> PoolShutdownEvent:
        self._closed = True
        self._exit_status = status
        self._shutdown.set()
        self._logger.info(f"Pool shut down with status {status}")
        return PoolShutdownEvent(exit_status=status)

    async def _lost_worker(self, outcome: WorkerOutcome) -> None:
        worker = outcome.worker
        error = LostWorkerError(uid=outcome.tag, pid=outcome.pid, path=worker.path)
        self._logger.warning(str(error))
        self.drain()
        events: list[PoolEvent] = [
            PoolLostWorkerEvent(
                uid=outcome.tag,
                path=worker.path,
                pid=outcome.pid,
                error=ErrorInfo.from_exception(error),
            )
        ]
        events.extend(self._admit())
        await self._publish(events)
        if not worker.is_terminal():
            await worker.kill()

    async def _kill_all(self, workers: list[Worker]) -> None:
        if not workers:
            return
        results = await asyncio.gather(
            *(worker.kill(signals.SIGTERM) for worker in workers),
            return_exceptions=True,
        )
        for worker, result in zip(workers, results):
            if isinstance(result, Exception):
                self._logger.opt(exception=result).error(
                    f"Failed to kill worker {worker.uid}"
                )

    async def _publish(self, events: list[PoolEvent]) -> None:
        for event in events:
            await self._emitter.emit(event.event_type, event)
