"""Custom exceptions for crew."""


class CrewError(Exception):
    """Base exception for crew errors."""

    pass


class ValidationError(CrewError):
    """Raised when worker or pool construction arguments are malformed.

    Raised synchronously at construction/submit time. The worker is never
    created or enqueued.
    """

    pass


class WorkerError(CrewError):
    """Base exception for worker lifecycle errors."""

    pass


class UnboundError(WorkerError):
    """Raised when a worker is started without a bound pool."""

    pass


class WorkerAlreadyStartedError(WorkerError):
    """Raised when an operation requires a worker that has not started yet."""

    pass


class WorkerOwnershipError(WorkerError):
    """Raised when a worker that already belongs to a pool is submitted again."""

    pass


class PoolError(CrewError):
    """Base exception for pool errors."""

    pass


class PoolClosedError(PoolError):
    """Raised when work is submitted to a pool that already shut down."""

    pass


class LostWorkerError(PoolError):
    """Describes an outcome for a worker the pool no longer tracks as active.

    Never raised across the outcome boundary: the pool logs it and publishes
    it on its emitter, then fails safe (drain and kill).
    """

    def __init__(self, *, uid: int, pid: int | None, path: str) -> None:
        self.uid = uid
        self.pid = pid
        self.path = path
        super().__init__(
            f"Lost worker {uid} (pid {pid}) for {path}: "
            "outcome does not match any active worker"
        )


class ProcessError(WorkerError):
    """The external process reported a transport or runtime fault.

    Covers failed spawns and a broken data channel. Delivered through the
    outcome channel, never raised to the caller.
    """

    def __init__(self, message: str, *, path: str) -> None:
        self.path = path
        super().__init__(message)


class ProcessExitError(ProcessError):
    """The external process exited with a non-zero code."""

    def __init__(
        self,
        message: str,
        *,
        path: str,
        code: int,
        signal: str | None = None,
    ) -> None:
        self.code = code
        self.signal = signal
        super().__init__(message, path=path)


class WorkerKilledError(WorkerError):
    """Outcome of a worker whose process was terminated through ``kill()``."""

    def __init__(self, *, path: str, signal: str | None) -> None:
        self.path = path
        self.signal = signal
        super().__init__(f"Worker killed ({signal or 'no signal'}) File: {path}")
