"""Contract for launching external processes.

Workers depend only on these interfaces, never on a concrete transport.
"""

import typing as t
from abc import ABC, abstractmethod

from ..domain.worker import SpawnOptions


class BaseProcess(ABC):
    """Handle to one running external process.

    The handle is stamped with the tag of the worker that spawned it, so an
    outcome can be matched to its worker even if the OS recycles the pid.
    """

    @property
    @abstractmethod
    def pid(self) -> int:
        """OS-assigned process id."""
        pass

    @property
    @abstractmethod
    def tag(self) -> int:
        """Tag stamped at spawn time (the worker uid)."""
        pass

    @property
    @abstractmethod
    def connected(self) -> bool:
        """True while the data channel to the process is open."""
        pass

    @property
    @abstractmethod
    def returncode(self) -> int | None:
        """Exit code once the process has exited, negative for signals."""
        pass

    @abstractmethod
    async def send(self, data: t.Any) -> None:
        """Transmit one message to the process."""
        pass

    @abstractmethod
    def messages(self) -> t.AsyncIterator[t.Any]:
        """Iterate messages from the process until its output closes."""
        pass

    @abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its return code."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Gracefully close the data channel."""
        pass

    @abstractmethod
    def send_signal(self, signum: int) -> None:
        """Deliver a signal to the process.

        Raises:
            ProcessLookupError: If the process is already gone
        """
        pass


class BaseLauncher(ABC):
    """Spawns external processes for workers."""

    @abstractmethod
    async def spawn(
        self,
        path: str,
        args: t.Sequence[str],
        options: SpawnOptions,
        *,
        tag: int,
    ) -> BaseProcess:
        """Start the process for ``path`` and return its handle.

        Raises:
            OSError: If the process cannot be started
        """
        pass
