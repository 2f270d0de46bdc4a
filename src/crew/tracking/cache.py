"""In-memory outcome cache."""

import typing as t
from collections import deque

from ..domain.outcomes import (
    OutcomeRecord,
    Outcomes,
    WorkerCompleted,
    WorkerOutcome,
)
from ..infrastructure.logging import get_logger
from .base import BaseOutcomeCache

if t.TYPE_CHECKING:
    import loguru


class OutcomeCache(BaseOutcomeCache):
    """Keeps compact records of completed and errored workers.

    Records hold identity, path and result only, so finished workers can be
    garbage collected. With ``limit`` set, each list keeps only its newest
    ``limit`` records.

    Usage:
        cache = OutcomeCache()
        pool = Pool(cache=cache)
        ...
        for record in cache.snapshot().errors:
            print(record.path, record.error.message)
    """

    def __init__(
        self,
        limit: int | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        if limit is not None and limit < 1:
            raise ValueError("limit must be at least 1")
        self._completed: deque[OutcomeRecord] = deque(maxlen=limit)
        self._errors: deque[OutcomeRecord] = deque(maxlen=limit)
        self._logger = logger

    def record(self, outcome: WorkerOutcome) -> None:
        entry = OutcomeRecord.from_outcome(outcome)
        if isinstance(outcome, WorkerCompleted):
            self._completed.append(entry)
        else:
            self._errors.append(entry)
        self._logger.trace(f"Cached outcome for worker {entry.uid}")

    def snapshot(self) -> Outcomes:
        return Outcomes(completed=tuple(self._completed), errors=tuple(self._errors))

    def __len__(self) -> int:
        return len(self._completed) + len(self._errors)
