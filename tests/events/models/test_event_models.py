"""Tests for event models."""

from datetime import timezone

import pydantic
import pytest

from crew.domain.outcomes import ErrorInfo
from crew.domain.worker import WorkerState
from crew.events import (
    BaseEvent,
    PoolAdmittedEvent,
    PoolDyingEvent,
    PoolFailedEvent,
    PoolIdleEvent,
    PoolShutdownEvent,
    WorkerExitEvent,
    WorkerMessageEvent,
    WorkerTerminatedEvent,
)


class TestBaseEvent:
    def test_occurred_at_is_utc(self):
        event = BaseEvent()

        assert event.occurred_at.tzinfo == timezone.utc

    def test_events_are_frozen(self):
        event = PoolIdleEvent()

        with pytest.raises(pydantic.ValidationError):
            event.event_type = "other"


class TestEventTypes:
    @pytest.mark.parametrize(
        "event, expected",
        [
            (PoolAdmittedEvent(uid=1, path="a.py", active_count=1), "pool.admitted"),
            (PoolDyingEvent(reason="requested", active_count=0), "pool.dying"),
            (PoolIdleEvent(), "pool.idle"),
            (PoolShutdownEvent(exit_status=0), "pool.shutdown"),
            (WorkerMessageEvent(uid=1, path="a.py", message="hi"), "worker.message"),
            (
                WorkerExitEvent(uid=1, path="a.py", state=WorkerState.SUCCEEDED),
                "worker.exit",
            ),
            (WorkerTerminatedEvent(uid=1, path="a.py"), "worker.terminated"),
        ],
    )
    def test_event_type_defaults(self, event, expected):
        assert event.event_type == expected

    def test_admitted_active_count_must_be_non_negative(self):
        with pytest.raises(pydantic.ValidationError):
            PoolAdmittedEvent(uid=1, path="a.py", active_count=-1)

    def test_failed_event_serialises_error(self):
        error = ErrorInfo.from_exception(RuntimeError("bad exit"))
        event = PoolFailedEvent(uid=3, path="a.py", pid=42, error=error, code=1)

        dumped = event.model_dump(mode="json")

        assert dumped["error"] == {
            "exc_type": "builtins.RuntimeError",
            "message": "bad exit",
            "traceback": None,
        }
        assert dumped["code"] == 1
        assert dumped["event_type"] == "pool.failed"
