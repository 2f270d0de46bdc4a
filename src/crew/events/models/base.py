"""Base event model."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseEvent(BaseModel):
    """Immutable base for every event published by crew."""

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(
        default_factory=_utc_now, description="When the event happened (UTC)"
    )
    event_type: str = Field(default="base", description="Event type identifier")
