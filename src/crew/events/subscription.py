"""Handle returned by ``on()`` for unsubscribing later."""

import typing as t

if t.TYPE_CHECKING:
    from .base import BaseEmitter, EventHandler


class Subscription:
    """A single handler registration on an emitter.

    Usage:
        sub = pool.emitter.on("pool.idle", handler)
        ...
        sub.unsubscribe()
    """

    def __init__(
        self, emitter: "BaseEmitter", event_type: str, handler: "EventHandler"
    ) -> None:
        self._emitter = emitter
        self._event_type = event_type
        self._handler = handler
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Remove the handler. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._emitter.off(self._event_type, self._handler)
