"""In-process event emitter.

Each Pool and each Worker owns its own emitter, there is no global one.
"""

import asyncio
import inspect
import typing as t

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler
from .subscription import Subscription

if t.TYPE_CHECKING:
    import loguru

WILDCARD = "*"


class EventEmitter(BaseEmitter):
    """Dispatches events to sync and async handlers.

    Handler failures are logged and never propagate to the emitting code, so
    a misbehaving subscriber cannot corrupt pool or worker state.

    Sync handlers run in subscription order. Coroutines (from async handlers,
    or returned by sync callables such as lambdas wrapping async methods) are
    awaited together once all sync handlers have run.
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._logger = logger
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event_type: str, handler: EventHandler) -> Subscription:
        self._handlers.setdefault(event_type, []).append(handler)
        return Subscription(self, event_type, handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        try:
            self._handlers.get(event_type, []).remove(handler)
        except ValueError:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")

    def has_listeners(self, event_type: str) -> bool:
        return bool(self._handlers.get(event_type) or self._handlers.get(WILDCARD))

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        handlers = list(self._handlers.get(event_type, ()))
        if event_type != WILDCARD:
            handlers.extend(self._handlers.get(WILDCARD, ()))

        pending: list[t.Awaitable[t.Any]] = []
        for handler in handlers:
            try:
                result = handler(event_data)
            except Exception:
                self._logger.exception(f"Error in handler for {event_type}")
                continue
            if inspect.isawaitable(result):
                pending.append(result)

        if not pending:
            return

        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                self._logger.opt(exception=result).error(
                    f"Error in async handler for {event_type}"
                )
