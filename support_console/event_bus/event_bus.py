"""EventBus implementation for inbound push-channel events."""

import asyncio
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import EventKind, InboundEvent

logger = get_logger(__name__)


EventHandler = Callable[[InboundEvent], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for typed channel events."""

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Subscribe a handler to an event kind."""
        ...

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event kind."""
        ...

    async def publish(self, event: InboundEvent) -> None:
        """Publish an event to the subscribers of its kind."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[EventKind, list[EventHandler]] = {
            kind: [] for kind in EventKind
        }

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        """Subscribe a handler to an event kind."""
        self._subscribers[kind].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event kind."""
        for kind in EventKind:
            self.subscribe(kind, handler)

    async def publish(self, event: InboundEvent) -> None:
        """Publish an event to the subscribers of its kind."""
        handlers = self._subscribers.get(event.kind, [])
        if not handlers:
            logger.debug("No subscribers for %s", event.kind.value)
            return

        # Call all handlers concurrently
        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )

        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error(
                    "Error in %s handler %s: %s",
                    event.kind.value,
                    i,
                    result,
                    exc_info=result,
                )
