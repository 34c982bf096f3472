"""In-process publish/subscribe for state change events."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

NOTIFICATIONS_UPDATED = "notifications.updated"
MESSAGE_SENT = "message.sent"
MESSAGES_READ = "messages.read"
REVIEW_CREATED = "review.created"
DRAFTS_UPDATED = "drafts.updated"
WALLET_UPDATED = "wallet.updated"
ESCROW_UPDATED = "escrow.updated"

Handler = Callable[[str, dict[str, Any]], Union[None, Awaitable[None]]]


class EventBus:
    """Fire-and-forget broadcast to whoever is subscribed at publish time."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(event, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:  # pylint: disable=broad-except
                logger.exception("Event handler for %s failed", event)

    def subscriber_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))


class EventOutbox:
    """Holds events published during a unit of work until it commits.

    Services publish into the outbox exactly as they would into the bus.
    ``flush`` delivers the held events in publish order once the data they
    describe is durable; ``discard`` drops them when the work is rolled back.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._pending: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        self._pending.append((event, payload))

    async def flush(self) -> None:
        pending, self._pending = self._pending, []
        for event, payload in pending:
            await self._bus.publish(event, payload)

    def discard(self) -> None:
        self._pending.clear()


event_bus = EventBus()


__all__ = [
    "EventBus",
    "EventOutbox",
    "event_bus",
    "NOTIFICATIONS_UPDATED",
    "MESSAGE_SENT",
    "MESSAGES_READ",
    "REVIEW_CREATED",
    "DRAFTS_UPDATED",
    "WALLET_UPDATED",
    "ESCROW_UPDATED",
]
