"""In-process publish/subscribe for ride events."""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], None]


class EventBus:
    """Delivers events synchronously to subscribers in registration order.

    A subscriber that raises is logged and skipped; the remaining subscribers
    still receive the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[type[BaseModel] | None, Subscriber]] = []

    def subscribe(
        self,
        callback: Subscriber,
        event_type: type[BaseModel] | None = None,
    ) -> Callable[[], None]:
        """Register a callback, optionally for one event class only.

        Returns a callable that removes the subscription.
        """
        entry = (event_type, callback)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, event: BaseModel) -> None:
        for event_type, callback in list(self._subscribers):
            if event_type is not None and not isinstance(event, event_type):
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber failed for %s", type(event).__name__)

    def clear(self) -> None:
        self._subscribers.clear()
