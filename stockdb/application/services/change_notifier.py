"""Change notifier: in-process, synchronous observer list for store changes."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class StoreTopic(str, Enum):
    """What changed. Events carry no delta: subscribers re-read the store."""

    PARTS_CHANGED = "parts_changed"
    PROJECTS_CHANGED = "projects_changed"


Subscriber = Callable[[Any], None]


class ChangeNotifier:
    """Keeps subscriber callbacks per topic and calls them in registration order.

    Delivery is synchronous: ``publish`` returns only after every subscriber
    has run. Subscribers must not call a mutating store operation from inside
    the callback; such re-entrancy is undefined behaviour.
    """

    def __init__(self) -> None:
        self._subscribers: dict[StoreTopic, list[Subscriber]] = {topic: [] for topic in StoreTopic}

    def subscribe(self, topic: StoreTopic, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for ``topic``. Returns a function that unsubscribes it."""
        callbacks = self._subscribers[StoreTopic(topic)]
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def publish(self, topic: StoreTopic, source: Any) -> None:
        """Call every subscriber of ``topic`` with ``source`` (the store handle).

        A failing subscriber is logged and does not stop delivery to the others;
        the store change that triggered the event has already been applied.
        """
        for callback in list(self._subscribers[topic]):
            try:
                callback(source)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, topic.value)

    def clear(self) -> None:
        for callbacks in self._subscribers.values():
            callbacks.clear()

    def subscriber_count(self, topic: StoreTopic | None = None) -> int:
        if topic is not None:
            return len(self._subscribers[topic])
        return sum(len(c) for c in self._subscribers.values())
