# ============================================================
# IMPORTS
# ============================================================

from collections import defaultdict
from typing import Any, Callable, Dict, List


# ============================================================
# EVENT BUS
# ============================================================

class EventBus:
    """
    Synchronous topic-keyed publish/subscribe.
    Handlers run in subscription order on the publisher's call stack.
    """

    def __init__(self):
        # topic -> list of handlers
        self._subscribers: Dict[str, List[Callable]] = defaultdict(list)

    # ========================================================
    # SUBSCRIPTION API
    # ========================================================

    def subscribe(self, topic: str, handler: Callable) -> None:
        """
        Register a handler for a given topic.
        """
        self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: Callable) -> None:
        handlers = self._subscribers.get(topic, [])
        if handler in handlers:
            handlers.remove(handler)

    # ========================================================
    # PUBLISH API
    # ========================================================

    def publish(self, topic: str, payload: Any) -> None:
        """
        Publish a payload to all handlers subscribed to the topic.
        """
        handlers = self._subscribers.get(topic, [])

        for handler in list(handlers):
            handler(payload)
