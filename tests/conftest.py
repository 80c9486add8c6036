# ============================================================
# IMPORTS
# ============================================================

import pytest
from datetime import datetime
from typing import Any, Callable, Dict, List

from core.daily.models import Bar

# ============================================================
# TEST EVENT BUS & LOGGER (TEST HELPERS)
# ============================================================

class TestEventBus:
    """
    Minimal in-memory EventBus used for unit tests.
    - subscribe(topic, handler)
    - publish(topic, payload): dispatches to handlers of that topic
    Also records every publish in order, for assertions.
    """
    __test__ = False

    def __init__(self):
        self._subs: Dict[str, List[Callable]] = {}
        self.published: List[tuple] = []

    def subscribe(self, topic: str, handler: Callable):
        self._subs.setdefault(topic, []).append(handler)

    def publish(self, topic: str, payload: Any):
        self.published.append((topic, payload))
        for h in self._subs.get(topic, []):
            h(payload)

    def payloads(self, topic: str) -> List[Any]:
        return [p for t, p in self.published if t == topic]


class TestLogger:
    """
    Simple test logger capturing messages for assertions / debug.
    Methods: info(msg, **kwargs), debug(msg), warning(msg), error(msg)
    """
    __test__ = False

    def __init__(self):
        self.records = []

    def info(self, msg, **kwargs):
        self.records.append(("INFO", msg, kwargs))

    def debug(self, msg, **kwargs):
        self.records.append(("DEBUG", msg, kwargs))

    def warning(self, msg, **kwargs):
        self.records.append(("WARNING", msg, kwargs))

    def error(self, msg, **kwargs):
        self.records.append(("ERROR", msg, kwargs))

    def messages(self, level: str = "INFO") -> List[str]:
        return [m for lvl, m, _ in self.records if lvl == level]


# ============================================================
# PYTEST FIXTURES
# ============================================================

@pytest.fixture
def event_bus():
    """
    Reusable EventBus instance for a test function.
    """
    return TestEventBus()

@pytest.fixture
def logger():
    """
    Reusable TestLogger instance for a test function.
    """
    return TestLogger()

@pytest.fixture
def event_bus_factory():
    """
    Factory that returns a fresh EventBus (for deterministic isolation tests).
    """
    return lambda: TestEventBus()

@pytest.fixture
def logger_factory():
    """
    Factory that returns a fresh TestLogger.
    """
    return lambda: TestLogger()

@pytest.fixture
def make_bar():
    """
    Bar factory: make_bar(day, hour, minute, o, h, l, c) on January 2026.
    """
    def _make(day, hour, minute, o, h, l, c):
        return Bar(
            timestamp=datetime(2026, 1, day, hour, minute),
            open=o,
            high=h,
            low=l,
            close=c,
        )
    return _make
