# ============================================================
# IMPORTS
# ============================================================

from datetime import datetime

import pytest

from core.daily.daily_levels_processor import DailyLevelsProcessor
from core.daily.models import Bar
from core.errors import InvalidArgument
from core.event_bus import EventBus
from core.events.session_events import SessionEndEvent, SessionStartEvent
from core.session.session_spec import SessionSpec
from core.session.session_window import SessionWindowOracle


REGULAR = SessionSpec("regular", "1")
EXTENDED = SessionSpec("extended", "1")
ORACLE = SessionWindowOracle({"regular": "0930-1600", "extended": "0400-2000"})


# ============================================================
# TEST HELPERS
# ============================================================

def bar(day, hour, minute, o, h, l, c):
    return Bar(timestamp=datetime(2026, 1, day, hour, minute), open=o, high=h, low=l, close=c)


def two_days():
    return [
        bar(12, 5, 0, 99, 100, 98, 99),        # extended only
        bar(12, 9, 30, 100, 110, 95, 105),     # both
        bar(12, 15, 45, 105, 112, 104, 110),   # both
        bar(12, 16, 0, 110, 111, 109, 110),    # extended only
        bar(12, 20, 0, 110, 110, 110, 110),    # neither
        bar(13, 9, 30, 120, 121, 119, 120),    # both
    ]


def make_processor(event_bus, logger):
    processor = DailyLevelsProcessor(event_bus, logger, timeframe="15", session_oracle=ORACLE)
    processor.register(REGULAR, days_prior=2)
    processor.register(EXTENDED, days_prior=2)
    return processor


# ============================================================
# TESTS — EVENT-DRIVEN DAILY LEVELS
# ============================================================

def test_bar_closed_events_drive_every_session_view(event_bus, logger):
    processor = make_processor(event_bus, logger)

    for b in two_days():
        event_bus.publish("BarClosedEvent", b)

    regular = processor.levels(REGULAR)
    extended = processor.levels(EXTENDED)

    assert (regular.open(1), regular.high(1), regular.low(1), regular.close(1)) == (100, 112, 95, 110)
    assert (extended.open(1), extended.high(1), extended.low(1), extended.close(1)) == (99, 112, 95, 110)
    assert regular.open(0) == extended.open(0) == 120


def test_session_events_published_per_view(event_bus, logger):
    make_processor(event_bus, logger)

    for b in two_days():
        event_bus.publish("BarClosedEvent", b)

    starts = event_bus.payloads("SessionStartEvent")
    ends = event_bus.payloads("SessionEndEvent")

    assert all(isinstance(e, SessionStartEvent) for e in starts)
    assert all(isinstance(e, SessionEndEvent) for e in ends)
    assert [(e.session, e.session_date.day) for e in starts] == [
        (EXTENDED, 12), (REGULAR, 12), (REGULAR, 13), (EXTENDED, 13),
    ]
    assert [(e.session, e.record.close) for e in ends] == [(REGULAR, 110), (EXTENDED, 110)]
    assert starts[1].today_open == 100


def test_processor_is_deterministic(event_bus_factory, logger_factory):
    def run_once():
        bus = event_bus_factory()
        make_processor(bus, logger_factory())
        for b in two_days():
            bus.publish("BarClosedEvent", b)
        return [(topic, e.timestamp, e.session) for topic, e in bus.published if topic != "BarClosedEvent"]

    assert run_once() == run_once()


def test_register_same_view_returns_existing(event_bus, logger):
    processor = make_processor(event_bus, logger)

    assert processor.register(REGULAR) is processor.levels(REGULAR)
    assert processor.register(REGULAR, days_prior=2) is processor.levels(REGULAR)
    assert processor.sessions == [REGULAR, EXTENDED]

    with pytest.raises(InvalidArgument):
        processor.register(REGULAR, days_prior=5)


def test_unknown_view_rejected(event_bus, logger):
    processor = make_processor(event_bus, logger)

    with pytest.raises(InvalidArgument):
        processor.levels(SessionSpec("overnight", "1"))


def test_late_registration_is_logged(event_bus, logger):
    processor = make_processor(event_bus, logger)
    event_bus.publish("BarClosedEvent", two_days()[0])

    processor.register(SessionSpec("24x7", "1"))

    assert any("mid-stream" in m for m in logger.messages("WARNING"))


def test_closed_processor_stops_consuming_bars(logger):
    bus = EventBus()
    processor = make_processor(bus, logger)
    stream = two_days()

    for b in stream[:3]:
        bus.publish("BarClosedEvent", b)
    processor.close()
    for b in stream[3:]:
        bus.publish("BarClosedEvent", b)

    regular = processor.levels(REGULAR)
    assert regular.open(0) == 100
    assert regular.high(0) == 112
    assert regular.finalized_count == 0
    assert regular.tracker.last_date.day == 12
    assert "[SESSION] Daily levels processor closed" in logger.messages("INFO")
