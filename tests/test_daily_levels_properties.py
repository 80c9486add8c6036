# ============================================================
# IMPORTS
# ============================================================

import random
from collections import OrderedDict
from datetime import datetime, timedelta

import pytest

from core.daily.daily_levels import DailyLevels
from core.daily.models import Bar
from core.session.session_spec import SessionSpec
from core.session.session_window import SessionWindowOracle
from data.fake_bar_generator import FakeBarGenerator


REGULAR = SessionSpec("regular", "5")
ORACLE = SessionWindowOracle({"regular": "0930-1600", "extended": "0400-2000"})
SEEDS = [1, 7, 42]


# ============================================================
# TEST HELPERS
# ============================================================

def stream(seed, days=6, start=datetime(2026, 1, 12, 0, 0)):
    gen = FakeBarGenerator(start=start, timeframe="15", seed=seed)
    return list(gen.bars(days * 24 * 4))


def brute_force_days(bars, session):
    """
    Reference: group in-session bars by calendar date with a full rescan.
    """
    days = OrderedDict()
    for b in bars:
        if ORACLE(b.timestamp, session):
            days.setdefault(b.timestamp.date(), []).append(b)

    return [
        (d, group[0].open, max(x.high for x in group), min(x.low for x in group), group[-1].close)
        for d, group in days.items()
    ]


# ============================================================
# TESTS — INVARIANTS
# ============================================================

@pytest.mark.parametrize("seed", SEEDS)
def test_finalizations_match_session_ends(seed, logger):
    levels = DailyLevels(REGULAR, "15", days_prior=3, session_oracle=ORACLE, logger=logger)
    seen_dates = []

    for b in stream(seed):
        record = levels.advance(b)
        if record is not None:
            seen_dates.append(record.session_date)
        assert levels.finalized_count == levels.tracker.session_end_count

    assert len(seen_dates) == len(set(seen_dates))
    assert len(seen_dates) == 6


@pytest.mark.parametrize("seed", SEEDS)
def test_buffer_never_exceeds_capacity(seed, logger):
    levels = DailyLevels(REGULAR, "15", days_prior=2, session_oracle=ORACLE, logger=logger)

    for b in stream(seed):
        levels.advance(b)
        assert levels.history.size() <= levels.history.capacity == 3


@pytest.mark.parametrize("seed", SEEDS)
def test_warm_up_is_monotonic(seed, logger):
    levels = DailyLevels(REGULAR, "15", days_prior=4, session_oracle=ORACLE, logger=logger)
    populated = set()

    for b in stream(seed):
        levels.advance(b)
        for days_prior in range(1, 5):
            value = levels.close(days_prior)
            if days_prior in populated:
                assert value is not None
            elif value is not None:
                populated.add(days_prior)

    assert populated == {1, 2, 3, 4}


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("session_name", ["regular", "extended"])
def test_streaming_matches_full_rescan(seed, session_name, logger):
    session = SessionSpec(session_name, "15")
    bars = stream(seed)
    levels = DailyLevels(session, "15", days_prior=5, session_oracle=ORACLE, logger=logger)

    for b in bars:
        levels.advance(b)

    expected = brute_force_days(bars, session)[-6:]
    actual = [
        (r.session_date, r.open, r.high, r.low, r.close)
        for r in levels.history.snapshot()
    ]
    assert actual == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_today_open_stays_na_until_session_opens(seed, logger):
    levels = DailyLevels(REGULAR, "15", days_prior=1, session_oracle=ORACLE, logger=logger)

    for b in stream(seed, days=3):
        levels.advance(b)
        if ORACLE(b.timestamp, REGULAR):
            assert levels.open(0) is not None
        else:
            assert levels.open(0) is None


def test_daily_timeframe_is_pure_lag(logger):
    rng = random.Random(3)
    levels = DailyLevels(REGULAR, "D", days_prior=5, logger=logger)
    raw = []

    for i in range(20):
        o = rng.uniform(90, 110)
        b = Bar(
            timestamp=datetime(2026, 1, 1) + timedelta(days=i),
            open=o,
            high=o + rng.uniform(0, 2),
            low=o - rng.uniform(0, 2),
            close=o + rng.uniform(-1, 1),
        )
        raw.append(b)
        levels.advance(b)

        for n in range(0, 6):
            if n < len(raw):
                assert levels.open(n) == raw[-1 - n].open
                assert levels.low(n) == raw[-1 - n].low
            else:
                assert levels.open(n) is None
