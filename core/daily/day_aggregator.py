# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.daily.models import Bar, DayRecord
from core.session.session_state_tracker import PhaseTransition

# ============================================================
# DAY ACCUMULATOR
# ============================================================


@dataclass
class DayAccumulator:
    """
    Working OHLC of the in-progress day. All fields None until the
    day's session opens, and again after it has been finalized.
    """
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.open is not None

    @property
    def hlc3(self) -> Optional[float]:
        if not self.is_open:
            return None
        return (self.high + self.low + self.close) / 3.0

    def clear(self) -> None:
        self.open = None
        self.high = None
        self.low = None
        self.close = None


# ============================================================
# DAY AGGREGATOR
# ============================================================


class DayAggregator:
    """
    Folds in-session bars into the day's OHLC, driven only by the
    session tracker's transitions.
    """

    def __init__(self):
        self._current = DayAccumulator()
        self._session_date: Optional[date] = None
        self._bar_count: int = 0
        self._partial: bool = False

    @property
    def current(self) -> DayAccumulator:
        return self._current

    @property
    def bar_count(self) -> int:
        return self._bar_count

    # ========================================================
    # CORE UPDATE
    # ========================================================
    def apply(
        self,
        transition: PhaseTransition,
        bar: Bar,
        session_date: date,
        partial: bool = False,
    ) -> Optional[DayRecord]:
        """
        Apply one bar. Returns the finalized DayRecord when the
        transition closed a session, else None.
        """
        if transition.repeated:
            return None

        finalized = None

        if transition.session_ended:
            finalized = self._finalize()

        if transition.session_started:
            self._start(bar, session_date, partial)
        elif transition.in_session and self._current.is_open:
            self._update(bar)

        return finalized

    # ========================================================
    # INTERNAL HELPERS
    # ========================================================
    def _start(self, bar: Bar, session_date: date, partial: bool) -> None:
        self._current.open = bar.open
        self._current.high = bar.high
        self._current.low = bar.low
        self._current.close = bar.close

        self._session_date = session_date
        self._bar_count = 1
        self._partial = partial

    def _update(self, bar: Bar) -> None:
        self._current.high = max(self._current.high, bar.high)
        self._current.low = min(self._current.low, bar.low)
        self._current.close = bar.close
        self._bar_count += 1

    def _finalize(self) -> Optional[DayRecord]:
        if not self._current.is_open:
            return None

        record = DayRecord(
            session_date=self._session_date,
            open=self._current.open,
            high=self._current.high,
            low=self._current.low,
            close=self._current.close,
            bar_count=self._bar_count,
            partial=self._partial,
        )

        self._current.clear()
        self._session_date = None
        self._bar_count = 0
        self._partial = False

        return record
