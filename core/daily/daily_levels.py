# ============================================================
# IMPORTS
# ============================================================

from datetime import timedelta
from typing import Callable, List, Optional, Union

from core.clock import Calendar, ExchangeCalendar, Timestamp
from core.daily.config import DAILY_LEVELS_CFG
from core.daily.day_aggregator import DayAccumulator, DayAggregator
from core.daily.models import Bar, DayRecord, field_of
from core.daily.rolling_history import RollingHistoryBuffer
from core.errors import BarOrderError, InvalidArgument
from core.logger import Logger
from core.session.session_spec import SessionSpec
from core.session.session_state_tracker import PhaseTransition, SessionStateTracker
from core.timeframe import Timeframe

SessionOracle = Callable[[Timestamp, SessionSpec], bool]


# ============================================================
# DAILY LEVELS FACADE
# ============================================================

class DailyLevels:
    """
    Public query surface for open/high/low/close of the current day and
    of the retained finalized days (`days_prior + 1` of them), for one
    session view.

    Sub-day charts run the session tracker and day aggregator.
    Daily charts delegate to the raw bar series lagged by N bars.
    Weekly / monthly / unsupported charts answer None to everything.

    None means "not available yet" and is never an error. Invalid
    arguments raise InvalidArgument without touching any state.
    """

    # ========================================================
    # SETUP
    # ========================================================

    def __init__(
        self,
        session: SessionSpec,
        timeframe: Union[Timeframe, str],
        days_prior: Optional[int] = None,
        session_oracle: Optional[SessionOracle] = None,
        calendar: Optional[Calendar] = None,
        logger: Optional[Logger] = None,
    ):
        if days_prior is None:
            days_prior = DAILY_LEVELS_CFG["days_prior"]
        if days_prior < 0:
            raise InvalidArgument(f"days_prior must be >= 0, got {days_prior}")

        if isinstance(timeframe, str):
            timeframe = Timeframe.parse(timeframe)

        self._session = session
        self._timeframe = timeframe
        self._days_prior = days_prior
        self._oracle = session_oracle
        self._calendar = calendar or ExchangeCalendar(
            timedelta(minutes=DAILY_LEVELS_CFG["utc_offset_minutes"])
        )
        self._logger = logger or Logger()

        # sub-day state
        self._tracker = SessionStateTracker()
        self._aggregator = DayAggregator()
        self._history: RollingHistoryBuffer[DayRecord] = RollingHistoryBuffer(days_prior + 1)
        self._last_transition: Optional[PhaseTransition] = None
        self._finalized_count = 0

        # daily state: raw bars, index 0 = current bar
        self._bars: RollingHistoryBuffer[Bar] = RollingHistoryBuffer(days_prior + 1)
        self._last_daily_timestamp: Optional[Timestamp] = None

        self._logger.info(
            "[DAILY] Levels initialized",
            session=str(session),
            timeframe=str(timeframe),
            days_prior=days_prior,
        )

    # --------------------------------------------------------
    # READ-ONLY STATE
    # --------------------------------------------------------

    @property
    def session(self) -> SessionSpec:
        return self._session

    @property
    def timeframe(self) -> Timeframe:
        return self._timeframe

    @property
    def days_prior(self) -> int:
        return self._days_prior

    @property
    def tracker(self) -> SessionStateTracker:
        return self._tracker

    @property
    def history(self) -> RollingHistoryBuffer:
        """Finalized days on sub-day charts, raw bars on daily charts."""
        if self._timeframe.is_daily:
            return self._bars
        return self._history

    @property
    def current(self) -> DayAccumulator:
        return self._aggregator.current

    @property
    def last_transition(self) -> Optional[PhaseTransition]:
        return self._last_transition

    @property
    def finalized_count(self) -> int:
        return self._finalized_count

    # ========================================================
    # DRIVING
    # ========================================================

    def advance(self, bar: Bar, in_session: Optional[bool] = None) -> Optional[DayRecord]:
        """
        Feed one closed bar. Call exactly once per bar, in timestamp order.

        Returns the DayRecord finalized by this bar, if any.
        """
        if self._timeframe.is_daily:
            self._advance_daily(bar)
            return None

        if not self._timeframe.is_sub_day:
            return None

        if in_session is None:
            if self._oracle is None:
                raise InvalidArgument(
                    f"no in_session flag and no session oracle for {self._session}"
                )
            in_session = self._oracle(bar.timestamp, self._session)

        session_date = self._calendar.date_of(bar.timestamp)

        transition = self._tracker.advance(bar.timestamp, session_date, in_session)
        self._last_transition = transition

        if transition.repeated:
            return None

        # only the stream's first session can have started before we saw it
        partial = (
            self._tracker.first_session_partial
            and self._tracker.session_end_count == 0
        )

        finalized = self._aggregator.apply(transition, bar, session_date, partial=partial)

        if finalized is not None:
            self._history.push(finalized)
            self._finalized_count += 1
            self._logger.info(
                "[DAILY] Day finalized",
                session=str(self._session),
                date=finalized.session_date,
                open=finalized.open,
                high=finalized.high,
                low=finalized.low,
                close=finalized.close,
                bars=finalized.bar_count,
            )

        if transition.session_started:
            self._logger.debug(
                "[DAILY] Session opened",
                session=str(self._session),
                date=session_date,
                open=bar.open,
            )

        return finalized

    def _advance_daily(self, bar: Bar) -> None:
        last = self._last_daily_timestamp
        if last is not None:
            if bar.timestamp < last:
                raise BarOrderError(
                    f"bar timestamp {bar.timestamp} is older than previous bar {last}"
                )
            if bar.timestamp == last:
                return

        self._last_daily_timestamp = bar.timestamp
        self._bars.push(bar)

    # ========================================================
    # SCALAR QUERIES
    # ========================================================

    def open(self, days_prior: int = 0) -> Optional[float]:
        self._check_days_prior(days_prior)
        return self._value("open", days_prior)

    def high(self, days_prior: int = 0) -> Optional[float]:
        self._check_days_prior(days_prior)
        return self._value("high", days_prior)

    def low(self, days_prior: int = 0) -> Optional[float]:
        self._check_days_prior(days_prior)
        return self._value("low", days_prior)

    def close(self, days_prior: int = 0) -> Optional[float]:
        self._check_days_prior(days_prior)
        return self._value("close", days_prior)

    def hlc3(self, days_prior: int = 0, extra_forward: int = 0) -> Optional[float]:
        """
        Typical price of a day, or of the window [days_prior - extra_forward,
        days_prior] using its extrema and the close of its most recent day.
        """
        self._check_window(days_prior, extra_forward)
        if extra_forward == 0:
            return self._value("hlc3", days_prior)

        high = self._extreme("high", days_prior, extra_forward, max)
        low = self._extreme("low", days_prior, extra_forward, min)
        close = self._value("close", days_prior - extra_forward)
        if high is None or low is None or close is None:
            return None
        return (high + low + close) / 3.0

    def high_between(self, days_prior: int, extra_forward: int) -> Optional[float]:
        self._check_window(days_prior, extra_forward)
        return self._extreme("high", days_prior, extra_forward, max)

    def low_between(self, days_prior: int, extra_forward: int) -> Optional[float]:
        self._check_window(days_prior, extra_forward)
        return self._extreme("low", days_prior, extra_forward, min)

    def record(self, days_prior: int) -> Optional[DayRecord]:
        """
        Finalized DayRecord `days_prior` days back (sub-day charts only).
        The in-progress day (0) has no record.
        """
        self._check_days_prior(days_prior)
        if not self._timeframe.is_sub_day or days_prior == 0:
            return None
        return self._history.get(days_prior - 1)

    # ========================================================
    # ARRAY QUERIES (oldest first)
    # ========================================================

    def open_array(self) -> Optional[List[float]]:
        return self._array("open")

    def high_array(self) -> Optional[List[float]]:
        return self._array("high")

    def low_array(self) -> Optional[List[float]]:
        return self._array("low")

    def close_array(self) -> Optional[List[float]]:
        return self._array("close")

    def hlc3_array(self) -> Optional[List[float]]:
        return self._array("hlc3")

    # ========================================================
    # INTERNAL HELPERS
    # ========================================================

    def _check_days_prior(self, days_prior: int) -> None:
        if days_prior < 0:
            raise InvalidArgument(f"days_prior must be >= 0, got {days_prior}")

    def _check_window(self, days_prior: int, extra_forward: int) -> None:
        self._check_days_prior(days_prior)
        if extra_forward < 0 or extra_forward > days_prior:
            raise InvalidArgument(
                f"extra_forward must be within [0, {days_prior}], got {extra_forward}"
            )

    def _value(self, name: str, days_prior: int) -> Optional[float]:
        if self._timeframe.is_daily:
            return field_of(self._bars.get(days_prior), name)
        if not self._timeframe.is_sub_day:
            return None
        if days_prior == 0:
            return getattr(self._aggregator.current, name)
        return field_of(self._history.get(days_prior - 1), name)

    def _extreme(self, name: str, days_prior: int, extra_forward: int, pick) -> Optional[float]:
        values = []
        for offset in range(days_prior - extra_forward, days_prior + 1):
            value = self._value(name, offset)
            if value is None:
                return None
            values.append(value)
        return pick(values)

    def _array(self, name: str) -> Optional[List[float]]:
        if not self._timeframe.supports_daily_levels:
            return None
        return [getattr(item, name) for item in self.history.snapshot()]
