# ============================================================
# IMPORTS
# ============================================================

from datetime import date, datetime, timedelta, timezone
from typing import Union

Timestamp = Union[datetime, int, float]


# ============================================================
# CALENDAR INTERFACE
# ============================================================
class Calendar:
    """
    Maps a bar timestamp to exchange-local wall time and calendar date.
    """
    def to_exchange_time(self, timestamp: Timestamp) -> datetime:
        raise NotImplementedError

    def date_of(self, timestamp: Timestamp) -> date:
        return self.to_exchange_time(timestamp).date()


# ============================================================
# EXCHANGE CALENDAR (FIXED UTC OFFSET)
# ============================================================
class ExchangeCalendar(Calendar):
    """
    Calendar with a fixed UTC offset for the exchange.

    - int / float timestamps are epoch milliseconds (UTC)
    - tz-aware datetimes are converted from UTC
    - naive datetimes are taken as exchange-local already
    """
    def __init__(self, utc_offset: timedelta = timedelta(0)):
        self._utc_offset = utc_offset

    @property
    def utc_offset(self) -> timedelta:
        return self._utc_offset

    def to_exchange_time(self, timestamp: Timestamp) -> datetime:
        if isinstance(timestamp, datetime):
            if timestamp.tzinfo is None:
                return timestamp
            utc = timestamp.astimezone(timezone.utc)
        else:
            utc = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)

        return (utc + self._utc_offset).replace(tzinfo=None)


# ============================================================
# REPLAY CLOCK (CONTROLLED TIME)
# ============================================================
class ReplayClock:
    """
    Clock for replay/backtesting.
    Time advances only when explicitly set or advanced.
    """
    def __init__(self, start_time: datetime):
        self._current_time = start_time

    def now(self) -> datetime:
        return self._current_time

    def set(self, new_time: datetime) -> None:
        self._current_time = new_time

    def advance(self, delta: timedelta) -> None:
        """
        Advance time by a timedelta.
        """
        self._current_time += delta
