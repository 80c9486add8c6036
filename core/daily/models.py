# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.clock import Timestamp

# ============================================================
# BAR
# ============================================================

@dataclass(frozen=True)
class Bar:
    """
    One closed price bar. The only input to the daily-levels engine.
    """
    timestamp: Timestamp
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    symbol: str = ""

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3.0

# ============================================================
# DAY RECORD
# ============================================================

@dataclass(frozen=True)
class DayRecord:
    """
    Finalized OHLC of one calendar day's session.

    - bar_count: in-session bars folded into the record
    - partial: first day of a stream whose first bar was already in
      session, so open/high/low may only cover the observed tail of the
      day. A stream that starts exactly on the open bar is flagged too;
      a single bar cannot tell a fresh open from a mid-session join.
    """
    session_date: date
    open: float
    high: float
    low: float
    close: float
    bar_count: int
    partial: bool = False

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3.0


def field_of(record, name: str) -> Optional[float]:
    """Named OHLC field of a Bar / DayRecord, None when there is no record."""
    if record is None:
        return None
    return getattr(record, name)
