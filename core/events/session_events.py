# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from datetime import date

from core.clock import Timestamp
from core.daily.models import DayRecord
from core.session.session_spec import SessionSpec

# ============================================================
# SESSION EVENTS
# ============================================================


@dataclass
class SessionStartEvent:
    """
    Emitted once per day and session view, on the first in-session bar.

    today_open is the opening price captured by the day aggregator.
    """
    timestamp: Timestamp
    session: SessionSpec
    session_date: date
    today_open: float


@dataclass
class SessionEndEvent:
    """
    Emitted once per finalized day, on the bar that closed the session
    (or on the first bar of the next day when the date rolled in session).

    The attached DayRecord is the immutable OHLC pushed into history.
    """
    timestamp: Timestamp
    session: SessionSpec
    record: DayRecord
