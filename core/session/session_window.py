# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from datetime import time
from typing import Dict, Mapping, Optional, Tuple

from core.clock import Calendar, ExchangeCalendar, Timestamp
from core.daily.config import SESSION_WINDOWS
from core.errors import InvalidArgument
from core.session.session_spec import SessionSpec

ALL_DAY = "24x7"


# ============================================================
# SESSION WINDOW
# ============================================================

def _parse_hhmm(text: str) -> time:
    if len(text) != 4 or not text.isdigit():
        raise InvalidArgument(f"session time must be HHMM, got {text!r}")
    hour, minute = int(text[:2]), int(text[2:])
    if hour > 24 or minute > 59 or (hour == 24 and minute != 0):
        raise InvalidArgument(f"session time out of range: {text!r}")
    if hour == 24:
        return time.max
    return time(hour, minute)


@dataclass(frozen=True)
class SessionWindow:
    """
    Time-of-day windows in exchange time, start inclusive / end exclusive.

    "0930-1600"            regular hours
    "0400-0930,1600-2000"  discontinuous windows
    "1800-1700"            window crossing midnight
    "24x7"                 always in session
    """
    ranges: Tuple[Tuple[time, time], ...]
    always: bool = False

    @classmethod
    def parse(cls, spec: str) -> "SessionWindow":
        spec = (spec or "").strip()
        if not spec:
            raise InvalidArgument("session window must not be empty")
        if spec.lower() == ALL_DAY:
            return cls(ranges=(), always=True)

        ranges = []
        for part in spec.split(","):
            start_text, sep, end_text = part.strip().partition("-")
            if not sep:
                raise InvalidArgument(f"session window needs START-END, got {part!r}")
            start, end = _parse_hhmm(start_text), _parse_hhmm(end_text)
            if start == end:
                raise InvalidArgument(f"session window is empty: {part!r}")
            ranges.append((start, end))

        return cls(ranges=tuple(ranges))

    def contains(self, moment: time) -> bool:
        if self.always:
            return True
        for start, end in self.ranges:
            if start < end:
                if start <= moment < end:
                    return True
            elif moment >= start or moment < end:
                # overnight window
                return True
        return False


# ============================================================
# SESSION MEMBERSHIP ORACLE
# ============================================================

class SessionWindowOracle:
    """
    Default session membership test: answers "is this bar inside the
    named session" from its exchange-local time of day.

    Callable as oracle(timestamp, session_spec) -> bool.
    """

    def __init__(
        self,
        windows: Optional[Mapping[str, str]] = None,
        calendar: Optional[Calendar] = None,
    ):
        if windows is None:
            windows = SESSION_WINDOWS
        self._calendar = calendar or ExchangeCalendar()
        self._windows: Dict[str, SessionWindow] = {
            name: SessionWindow.parse(spec) for name, spec in windows.items()
        }

    def window(self, name: str) -> SessionWindow:
        try:
            return self._windows[name]
        except KeyError:
            raise InvalidArgument(f"unknown session {name!r}") from None

    def __call__(self, timestamp: Timestamp, session: SessionSpec) -> bool:
        window = self.window(session.name)
        return window.contains(self._calendar.to_exchange_time(timestamp).time())
