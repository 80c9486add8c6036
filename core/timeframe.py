# ============================================================
# IMPORTS
# ============================================================

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from core.errors import InvalidArgument


# ============================================================
# TIMEFRAME CLASS
# ============================================================

class TimeframeClass(Enum):
    SUB_DAY_MINUTES = "minutes"
    SUB_DAY_SECONDS = "seconds"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    UNSUPPORTED = "unsupported"


_RESOLUTION_RE = re.compile(r"^(\d*)([SDWM]?)$")

_SUFFIX_TO_CLASS = {
    "": TimeframeClass.SUB_DAY_MINUTES,
    "S": TimeframeClass.SUB_DAY_SECONDS,
    "D": TimeframeClass.DAILY,
    "W": TimeframeClass.WEEKLY,
    "M": TimeframeClass.MONTHLY,
}


# ============================================================
# TIMEFRAME
# ============================================================

@dataclass(frozen=True)
class Timeframe:
    """
    Chart timeframe: a class plus its multiplier.

    Resolution strings follow the chart convention:
    - "5", "60"     -> minutes
    - "15S"         -> seconds
    - "D", "1D"     -> daily
    - "W", "M"      -> weekly / monthly
    Anything else (ticks, ranges, empty) is UNSUPPORTED.
    """
    kind: TimeframeClass
    multiplier: int = 1

    @classmethod
    def parse(cls, resolution: str) -> "Timeframe":
        match = _RESOLUTION_RE.match((resolution or "").strip().upper())
        if not match or not (match.group(1) or match.group(2)):
            return cls(TimeframeClass.UNSUPPORTED, 0)

        digits, suffix = match.groups()
        multiplier = int(digits) if digits else 1
        if multiplier <= 0:
            return cls(TimeframeClass.UNSUPPORTED, 0)

        return cls(_SUFFIX_TO_CLASS[suffix], multiplier)

    @classmethod
    def minutes(cls, multiplier: int) -> "Timeframe":
        if multiplier <= 0:
            raise InvalidArgument(f"minute multiplier must be positive, got {multiplier}")
        return cls(TimeframeClass.SUB_DAY_MINUTES, multiplier)

    @classmethod
    def seconds(cls, multiplier: int) -> "Timeframe":
        if multiplier <= 0:
            raise InvalidArgument(f"second multiplier must be positive, got {multiplier}")
        return cls(TimeframeClass.SUB_DAY_SECONDS, multiplier)

    @classmethod
    def daily(cls) -> "Timeframe":
        return cls(TimeframeClass.DAILY, 1)

    # --------------------------------------------------------
    # CLASSIFICATION
    # --------------------------------------------------------

    @property
    def is_sub_day(self) -> bool:
        return self.kind in (TimeframeClass.SUB_DAY_MINUTES, TimeframeClass.SUB_DAY_SECONDS)

    @property
    def is_daily(self) -> bool:
        return self.kind is TimeframeClass.DAILY

    @property
    def supports_daily_levels(self) -> bool:
        return self.is_sub_day or self.is_daily

    @property
    def duration(self) -> Optional[timedelta]:
        """Bar length for sub-day timeframes, None otherwise."""
        if self.kind is TimeframeClass.SUB_DAY_MINUTES:
            return timedelta(minutes=self.multiplier)
        if self.kind is TimeframeClass.SUB_DAY_SECONDS:
            return timedelta(seconds=self.multiplier)
        return None

    def __str__(self) -> str:
        suffix = {
            TimeframeClass.SUB_DAY_MINUTES: "",
            TimeframeClass.SUB_DAY_SECONDS: "S",
            TimeframeClass.DAILY: "D",
            TimeframeClass.WEEKLY: "W",
            TimeframeClass.MONTHLY: "M",
        }.get(self.kind)
        if suffix is None:
            return "unsupported"
        return f"{self.multiplier}{suffix}"
