# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from typing import Optional

from core.daily.daily_levels import DailyLevels


# ============================================================
# RESULT MODELS
# ============================================================

@dataclass(frozen=True)
class PivotLevels:
    """
    Classic floor pivots from one day's (or window's) high/low/close.
    """
    pp: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float


@dataclass(frozen=True)
class CentralPivotRange:
    P: float
    BC: float
    TC: float
    width_pct: float


# ============================================================
# PIVOT ARITHMETIC
# ============================================================

def _window_hlc(levels: DailyLevels, days_prior: int, extra_forward: int):
    high = levels.high_between(days_prior, extra_forward)
    low = levels.low_between(days_prior, extra_forward)
    close = levels.close(days_prior - extra_forward)
    if high is None or low is None or close is None:
        return None
    return high, low, close


def pivot_points(
    levels: DailyLevels,
    days_prior: int = 1,
    extra_forward: int = 0,
) -> Optional[PivotLevels]:
    """
    PP = (H + L + C) / 3
    R1 = 2*PP - L,  R2 = PP + (H - L),  R3 = H + 2*(PP - L)
    S1 = 2*PP - H,  S2 = PP - (H - L),  S3 = L - 2*(H - PP)

    H/L span the days [days_prior - extra_forward, days_prior];
    C is the close of the most recent day in that window.
    """
    hlc = _window_hlc(levels, days_prior, extra_forward)
    if hlc is None:
        return None

    high, low, close = hlc
    pp = (high + low + close) / 3.0

    return PivotLevels(
        pp=pp,
        r1=2 * pp - low,
        r2=pp + (high - low),
        r3=high + 2 * (pp - low),
        s1=2 * pp - high,
        s2=pp - (high - low),
        s3=low - 2 * (high - pp),
    )


def central_pivot_range(
    levels: DailyLevels,
    days_prior: int = 1,
    extra_forward: int = 0,
) -> Optional[CentralPivotRange]:
    hlc = _window_hlc(levels, days_prior, extra_forward)
    if hlc is None:
        return None

    h, l, c = hlc
    P = (h + l + c) / 3.0
    BC = (h + l) / 2.0
    TC = 2 * P - BC
    width_pct = abs(TC - BC) / P * 100.0
    return CentralPivotRange(P=P, BC=BC, TC=TC, width_pct=width_pct)


def gap_percent(levels: DailyLevels) -> Optional[float]:
    """
    Today's session open versus the prior day's close, in percent.
    None until today's session has opened and a prior day exists.
    """
    today_open = levels.open(0)
    prev_close = levels.close(1)
    if today_open is None or prev_close is None or prev_close == 0:
        return None
    return (today_open - prev_close) / prev_close * 100.0
