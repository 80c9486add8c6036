# ============================================================
# IMPORTS
# ============================================================

from typing import Any, Dict


# ============================================================
# DAILY LEVELS CONFIG
# ============================================================

DAILY_LEVELS_CFG: Dict[str, Any] = {
    "days_prior": 1,                # retained days of finalized history
    "utc_offset_minutes": -300,     # exchange time vs UTC (EST proxy)
}


# ============================================================
# SESSION WINDOWS (exchange time, HHMM-HHMM)
# ============================================================

SESSION_WINDOWS: Dict[str, str] = {
    "regular": "0930-1600",
    "extended": "0400-2000",
    "24x7": "24x7",
}
