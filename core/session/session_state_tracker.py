# ============================================================
# IMPORTS
# ============================================================

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from core.clock import Timestamp
from core.errors import BarOrderError

# ============================================================
# PHASES & TRANSITIONS
# ============================================================


class Phase(Enum):
    BEFORE_SESSION = "before_session"
    IN_SESSION = "in_session"
    AFTER_SESSION = "after_session"


@dataclass(frozen=True)
class PhaseTransition:
    """
    Result of feeding one bar to the tracker.

    - day_changed: calendar date differs from the previous bar's
    - session_started: this bar is the first in-session bar of the day
    - session_ended: the day's session closed on this bar (explicitly, or
      implicitly because the date rolled while still in session);
      the bar itself does not belong to the ended session
    - bar_offset: bars since the session started (0 on the start bar)
    - repeated: the bar carried the previous bar's timestamp and was ignored
    """
    phase: Phase
    day_changed: bool = False
    session_started: bool = False
    session_ended: bool = False
    bar_offset: int = 0
    repeated: bool = False

    @property
    def in_session(self) -> bool:
        return self.phase is Phase.IN_SESSION


# ============================================================
# SESSION STATE TRACKER
# ============================================================


class SessionStateTracker:
    """
    Incremental session phase detection for one (session, resolution) view.
    Uses calendar-date changes and membership flips only; O(1) per bar.
    """

    # ========================================================
    # SETUP
    # ========================================================
    def __init__(self):
        self._last_date: Optional[date] = None
        self._last_timestamp: Optional[Timestamp] = None
        self._phase: Phase = Phase.BEFORE_SESSION
        self._bar_offset: int = 0

        self._session_end_count: int = 0
        self._first_session_partial: bool = False

    # --------------------------------------------------------
    # READ-ONLY STATE
    # --------------------------------------------------------
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def last_date(self) -> Optional[date]:
        return self._last_date

    @property
    def bar_offset(self) -> int:
        return self._bar_offset

    @property
    def session_end_count(self) -> int:
        return self._session_end_count

    @property
    def first_session_partial(self) -> bool:
        """
        True when the stream began with a bar already inside the session,
        including a first bar that is exactly the session-open bar.
        """
        return self._first_session_partial

    # ========================================================
    # CORE TRANSITION LOGIC
    # ========================================================
    def advance(
        self,
        timestamp: Timestamp,
        calendar_date: date,
        in_session: bool,
    ) -> PhaseTransition:
        """
        Feed one bar. Must be called exactly once per bar, in order.
        """

        if self._last_timestamp is not None:
            if timestamp < self._last_timestamp:
                raise BarOrderError(
                    f"bar timestamp {timestamp} is older than previous bar {self._last_timestamp}"
                )
            if timestamp == self._last_timestamp:
                # repeated bar: no-op
                return PhaseTransition(
                    phase=self._phase, bar_offset=self._bar_offset, repeated=True
                )

        self._last_timestamp = timestamp

        # CASE 1 — day change (also the very first bar)
        if calendar_date != self._last_date:
            first_bar = self._last_date is None
            ended = self._phase is Phase.IN_SESSION

            self._last_date = calendar_date
            self._bar_offset = 0
            self._phase = Phase.IN_SESSION if in_session else Phase.BEFORE_SESSION

            if first_bar and in_session:
                self._first_session_partial = True
            if ended:
                self._session_end_count += 1

            return PhaseTransition(
                phase=self._phase,
                day_changed=True,
                session_started=in_session,
                session_ended=ended,
            )

        # CASE 2 — session opens
        if self._phase is Phase.BEFORE_SESSION and in_session:
            self._phase = Phase.IN_SESSION
            self._bar_offset = 0
            return PhaseTransition(phase=self._phase, session_started=True)

        # CASE 3 — session closes
        if self._phase is Phase.IN_SESSION and not in_session:
            self._phase = Phase.AFTER_SESSION
            self._session_end_count += 1
            return PhaseTransition(
                phase=self._phase,
                session_ended=True,
                bar_offset=self._bar_offset,
            )

        # CASE 4 — no transition
        if self._phase is Phase.IN_SESSION:
            self._bar_offset += 1

        return PhaseTransition(phase=self._phase, bar_offset=self._bar_offset)
