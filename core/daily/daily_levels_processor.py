# ============================================================
# IMPORTS
# ============================================================

from typing import Dict, List, Optional, Union

from core.clock import Calendar
from core.daily.daily_levels import DailyLevels, SessionOracle
from core.daily.models import Bar
from core.errors import InvalidArgument
from core.event_bus import EventBus
from core.events.session_events import SessionEndEvent, SessionStartEvent
from core.logger import Logger
from core.session.session_spec import SessionSpec
from core.timeframe import Timeframe

# ============================================================
# DAILY LEVELS PROCESSOR
# ============================================================


class DailyLevelsProcessor:
    """
    Drives one DailyLevels facade per registered session view from the
    BarClosedEvent stream, and announces session boundaries.

    Every facade is advanced exactly once per bar, in registration order.
    Deterministic for Fake / Replay / Live bar sources.
    """

    # ========================================================
    # SETUP & WIRING
    # ========================================================
    def __init__(
        self,
        event_bus: EventBus,
        logger: Logger,
        timeframe: Union[Timeframe, str],
        session_oracle: Optional[SessionOracle] = None,
        calendar: Optional[Calendar] = None,
    ):
        self._event_bus = event_bus
        self._logger = logger
        self._timeframe = Timeframe.parse(timeframe) if isinstance(timeframe, str) else timeframe
        self._oracle = session_oracle
        self._calendar = calendar

        # session view -> facade (dict keeps registration order)
        self._levels: Dict[SessionSpec, DailyLevels] = {}
        self._bars_seen = 0

        # Wiring: subscribe to BarClosedEvent
        self._event_bus.subscribe("BarClosedEvent", self.on_bar_closed)

    # ========================================================
    # REGISTRATION
    # ========================================================
    def register(self, session: SessionSpec, days_prior: Optional[int] = None) -> DailyLevels:
        """
        Register a session view. Registering the same view again returns
        the existing facade; asking for a different history bound needs a
        new processor, since retained history cannot grow.
        """
        existing = self._levels.get(session)
        if existing is not None:
            if days_prior is not None and days_prior != existing.days_prior:
                raise InvalidArgument(
                    f"{session} already registered with days_prior={existing.days_prior}"
                )
            return existing

        if self._bars_seen:
            self._logger.warning(
                "[SESSION] Session view registered mid-stream; first day will be partial",
                session=str(session),
                bars_seen=self._bars_seen,
            )

        levels = DailyLevels(
            session=session,
            timeframe=self._timeframe,
            days_prior=days_prior,
            session_oracle=self._oracle,
            calendar=self._calendar,
            logger=self._logger,
        )
        self._levels[session] = levels
        return levels

    def levels(self, session: SessionSpec) -> DailyLevels:
        try:
            return self._levels[session]
        except KeyError:
            raise InvalidArgument(f"session view {session} is not registered") from None

    @property
    def sessions(self) -> List[SessionSpec]:
        return list(self._levels)

    def close(self) -> None:
        """
        Stop consuming BarClosedEvent. Registered facades keep their
        state and stay queryable.
        """
        self._event_bus.unsubscribe("BarClosedEvent", self.on_bar_closed)
        self._logger.info(
            "[SESSION] Daily levels processor closed",
            sessions=len(self._levels),
            bars_seen=self._bars_seen,
        )

    # ========================================================
    # CORE BAR HANDLING
    # ========================================================
    def on_bar_closed(self, bar: Bar) -> None:
        """
        Advance every facade with the bar, then publish SessionEndEvent /
        SessionStartEvent for whatever boundaries the bar crossed.
        """
        self._bars_seen += 1

        for session, levels in self._levels.items():
            finalized = levels.advance(bar)

            if finalized is not None:
                self._event_bus.publish(
                    "SessionEndEvent",
                    SessionEndEvent(timestamp=bar.timestamp, session=session, record=finalized),
                )
                self._logger.info(
                    f"[SESSION] Session ended: {finalized.session_date}",
                    session=str(session),
                )

            transition = levels.last_transition
            if transition is not None and transition.session_started:
                session_date = levels.tracker.last_date
                self._event_bus.publish(
                    "SessionStartEvent",
                    SessionStartEvent(
                        timestamp=bar.timestamp,
                        session=session,
                        session_date=session_date,
                        today_open=levels.open(0),
                    ),
                )
                self._logger.info(
                    f"[SESSION] Session started: {session_date}",
                    session=str(session),
                )
