# ============================================================
# IMPORTS
# ============================================================

from typing import Iterable, Iterator

from core.clock import ReplayClock
from core.daily.models import Bar
from core.event_bus import EventBus
from core.logger import Logger

# ============================================================
# REPLAY LOADER
# ============================================================

class ReplayLoader:
    """
    Replays recorded bars into the EventBus as BarClosedEvent.
    """

    def __init__(
        self,
        bars: Iterable[Bar],
        event_bus: EventBus,
        clock: ReplayClock,
        logger: Logger,
    ):
        self._bars: Iterator[Bar] = iter(bars)
        self._event_bus = event_bus
        self._clock = clock
        self._logger = logger
        self._replayed = 0

    @property
    def replayed(self) -> int:
        return self._replayed

    # ========================================================
    # REPLAY API
    # ========================================================

    def replay_next(self) -> bool:
        """
        Replay the next bar.
        Returns False when replay is finished.
        """
        try:
            bar = next(self._bars)
        except StopIteration:
            self._logger.info("[BARS] Replay finished", bars=self._replayed)
            return False

        # Drive the clock using recorded timestamp
        self._clock.set(bar.timestamp)

        self._event_bus.publish("BarClosedEvent", bar)
        self._replayed += 1

        self._logger.debug(
            "[BARS] Bar replayed",
            symbol=bar.symbol,
            close=bar.close,
            timestamp=bar.timestamp,
        )

        return True

    def replay_all(self) -> int:
        """
        Replay every remaining bar; returns how many were replayed.
        """
        start = self._replayed
        while self.replay_next():
            pass
        return self._replayed - start
