# ============================================================
# IMPORTS
# ============================================================

from datetime import datetime, timedelta
from typing import Dict, Optional, Union

from core.daily.models import Bar
from core.errors import BarOrderError, InvalidArgument
from core.event_bus import EventBus
from core.logger import Logger
from core.timeframe import Timeframe

# ============================================================
# BAR BUILDER
# ============================================================

class BarBuilder:
    """
    Builds sub-day OHLCV bars from TickEvent data.
    Bars are aligned to the timeframe from midnight of the tick's day.
    """

    def __init__(
        self,
        event_bus: EventBus,
        logger: Logger,
        timeframe: Union[Timeframe, str] = "1",
    ):
        if isinstance(timeframe, str):
            timeframe = Timeframe.parse(timeframe)
        if not timeframe.is_sub_day:
            raise InvalidArgument(f"bar builder needs a sub-day timeframe, got {timeframe}")

        self._event_bus = event_bus
        self._logger = logger
        self._timeframe = timeframe
        self._duration: timedelta = timeframe.duration
        # key: symbol -> current bar fields
        self._current_bars: Dict[str, Dict] = {}

        # Subscribe to TickEvent
        self._event_bus.subscribe("TickEvent", self._on_tick)


    # ========================================================
    # CORE BAR LOGIC
    # ========================================================

    def _bar_start(self, timestamp: datetime) -> datetime:
        midnight = timestamp.replace(hour=0, minute=0, second=0, microsecond=0)
        step = self._duration.total_seconds()
        elapsed = (timestamp - midnight).total_seconds()
        return midnight + timedelta(seconds=(elapsed // step) * step)

    def process_tick(self, tick: Dict) -> Dict[str, Optional[Bar]]:
        """
        Process a single tick and update bar state.

        Returns:
            {
              "update": current bar (after update),
              "closed": closed bar (if any, else None)
            }
        """
        symbol = tick["symbol"]
        price = tick["price"]
        volume = tick["volume"]
        timestamp: datetime = tick["timestamp"]

        bar_start = self._bar_start(timestamp)
        current = self._current_bars.get(symbol)

        # Case 1: Tick belongs to current bar
        if current is not None and bar_start == current["timestamp"]:
            current["high"] = max(current["high"], price)
            current["low"] = min(current["low"], price)
            current["close"] = price
            current["volume"] += volume
            return {"update": Bar(**current), "closed": None}

        if current is not None and bar_start < current["timestamp"]:
            raise BarOrderError(
                f"tick for {symbol} at {timestamp} precedes open bar {current['timestamp']}"
            )

        # Case 2: No bar yet, or tick belongs to a later bar → close current
        closed_bar = Bar(**current) if current is not None else None

        new_bar = {
            "symbol": symbol,
            "timestamp": bar_start,
            "open": price,
            "high": price,
            "low": price,
            "close": price,
            "volume": volume,
        }
        self._current_bars[symbol] = new_bar

        return {
            "update": Bar(**new_bar),
            "closed": closed_bar,
        }

    def flush(self, symbol: str) -> Optional[Bar]:
        """
        Close and publish the open bar of a symbol (end of feed).
        """
        current = self._current_bars.pop(symbol, None)
        if current is None:
            return None
        closed = Bar(**current)
        self._publish_closed(closed)
        return closed

    # ========================================================
    # EVENT HANDLER
    # ========================================================

    def _on_tick(self, tick: Dict) -> None:
        """
        Handle incoming TickEvent.
        """
        result = self.process_tick(tick)

        # Emit bar update event
        self._event_bus.publish("BarUpdateEvent", result["update"])

        # Emit bar closed event if present
        closed = result["closed"]
        if closed:
            self._publish_closed(closed)

    def _publish_closed(self, closed: Bar) -> None:
        self._event_bus.publish("BarClosedEvent", closed)

        self._logger.debug(
            "[BARS] Bar closed",
            symbol=closed.symbol,
            timeframe=str(self._timeframe),
            timestamp=closed.timestamp,
            open=closed.open,
            high=closed.high,
            low=closed.low,
            close=closed.close,
            volume=closed.volume,
        )
