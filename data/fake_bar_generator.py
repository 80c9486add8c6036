# ============================================================
# IMPORTS
# ============================================================

import random
from datetime import datetime
from typing import Iterator, Optional, Union

from core.daily.models import Bar
from core.errors import InvalidArgument
from core.timeframe import Timeframe


# ============================================================
# FAKE BAR GENERATOR
# ============================================================

class FakeBarGenerator:
    """
    Deterministic random-walk bar stream.
    Same seed -> same bars.
    """

    def __init__(
        self,
        start: datetime,
        timeframe: Union[Timeframe, str] = "5",
        start_price: float = 100.0,
        symbol: str = "TEST",
        seed: Optional[int] = None,
    ):
        if isinstance(timeframe, str):
            timeframe = Timeframe.parse(timeframe)
        if not timeframe.is_sub_day:
            raise InvalidArgument(f"fake bars need a sub-day timeframe, got {timeframe}")

        self.symbol = symbol
        self._timestamp = start
        self._step = timeframe.duration
        self._price = start_price

        self._rng = random.Random(seed)

    # ========================================================
    # BAR EMISSION
    # ========================================================

    def next_bar(self) -> Bar:
        """
        Generate the next bar; timestamps advance by one timeframe.
        """
        open_price = self._price
        close_price = max(0.01, open_price + self._rng.uniform(-1.0, 1.0))
        high = max(open_price, close_price) + self._rng.uniform(0.0, 0.5)
        low = max(0.01, min(open_price, close_price) - self._rng.uniform(0.0, 0.5))

        bar = Bar(
            timestamp=self._timestamp,
            open=round(open_price, 2),
            high=round(high, 2),
            low=round(low, 2),
            close=round(close_price, 2),
            volume=float(self._rng.randint(1, 100)),
            symbol=self.symbol,
        )

        self._timestamp += self._step
        self._price = close_price
        return bar

    def bars(self, count: int) -> Iterator[Bar]:
        for _ in range(count):
            yield self.next_bar()
