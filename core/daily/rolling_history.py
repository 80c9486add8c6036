# ============================================================
# IMPORTS
# ============================================================

from collections import deque
from typing import Deque, Generic, List, Optional, TypeVar

from core.errors import InvalidArgument

T = TypeVar("T")


# ============================================================
# ROLLING HISTORY BUFFER
# ============================================================

class RollingHistoryBuffer(Generic[T]):
    """
    Bounded FIFO keyed by "pushes ago".

    - index 0 is the most recent push
    - the oldest item is evicted once size would exceed capacity
    - capacity is fixed for the life of the buffer
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise InvalidArgument(f"buffer capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        # appendleft + maxlen evicts from the right (oldest)
        self._items: Deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def push(self, item: T) -> None:
        self._items.appendleft(item)

    def get(self, offset: int) -> Optional[T]:
        """
        Item pushed `offset` pushes ago; None while history is warming up.
        """
        if offset < 0:
            raise InvalidArgument(f"offset must be >= 0, got {offset}")
        if offset >= len(self._items):
            return None
        return self._items[offset]

    def snapshot(self) -> List[T]:
        """
        Full ordered copy, oldest first.
        """
        return list(reversed(self._items))

    def clear(self) -> None:
        self._items.clear()
