from __future__ import annotations

import itertools
import threading
import time


def now_ms() -> int:
    return int(time.time() * 1000)


def time_ago(ms: int, now: int | None = None) -> str:
    """Coarse relative time for feed cards, e.g. ``"3m ago"``."""
    if now is None:
        now = now_ms()
    s = max(0, (now - ms) // 1000)
    if s < 60:
        return f"{s}s ago"
    m = s // 60
    if m < 60:
        return f"{m}m ago"
    h = m // 60
    if h < 24:
        return f"{h}h ago"
    return f"{h // 24}d ago"


class IdAllocator:
    """
    Hands out ``<prefix><n>`` ids from a monotonic counter.

    Ids never repeat within one allocator, and ``n`` grows with allocation
    order.
    """

    def __init__(self, prefix: str, start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def allocate(self) -> str:
        with self._lock:
            return f"{self.prefix}{next(self._counter)}"
