import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class _Bucket:
    tokens: float
    last: float


class RateLimiter:
    """Per-connection token bucket gating word submissions."""

    def __init__(self, capacity: int = 10, refill_per_sec: float = 5.0,
                 clock: Callable[[], float] = time.monotonic):
        self.capacity = capacity
        self.refill_per_sec = refill_per_sec
        self._clock = clock
        self._buckets: Dict[str, _Bucket] = {}

    def allow(self, connection_id: str) -> bool:
        now = self._clock()
        bucket = self._buckets.get(connection_id)
        if bucket is None:
            bucket = _Bucket(tokens=float(self.capacity), last=now)
            self._buckets[connection_id] = bucket
        elapsed = max(0.0, now - bucket.last)
        bucket.tokens = min(float(self.capacity), bucket.tokens + elapsed * self.refill_per_sec)
        bucket.last = now
        if bucket.tokens >= 1:
            bucket.tokens -= 1
            return True
        return False

    def forget(self, connection_id: str) -> None:
        self._buckets.pop(connection_id, None)
