"""Per-user sliding window rate limiting.

We keep an in-memory list of admitted request timestamps per user id. On each
admission check we:
 1. Drop timestamps that are window_sec or more in the past
 2. Allow if the remaining count < max_events, recording the new timestamp

Denied attempts are not recorded and leave the stored log untouched. Pruning is
lazy: stale entries may linger between checks but never count.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional
import time


@dataclass(frozen=True)
class RateCheck:
    allowed: bool
    recent_count: int


class SlidingWindowRateLimiter:
    def __init__(self, window_sec: float = 300, max_events: int = 3):
        self.window_sec = window_sec
        self.max_events = max_events
        self._events: Dict[str, List[float]] = {}

    def _recent(self, user_id: str, now: float) -> List[float]:
        return [t for t in self._events.get(user_id, []) if now - t < self.window_sec]

    def try_admit(self, user_id: str, now: Optional[float] = None) -> RateCheck:
        if now is None:
            now = time.time()
        recent = self._recent(user_id, now)
        if len(recent) >= self.max_events:
            return RateCheck(allowed=False, recent_count=len(recent))
        recent.append(now)
        self._events[user_id] = recent
        return RateCheck(allowed=True, recent_count=len(recent))

    def peek(self, user_id: str, now: Optional[float] = None) -> int:
        if now is None:
            now = time.time()
        return len(self._recent(user_id, now))

    def reset(self, user_id: str) -> None:
        self._events.pop(user_id, None)
