"""Session state for the channel assistant.

Conversation context is kept per channel so everyone in a channel shares it,
while usage quota and rate limiting are kept per user. The two keyspaces are
independent: resetting a user never touches channel context and clearing a
channel never touches a user's limits.
"""
from __future__ import annotations
import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from zavala.core.base import Turn
from zavala.infra.logging import log_event
from zavala.state.history_store import ConversationWindow
from zavala.state.rate_limit import SlidingWindowRateLimiter
from zavala.state.usage_quota import UsageQuota


class Decision(Enum):
    IGNORED = 0
    ADMITTED = 1
    RATE_LIMITED = 2
    QUOTA_EXCEEDED = 3


@dataclass(frozen=True)
class SessionStats:
    usage: int
    usage_ceiling: int
    memory_entries: int
    memory_capacity: int
    window_entries: int
    window_threshold: int


class SessionStateManager:
    def __init__(
        self,
        memory_capacity: int = 6,
        usage_ceiling: int = 10,
        rate_window_sec: float = 300,
        rate_max_events: int = 3,
    ):
        self._conversations = ConversationWindow(capacity=memory_capacity)
        self._quota = UsageQuota(ceiling=usage_ceiling)
        self._rate_limiter = SlidingWindowRateLimiter(
            window_sec=rate_window_sec, max_events=rate_max_events
        )
        self._channel_locks: Dict[str, asyncio.Lock] = {}

    @property
    def usage_ceiling(self) -> int:
        return self._quota.ceiling

    def handle_inbound(
        self,
        channel_id: str,
        user_id: str,
        turn: Turn,
        now: Optional[float] = None,
        directed: bool = True,
    ) -> Decision:
        """Record an inbound turn and decide whether the assistant may answer it.

        The turn is always added to the channel context. Only messages directed
        at the assistant go through admission: the rate limit first, then the
        usage quota. A request refused by the quota still keeps its rate limit
        slot.
        """
        if now is None:
            now = time.time()
        self._conversations.append(channel_id, turn)
        if not directed:
            return Decision.IGNORED

        rate = self._rate_limiter.try_admit(user_id, now)
        if not rate.allowed:
            log_event("rate_limited", user_id=user_id, channel_id=channel_id, recent=rate.recent_count)
            return Decision.RATE_LIMITED

        quota = self._quota.try_consume(user_id)
        if not quota.allowed:
            log_event("quota_exceeded", user_id=user_id, channel_id=channel_id, ceiling=self._quota.ceiling)
            return Decision.QUOTA_EXCEEDED

        log_event("admitted", user_id=user_id, channel_id=channel_id, recent=rate.recent_count, remaining=quota.remaining)
        return Decision.ADMITTED

    def record_reply(self, channel_id: str, turn: Turn) -> None:
        self._conversations.append(channel_id, turn)

    def snapshot(self, channel_id: str) -> List[Turn]:
        return self._conversations.snapshot(channel_id)

    def reset_user(self, user_id: str) -> None:
        self._quota.reset(user_id)
        self._rate_limiter.reset(user_id)
        log_event("user_reset", user_id=user_id)

    def clear_channel(self, channel_id: str) -> None:
        self._conversations.clear(channel_id)
        lock = self._channel_locks.get(channel_id)
        if lock is not None and not lock.locked():
            del self._channel_locks[channel_id]
        log_event("channel_cleared", channel_id=channel_id)

    def stats(
        self, user_id: str, now: Optional[float] = None, channel_id: Optional[str] = None
    ) -> SessionStats:
        if now is None:
            now = time.time()
        memory_entries = len(self._conversations.snapshot(channel_id)) if channel_id else 0
        return SessionStats(
            usage=self._quota.peek(user_id),
            usage_ceiling=self._quota.ceiling,
            memory_entries=memory_entries,
            memory_capacity=self._conversations.capacity,
            window_entries=self._rate_limiter.peek(user_id, now),
            window_threshold=self._rate_limiter.max_events,
        )

    def channel_lock(self, channel_id: str) -> asyncio.Lock:
        """Lock serializing model calls and reply appends for one channel."""
        lock = self._channel_locks.get(channel_id)
        if lock is None:
            lock = asyncio.Lock()
            self._channel_locks[channel_id] = lock
        return lock
