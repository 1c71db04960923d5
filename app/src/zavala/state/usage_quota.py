"""Per-user lifetime usage counter.

Counts admitted requests per user for the lifetime of the process. Once a user
reaches the ceiling every further request is refused until an explicit reset.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class QuotaCheck:
    allowed: bool
    remaining: int


class UsageQuota:
    def __init__(self, ceiling: int = 10):
        self.ceiling = ceiling
        self._counts: Dict[str, int] = {}

    def try_consume(self, user_id: str) -> QuotaCheck:
        count = self._counts.get(user_id, 0)
        if count >= self.ceiling:
            return QuotaCheck(allowed=False, remaining=max(self.ceiling - count, 0))
        count += 1
        self._counts[user_id] = count
        return QuotaCheck(allowed=True, remaining=self.ceiling - count)

    def peek(self, user_id: str) -> int:
        return self._counts.get(user_id, 0)

    def reset(self, user_id: str) -> None:
        self._counts.pop(user_id, None)
