from zavala.state.history_store import ConversationWindow
from zavala.state.usage_quota import QuotaCheck, UsageQuota
from zavala.state.rate_limit import RateCheck, SlidingWindowRateLimiter
from zavala.state.session import Decision, SessionStateManager, SessionStats

__all__ = [
    "ConversationWindow",
    "UsageQuota",
    "QuotaCheck",
    "SlidingWindowRateLimiter",
    "RateCheck",
    "SessionStateManager",
    "SessionStats",
    "Decision",
]
