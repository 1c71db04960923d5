"""Slash command handlers for session management.

Each handler returns a CommandResponse that the Discord glue sends back as an
ephemeral reply, visible only to the invoking user.
"""
from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Callable, Optional

from zavala.infra.logging import log_event
from zavala.state.session import SessionStateManager

# Slash command descriptions; a reset never touches shared channel context
RESET_DESCRIPTION = "Reset your own usage count and rate limit"
ADMIN_RESET_DESCRIPTION = "Reset another user's usage count and rate limit"
STATS_DESCRIPTION = "View your current usage stats"


@dataclass(frozen=True)
class CommandResponse:
    content: str
    ephemeral: bool = True


class CommandRouter:
    def __init__(self, state: SessionStateManager, clock: Callable[[], float] = time.time):
        self.state = state
        self.clock = clock

    def reset(self, caller_id: str) -> CommandResponse:
        self.state.reset_user(caller_id)
        log_event("command_reset", user_id=caller_id)
        return CommandResponse("✅ Your session has been reset.")

    def admin_reset(self, caller_id: str, elevated: bool, target_id: str) -> CommandResponse:
        if not elevated:
            log_event("command_admin_reset_denied", user_id=caller_id, target_id=target_id)
            return CommandResponse("❌ You do not have permission to use this command.")
        self.state.reset_user(target_id)
        log_event("command_admin_reset", user_id=caller_id, target_id=target_id)
        return CommandResponse(f"✅ Reset session for <@{target_id}>.")

    def stats(self, caller_id: str, channel_id: Optional[str] = None) -> CommandResponse:
        s = self.state.stats(caller_id, now=self.clock(), channel_id=channel_id)
        return CommandResponse(
            "**Your Stats:**\n"
            f"- Usage Count: {s.usage}/{s.usage_ceiling}\n"
            f"- Memory Entries: {s.memory_entries}/{s.memory_capacity}\n"
            f"- Recent Requests: {s.window_entries}/{s.window_threshold}"
        )
