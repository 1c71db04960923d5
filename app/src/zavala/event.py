import contextlib
import time
from dataclasses import dataclass
from enum import Enum
from typing import AsyncContextManager, Awaitable, Callable, List, Optional

from zavala.core.base import SpeakerRole, Turn
from zavala.infra.logging import logger, log_event
from zavala.llm.completion import CompletionData, CompletionResult
from zavala.state.session import Decision, SessionStateManager

RATE_LIMITED_REPLY = "⏳ You’re asking too fast. Please wait a few minutes."
QUOTA_EXCEEDED_REPLY = "❌ You've reached your session limit of {ceiling} messages."
FAILURE_REPLY = "❌ Error talking to OpenAI."

CompleteFn = Callable[[str, List[Turn]], Awaitable[CompletionData]]
ReplyFn = Callable[[str], Awaitable[object]]
TypingFn = Callable[[], AsyncContextManager]


@dataclass(frozen=True)
class InboundEvent:
    channel_id: str
    user_id: str
    display_name: str
    text: str
    is_directed_at_assistant: bool


class HandleOutcome(Enum):
    IGNORED = 0
    REPLIED = 1
    RATE_LIMITED = 2
    QUOTA_EXCEEDED = 3
    FAILED = 4


class MessageHandler:
    """Routes channel messages through admission and the model call."""

    def __init__(
        self,
        state: SessionStateManager,
        complete: CompleteFn,
        system_prompt: str,
        serialize_channels: bool = True,
        clock: Callable[[], float] = time.time,
        split_reply: Optional[Callable[[str], List[str]]] = None,
    ):
        self.state = state
        self.complete = complete
        self.system_prompt = system_prompt
        self.serialize_channels = serialize_channels
        self.clock = clock
        self.split_reply = split_reply or (lambda text: [text])

    async def handle(
        self, event: InboundEvent, reply: ReplyFn, typing: Optional[TypingFn] = None
    ) -> HandleOutcome:
        turn = Turn(
            speaker_role=SpeakerRole.USER,
            text=event.text,
            attributed_name=event.display_name,
        )
        decision = self.state.handle_inbound(
            event.channel_id,
            event.user_id,
            turn,
            now=self.clock(),
            directed=event.is_directed_at_assistant,
        )
        if decision is Decision.IGNORED:
            return HandleOutcome.IGNORED
        if decision is Decision.RATE_LIMITED:
            await reply(RATE_LIMITED_REPLY)
            return HandleOutcome.RATE_LIMITED
        if decision is Decision.QUOTA_EXCEEDED:
            await reply(QUOTA_EXCEEDED_REPLY.format(ceiling=self.state.usage_ceiling))
            return HandleOutcome.QUOTA_EXCEEDED

        if self.serialize_channels:
            async with self.state.channel_lock(event.channel_id):
                return await self._respond(event, reply, typing)
        return await self._respond(event, reply, typing)

    async def _respond(
        self, event: InboundEvent, reply: ReplyFn, typing: Optional[TypingFn]
    ) -> HandleOutcome:
        typing_cm = typing() if typing is not None else contextlib.nullcontext()
        async with typing_cm:
            turns = self.state.snapshot(event.channel_id)
            response_data = await self.complete(self.system_prompt, turns)

        if response_data.status is not CompletionResult.OK or not response_data.reply_text:
            log_event(
                "completion_failed",
                channel_id=event.channel_id,
                user_id=event.user_id,
                status=response_data.status.name,
                error=response_data.status_text,
            )
            await reply(FAILURE_REPLY)
            return HandleOutcome.FAILED

        self.state.record_reply(
            event.channel_id,
            Turn(speaker_role=SpeakerRole.ASSISTANT, text=response_data.reply_text),
        )
        for chunk in self.split_reply(response_data.reply_text):
            await reply(chunk)
        logger.info(
            f"Replied in channel {event.channel_id} to {event.display_name}: {response_data.reply_text[:50]}"
        )
        return HandleOutcome.REPLIED
