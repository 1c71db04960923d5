from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from zavala.core.base import SpeakerRole, Turn
from zavala.infra.logging import logger
from zavala.llm.openai_wrapper import (
    chat as openai_chat,
    OpenAIContextLengthError,
    OpenAIInvalidRequestError,
    OpenAIError,
)


class CompletionResult(Enum):
    OK = 0
    TOO_LONG = 1
    INVALID_REQUEST = 2
    OTHER_ERROR = 3


@dataclass
class CompletionData:
    status: CompletionResult
    reply_text: Optional[str]
    status_text: Optional[str]


@dataclass(frozen=True)
class CompletionSettings:
    model: str
    api_key: Optional[str] = None
    max_tokens: Optional[int] = 150
    temperature: Optional[float] = 0.9
    timeout: float = 20
    max_attempts: int = 1


def render_messages(system_prompt: str, turns: List[Turn]) -> List[dict]:
    rendered = [Turn(speaker_role=SpeakerRole.SYSTEM, text=system_prompt).render()]
    rendered.extend(t.render() for t in turns)
    return rendered


async def generate_completion_response(
    system_prompt: str, turns: List[Turn], settings: CompletionSettings
) -> CompletionData:
    """Ask the model for the next assistant turn given the channel context.

    Failures are reported through the returned status, never raised.
    """
    try:
        rendered_messages = render_messages(system_prompt, turns)
        response, metrics = await openai_chat(
            rendered_messages,
            model=settings.model,
            api_key=settings.api_key,
            timeout=settings.timeout,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            max_attempts=settings.max_attempts,
            purpose="completion",
        )
        reply = (response.choices[0].message.content or "").strip()
        logger.info(
            "openai_metrics queue_wait_ms=%.1f invoke_ms=%.1f attempt=%d messages=%d reply_chars=%d",
            metrics.get('queue_wait_ms', 0.0),
            metrics.get('invoke_ms', 0.0),
            metrics.get('attempt', 1),
            len(rendered_messages),
            len(reply),
        )
        return CompletionData(status=CompletionResult.OK, reply_text=reply, status_text=None)
    except OpenAIContextLengthError as e:
        return CompletionData(
            status=CompletionResult.TOO_LONG, reply_text=None, status_text=str(e)
        )
    except OpenAIInvalidRequestError as e:
        logger.exception(e)
        return CompletionData(
            status=CompletionResult.INVALID_REQUEST,
            reply_text=None,
            status_text=str(e),
        )
    except OpenAIError as e:
        logger.warning(f"OpenAI timeout/final error: {e}")
        return CompletionData(
            status=CompletionResult.OTHER_ERROR, reply_text=None, status_text=str(e)
        )
    except Exception as e:
        logger.exception(e)
        return CompletionData(
            status=CompletionResult.OTHER_ERROR, reply_text=None, status_text=str(e)
        )
