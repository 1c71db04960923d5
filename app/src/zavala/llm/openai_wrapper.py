import asyncio
import time
import openai
from typing import List, Dict, Any, Optional, Tuple
from zavala.infra.logging import log_event

# Public semaphore size can be tuned later
_DEFAULT_CONCURRENCY = 3
_semaphore: Optional[asyncio.Semaphore] = None


class OpenAIError(Exception):
    pass


class OpenAITimeoutError(OpenAIError):
    """Raised when OpenAI API call times out."""
    pass


class OpenAIContextLengthError(OpenAIError):
    """Raised when the prompt exceeds the model context window."""
    pass


class OpenAIInvalidRequestError(OpenAIError):
    """Raised when the API rejects the request as malformed."""
    pass


class OpenAIFinalError(OpenAIError):
    """Raised when all retry attempts are exhausted."""
    pass


def _get_semaphore() -> asyncio.Semaphore:
    global _semaphore
    if _semaphore is None:
        _semaphore = asyncio.Semaphore(_DEFAULT_CONCURRENCY)
    return _semaphore


def _is_timeout(exception: Exception) -> bool:
    if isinstance(exception, openai.APITimeoutError):
        return True
    return 'timeout' in str(exception).lower()


def _is_context_length(exception: Exception) -> bool:
    return (
        getattr(exception, 'code', None) == 'context_length_exceeded'
        or "maximum context length" in str(exception)
    )


def _is_retriable(exception: Exception) -> bool:
    """Check if exception is retriable (includes timeouts, rate limits, etc.)."""
    if isinstance(exception, (openai.APITimeoutError, openai.APIConnectionError, openai.RateLimitError)):
        return True
    error_str = str(exception).lower()
    return any(k in error_str for k in [
        'rate limit', 'timeout', 'temporar', 'overloaded', '503'
    ])


def _create_completion(**kwargs: Any) -> Any:
    return openai.chat.completions.create(**kwargs)


async def chat(
    messages: List[Dict[str, Any]],
    model: str,
    api_key: Optional[str] = None,
    timeout: float = 20,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    max_attempts: int = 1,
    backoff_base: float = 0.8,
    purpose: str = "completion",
) -> Tuple[Any, Dict[str, Any]]:
    """OpenAI chat completion wrapper with:
    - semaphore concurrency control
    - optional retry (exponential backoff + jitter), off by default
    - timing metrics
    Returns: (raw_response, metrics_dict)
    metrics: queue_wait_ms, invoke_ms, attempt, purpose
    """
    start_wait = time.perf_counter()
    async with _get_semaphore():
        queue_wait_ms = (time.perf_counter() - start_wait) * 1000
        if api_key:
            openai.api_key = api_key
        params: Dict[str, Any] = {"model": model, "messages": messages, "timeout": timeout}
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if temperature is not None:
            params["temperature"] = temperature
        last_exc = None
        for attempt in range(1, max_attempts + 1):
            def _sync_invoke():
                invoke_start = time.perf_counter()
                resp = _create_completion(**params)
                invoke_ms = (time.perf_counter() - invoke_start) * 1000
                return resp, invoke_ms
            try:
                resp, invoke_ms = await asyncio.to_thread(_sync_invoke)
                metrics = {
                    'queue_wait_ms': queue_wait_ms,
                    'invoke_ms': invoke_ms,
                    'attempt': attempt,
                    'purpose': purpose,
                }
                usage = getattr(resp, 'usage', None)
                log_event(
                    "openai_call",
                    attempt=attempt,
                    purpose=purpose,
                    invoke_ms=f"{invoke_ms:.1f}",
                    queue_wait_ms=f"{queue_wait_ms:.1f}",
                    prompt_tokens=getattr(usage, 'prompt_tokens', None),
                    completion_tokens=getattr(usage, 'completion_tokens', None),
                    total_tokens=getattr(usage, 'total_tokens', None),
                    model=model,
                )
                return resp, metrics
            except Exception as e:
                last_exc = e
                if _is_context_length(e):
                    log_event("openai_context_length", purpose=purpose, model=model, error=str(e)[:300])
                    raise OpenAIContextLengthError(str(e)) from e
                if isinstance(e, openai.BadRequestError):
                    log_event("openai_invalid_request", purpose=purpose, model=model, error=str(e)[:300])
                    raise OpenAIInvalidRequestError(str(e)) from e

                retriable = _is_retriable(e)
                is_timeout = _is_timeout(e)
                if is_timeout:
                    log_event("openai_timeout", purpose=purpose, attempt=attempt, timeout=timeout, model=model)

                if attempt == max_attempts or not retriable:
                    log_event("openai_call_failed", purpose=purpose, attempt=attempt, retriable=retriable, error=str(e)[:300])
                    if is_timeout:
                        raise OpenAITimeoutError(str(e)) from e
                    raise OpenAIFinalError(str(e)) from e
                sleep_for = backoff_base * (2 ** (attempt - 1))
                jitter = 0.05 * sleep_for
                log_event("openai_retry", attempt=attempt, sleep_ms=int((sleep_for + jitter) * 1000), retriable=retriable)
                await asyncio.sleep(sleep_for + jitter)
        raise OpenAIError(str(last_exc))  # max_attempts < 1
