"""Server-sent-event streaming of OpenRouter chat completions.

Statement extraction asks a vision model for one small JSON object; the
response is streamed so that long PDF reads are not cut off by a single
read timeout and provider failures surface as soon as they are reported.
"""

import json
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx
from httpx_sse import ServerSentEvent, aconnect_sse

from autoreconcile.config import settings
from autoreconcile.logger import get_logger

logger = get_logger(__name__)

JSON_OBJECT_FORMAT: dict[str, Any] = {"type": "json_object"}
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
RETRYABLE_ERROR_CODES = frozenset({"server_error", "timeout"})
DONE_SENTINEL = "[DONE]"


class OpenRouterStreamError(Exception):
    """Raised when OpenRouter rejects the request or aborts the stream.

    ``retryable`` marks rate limits, provider 5xx responses and provider
    crashes reported mid-stream. Transport failures (timeouts, refused
    connections) are not wrapped and surface as ``httpx.HTTPError``.
    """

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


def build_payload(
    messages: list[dict[str, Any]],
    model: str,
    response_format: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "model": model,
        "stream": True,
        "messages": messages,
        "response_format": response_format or JSON_OBJECT_FORMAT,
    }


def _event_content(event: ServerSentEvent, model: str) -> str | None:
    """Return the delta text carried by ``event``.

    ``None`` means the event carries nothing to yield (keep-alive comment,
    unparseable or non-object chunk, role-only delta). A mid-stream error
    report raises ``OpenRouterStreamError`` whatever shape it has.
    """
    try:
        chunk = json.loads(event.data)
    except json.JSONDecodeError:
        logger.warning("Skipping unparseable SSE chunk", model=model, data_preview=event.data[:200])
        return None

    if not isinstance(chunk, dict):
        logger.warning("Skipping non-object SSE chunk", model=model, data_preview=event.data[:200])
        return None

    if "error" in chunk:
        error = chunk["error"]
        if isinstance(error, dict):
            code = error.get("code", "unknown")
            message = error.get("message", str(error))
        else:
            code, message = "unknown", str(error)
        logger.error("OpenRouter reported error mid-stream", model=model, error_code=code, error_message=message)
        retryable = isinstance(code, str) and code in RETRYABLE_ERROR_CODES
        raise OpenRouterStreamError(f"Mid-stream error: {message}", retryable=retryable)

    choices = chunk.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    if choice.get("finish_reason") == "error":
        logger.error("OpenRouter stream finished with error", model=model, chunk_preview=str(chunk)[:500])
        raise OpenRouterStreamError("Stream terminated with error", retryable=True)

    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) and content else None


async def stream_openrouter_json(
    messages: list[dict[str, Any]],
    model: str,
    *,
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float = 180.0,
    connect_timeout: float = 10.0,
    response_format: dict[str, Any] | None = None,
) -> AsyncIterator[str]:
    """Yield the content deltas of a JSON-mode chat completion.

    ``api_key`` and ``base_url`` default to the configured OpenRouter
    settings. ``response_format`` defaults to plain JSON object mode.
    """
    api_key = api_key or settings.openrouter_api_key
    if not api_key:
        raise OpenRouterStreamError("OpenRouter API key not configured", retryable=False)
    base_url = base_url or settings.openrouter_base_url

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "X-Title": "AutoReconcile",
    }
    started = time.perf_counter()
    events = 0
    total_chars = 0

    logger.info("OpenRouter stream opened", model=model, timeout=timeout)
    async with (
        httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=connect_timeout)) as client,
        aconnect_sse(
            client,
            "POST",
            f"{base_url}/chat/completions",
            headers=headers,
            json=build_payload(messages, model, response_format),
        ) as event_source,
    ):
        response = event_source.response
        if response.status_code != 200:
            body = (await response.aread()).decode("utf-8", errors="replace")
            raise OpenRouterStreamError(
                f"HTTP {response.status_code}: {body}",
                retryable=response.status_code in RETRYABLE_STATUS_CODES,
            )

        async for event in event_source.aiter_sse():
            data = event.data
            # Keep-alive comments such as ": OPENROUTER PROCESSING"
            if not data.strip() or data.startswith(":"):
                continue
            if data == DONE_SENTINEL:
                break

            events += 1
            content = _event_content(event, model)
            if content:
                total_chars += len(content)
                yield content

    if not total_chars:
        logger.warning("OpenRouter stream produced no content", model=model, event_count=events)
    logger.info(
        "OpenRouter stream closed",
        model=model,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
        event_count=events,
        total_chars=total_chars,
    )


async def accumulate_stream(stream: AsyncIterator[str]) -> str:
    """Join every chunk of ``stream`` into one string."""
    return "".join([chunk async for chunk in stream])
