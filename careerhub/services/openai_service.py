"""Wrapper utilities around the OpenAI client and the completion relay."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

import openai
from flask import current_app
from openai import OpenAI

from careerhub.errors import ApiError, ContentTooLarge, RateLimited, UpstreamError

_LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

# Process-wide client, built on first use and reused by every request.
_client: Optional[OpenAI] = None


def get_openai_client() -> OpenAI:
    """Return the shared OpenAI client, creating it from app config once."""
    global _client
    if _client is None:
        api_key = current_app.config.get("OPENAI_API_KEY")
        if not api_key:
            raise UpstreamError(detail="OPENAI_API_KEY is not configured")
        _client = OpenAI(
            api_key=api_key,
            timeout=current_app.config.get("OPENAI_TIMEOUT_SECONDS", 30),
            max_retries=0,
        )
    return _client


def reset_openai_client() -> None:
    global _client
    _client = None


@dataclass(frozen=True)
class CompletionRequest:
    messages: List[Dict[str, str]]
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    response_format: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class Buffered:
    """A complete generated message."""

    text: str


@dataclass
class Stream:
    """Incremental text chunks; iteration ends when the upstream closes or fails.

    Closing the stream (werkzeug does this when the client goes away) also
    closes the upstream connection, even if iteration never started.
    """

    chunks: Iterator[str]
    upstream: Any = None

    def __iter__(self) -> Iterator[str]:
        return self.chunks

    def close(self) -> None:
        for resource in (self.chunks, self.upstream):
            close = getattr(resource, "close", None)
            if callable(close):
                close()


CompletionResult = Union[Buffered, Stream]


def translate_error(exc: Exception) -> ApiError:
    """Map SDK exceptions onto the API error taxonomy."""
    if isinstance(exc, openai.RateLimitError):
        return RateLimited()
    if isinstance(exc, openai.APITimeoutError):
        return UpstreamError(detail="upstream_timeout")
    if isinstance(exc, openai.APIStatusError) and exc.status_code == 413:
        return ContentTooLarge("Content too long. Please reduce the length of your inputs.")
    return UpstreamError()


def relay(request: CompletionRequest, *, stream: bool = False, client: Any = None) -> CompletionResult:
    """Send a completion request upstream in buffered or streaming mode.

    In streaming mode the upstream call is opened here, so connection and
    status failures raise before any byte reaches the caller.
    """
    client = client or get_openai_client()
    kwargs: Dict[str, Any] = {
        "model": request.model or current_app.config.get("OPENAI_MODEL", DEFAULT_MODEL),
        "messages": request.messages,
        "temperature": request.temperature,
    }
    if request.max_tokens:
        kwargs["max_tokens"] = request.max_tokens
    if request.response_format is not None:
        kwargs["response_format"] = request.response_format

    try:
        response = client.chat.completions.create(stream=stream, **kwargs)
    except openai.OpenAIError as exc:
        _LOGGER.warning("Completion request failed: %s", type(exc).__name__)
        raise translate_error(exc) from exc

    if stream:
        return Stream(_iter_chunks(response), upstream=response)

    choices = getattr(response, "choices", None) or []
    text = choices[0].message.content if choices else None
    if not text:
        raise UpstreamError(detail="empty_completion")
    return Buffered(text)


def _iter_chunks(upstream: Any) -> Iterator[str]:
    """Yield delta text in arrival order, closing the upstream on every exit path."""
    try:
        for event in upstream:
            choices = getattr(event, "choices", None)
            if not choices:
                continue
            text = getattr(choices[0].delta, "content", None)
            if text:
                yield text
    except Exception:
        # The caller sees an abrupt end; nothing is fabricated after the failure.
        _LOGGER.warning("Completion stream ended with an upstream error", exc_info=True)
    finally:
        close = getattr(upstream, "close", None)
        if callable(close):
            close()
