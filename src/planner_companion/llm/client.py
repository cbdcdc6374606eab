# src/planner_companion/llm/client.py

"""
Streaming chat client for an OpenAI-compatible endpoint (OpenRouter by default).

Models are tried in the configured order until one produces text:
- no content within the first-token timeout, rate limits, network errors -> next model
- 404 (model gone) -> next model, and the model is skipped for an hour
- auth errors -> fail at once
Once text has been yielded the answer belongs to that model: a later failure
is raised, never patched with another model's output.
All failures surface as RuntimeError; the chat layer decides about offline replies.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

NOT_FOUND_COOLDOWN_SECONDS = 3600.0


class ErrorKind(StrEnum):
    AUTH = "auth"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    OTHER = "other"


# Matched by class name so both openai and httpx exceptions (and test doubles) classify.
_KIND_BY_NAME = {
    "AuthenticationError": ErrorKind.AUTH,
    "PermissionDeniedError": ErrorKind.AUTH,
    "UnauthorizedError": ErrorKind.AUTH,
    "NotFoundError": ErrorKind.NOT_FOUND,
    "RateLimitError": ErrorKind.RATE_LIMIT,
    "TooManyRequestsError": ErrorKind.RATE_LIMIT,
    "APIConnectionError": ErrorKind.NETWORK,
    "APITimeoutError": ErrorKind.NETWORK,
    "Timeout": ErrorKind.NETWORK,
    "ConnectTimeout": ErrorKind.NETWORK,
    "ReadTimeout": ErrorKind.NETWORK,
    "WriteTimeout": ErrorKind.NETWORK,
    "TimeoutError": ErrorKind.NETWORK,
}

_FINAL_MESSAGES = {
    ErrorKind.RATE_LIMIT: "LLM is rate-limited. Try again later.",
    ErrorKind.NETWORK: "LLM network/timeout error. Try again later or change models.",
}

_SETUP_HINTS = {
    "LLM API key is not set": "Assistant is not configured (missing API key). Set PLANNER_OPENROUTER_API_KEY in .env.",
    "LLM model list is empty": "Assistant is not configured (no models). Set PLANNER_LLM_MODELS in .env.",
    "LLM base URL is not set": "Assistant is not configured (missing base URL). Set PLANNER_OPENROUTER_BASE_URL in .env.",
}


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, openai.RateLimitError):
        return ErrorKind.RATE_LIMIT
    return _KIND_BY_NAME.get(exc.__class__.__name__, ErrorKind.OTHER)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    for needle, hint in _SETUP_HINTS.items():
        if needle in msg:
            return hint
    return msg


@dataclass(frozen=True)
class Timeouts:
    """Seconds. Read timeout is never shorter than the first-token timeout."""

    first_token: float = 20.0
    read: float = 25.0
    connect: float = 5.0

    @classmethod
    def from_env(cls) -> Timeouts:
        def read_float(suffix: str, default: float) -> float:
            raw = (os.getenv(f"PLANNER_LLM_{suffix}_TIMEOUT_SECONDS") or "").strip()
            try:
                return float(raw) if raw else default
            except ValueError:
                return default

        first_token = read_float("FIRST_TOKEN", cls.first_token)
        return cls(
            first_token=first_token,
            read=max(read_float("READ", cls.read), first_token),
            connect=read_float("CONNECT", cls.connect),
        )

    def http(self) -> httpx.Timeout:
        return httpx.Timeout(connect=self.connect, read=self.read, write=10.0, pool=self.connect)


def _chunk_text(chunk: Any) -> str | None:
    try:
        delta = chunk.choices[0].delta
    except (AttributeError, IndexError):
        return None
    return getattr(delta, "content", None) if delta is not None else None


class OpenRouterLLMClient:
    def __init__(self, settings: Any) -> None:
        api_key = str(getattr(settings, "openrouter_api_key", None) or "").strip()
        base_url = str(getattr(settings, "openrouter_base_url", "") or "").strip()
        if not api_key:
            raise RuntimeError("LLM API key is not set. Set PLANNER_OPENROUTER_API_KEY in your .env.")
        if not base_url:
            raise RuntimeError("LLM base URL is not set. Set PLANNER_OPENROUTER_BASE_URL in your .env.")

        self._models: List[str] = [m.strip() for m in getattr(settings, "llm_models", []) or [] if m and m.strip()]
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._skip_until: dict[str, float] = {}
        self._timeouts = Timeouts.from_env()

        # SDK retries off: a failing model should hand over to the next one quickly.
        self._client = OpenAI(base_url=base_url, api_key=api_key, timeout=self._timeouts.http(), max_retries=0)

    def _create_stream(self, *, model: str, messages: list[ChatMessage]) -> Any:
        return self._client.chat.completions.create(
            model=model,
            stream=True,
            extra_headers=self._headers or None,
            messages=messages,  # type: ignore[arg-type]
            timeout=self._timeouts.http(),
        )

    def _available_models(self) -> list[str]:
        now = time.monotonic()
        return [m for m in self._models if self._skip_until.get(m, 0.0) <= now]

    def _stream_model(self, model: str, messages: list[ChatMessage]) -> Iterator[str]:
        """Yield one model's text. Raises TimeoutError if nothing arrives in time."""
        started = time.monotonic()
        deadline = started + self._timeouts.first_token
        produced = False

        stream = self._create_stream(model=model, messages=messages)
        try:
            for chunk in stream:
                if not produced and time.monotonic() > deadline:
                    raise TimeoutError(f"First token timeout on model: {model}")
                text = _chunk_text(chunk)
                if not text:
                    continue
                if not produced:
                    logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - started)
                    produced = True
                yield text
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                try:
                    close()
                except Exception:
                    logger.debug("LLM: stream close failed", exc_info=True)

        if not produced:
            raise RuntimeError(f"Model returned no content: {model}")

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set PLANNER_LLM_MODELS in your .env.")

        full: list[ChatMessage] = [{"role": "system", "content": system_prompt}, *messages]
        last_error: Optional[Exception] = None

        for model in self._available_models():
            logger.info("LLM: trying model=%s (first_token_timeout=%.1fs)", model, self._timeouts.first_token)
            produced = False
            try:
                for text in self._stream_model(model, full):
                    produced = True
                    yield text
                logger.debug("LLM: completed with model=%s", model)
                return
            except Exception as e:
                kind = classify_error(e)
                if produced:
                    logger.info("LLM: stream from model=%s broke mid-answer (%s)", model, e.__class__.__name__)
                    raise RuntimeError("LLM stream was interrupted. Try again.") from e
                if kind is ErrorKind.AUTH:
                    raise RuntimeError(
                        "LLM authentication failed. Check your API key (PLANNER_OPENROUTER_API_KEY)."
                    ) from e
                if kind is ErrorKind.NOT_FOUND:
                    self._skip_until[model] = time.monotonic() + NOT_FOUND_COOLDOWN_SECONDS
                logger.info("LLM: %s on model=%s (%s), trying next", kind.value, model, e.__class__.__name__)
                last_error = e

        if last_error is None:
            raise RuntimeError("All LLM models failed.")
        message = _FINAL_MESSAGES.get(classify_error(last_error), "All LLM models failed.")
        raise RuntimeError(message) from last_error
