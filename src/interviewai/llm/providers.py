from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from typing import Any, Literal

import openai
from openai import OpenAI

from interviewai.config import Settings, get_settings

logger = logging.getLogger(__name__)

CompletionErrorKind = Literal[
    "rate_limit",
    "input_too_large",
    "network",
    "upstream_error",
    "authentication",
    "unknown",
]

USER_MESSAGES: dict[str, str] = {
    "rate_limit": "The AI service is receiving too many requests. Please wait a moment and try again.",
    "input_too_large": "The request is too large for the AI service. Please shorten it and try again.",
    "network": "Could not reach the AI service. Please check your connection and try again.",
    "upstream_error": "The AI service is temporarily unavailable. Please try again shortly.",
    "authentication": "The AI service is not configured correctly. Please check the API key.",
    "unknown": "Failed to generate AI response",
}
RETRYABLE_KINDS = frozenset({"rate_limit", "network", "upstream_error"})

_SIZE_HINTS = ("too long", "too large", "maximum context", "token limit", "exceeds")
_AUTH_HINTS = ("api key", "api_key", "unauthorized", "permission denied")
_RATE_HINTS = ("rate limit", "quota", "resource_exhausted", "too many requests")
_NETWORK_HINTS = ("timed out", "timeout", "connection", "network")


class CompletionError(Exception):
    def __init__(self, kind: CompletionErrorKind, detail: str = ""):
        self.kind = kind
        self.retryable = kind in RETRYABLE_KINDS
        self.user_message = USER_MESSAGES[kind]
        super().__init__(detail or self.user_message)


def classify_error(exc: BaseException) -> CompletionErrorKind:
    if isinstance(exc, CompletionError):
        return exc.kind
    if isinstance(exc, openai.RateLimitError):
        return "rate_limit"
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return "authentication"
    if isinstance(exc, (openai.APIConnectionError, TimeoutError, ConnectionError)):
        return "network"

    status_code = getattr(exc, "status_code", None)
    message = str(exc).strip().lower()

    if status_code == 429 or any(hint in message for hint in _RATE_HINTS):
        return "rate_limit"
    if status_code in {401, 403} or any(hint in message for hint in _AUTH_HINTS):
        return "authentication"
    if status_code == 413 or (status_code in {None, 400} and any(hint in message for hint in _SIZE_HINTS)):
        return "input_too_large"
    if isinstance(status_code, int) and status_code >= 500:
        return "upstream_error"
    if status_code is None and any(hint in message for hint in _NETWORK_HINTS):
        return "network"
    return "unknown"


class CompletionClient:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: Any | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self.settings.ai_model

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(
                base_url=self.settings.ai_base_url,
                api_key=self.settings.ai_api_key,
                timeout=float(self.settings.ai_timeout_sec),
                max_retries=0,
            )
        return self._client

    def complete(self, prompt: str) -> str:
        if self._client is None and not self.settings.ai_enabled:
            raise CompletionError("authentication", "AI_API_KEY is not configured")

        attempts = self.settings.ai_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                return self._complete_once(prompt)
            except Exception as exc:
                kind = classify_error(exc)
                error = CompletionError(kind, str(exc))
                if not error.retryable or attempt == attempts:
                    logger.warning(
                        "Completion failed kind=%s attempt=%s/%s error=%s",
                        kind,
                        attempt,
                        attempts,
                        exc,
                    )
                    raise error from exc

                delay = self.settings.ai_retry_delay_sec * attempt
                logger.warning(
                    "Completion attempt %s/%s failed kind=%s; retrying in %.1fs",
                    attempt,
                    attempts,
                    kind,
                    delay,
                )
                self._sleep(delay)
        raise CompletionError("unknown")

    def _complete_once(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.settings.ai_max_output_tokens,
        )
        return self._extract_chat_text(response)

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""

        message = getattr(choices[0], "message", None)
        if message is None:
            return ""

        content = getattr(message, "content", "")
        if isinstance(content, str):
            return content
        if content is None:
            return ""
        return str(content)


_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def find_json_object(content: str) -> str | None:
    match = _JSON_OBJECT.search(content)
    return match.group(0) if match else None

