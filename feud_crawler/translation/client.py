"""Translation service client and overload-aware retry wrapper."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Protocol

import deepl
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

_OVERLOAD_MARKERS = ("too many requests", "high load")


class TranslationError(RuntimeError):
    """Base class for translation failures."""


class RateLimitError(TranslationError):
    """The translation service signalled overload or rate limiting."""


class RetryExhaustedError(TranslationError):
    """Every allowed attempt failed with an overload signal."""


class TextTranslator(Protocol):
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Return ``text`` translated from ``source_lang`` to ``target_lang``."""


def is_overload(exc: BaseException) -> bool:
    if isinstance(exc, (RateLimitError, deepl.TooManyRequestsException)):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _OVERLOAD_MARKERS)


class DeepLTranslator:
    """Adapter exposing the blocking DeepL client as an async translator."""

    def __init__(self, auth_key: str | None, client: Any | None = None) -> None:
        if not auth_key:
            raise ValueError(
                "DeepL auth key is missing; set translation.auth_key in config.yaml "
                "or the DEEPL_AUTH_KEY environment variable"
            )
        self._client = client or deepl.Translator(auth_key)

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        try:
            result = await asyncio.to_thread(
                self._client.translate_text,
                text,
                source_lang=source_lang.upper(),
                target_lang=target_lang.upper(),
            )
        except Exception as exc:
            if is_overload(exc):
                raise RateLimitError(str(exc)) from exc
            raise
        return result.text


class RetryingTranslator:
    """Retry overload failures with capped exponential backoff; fail fast otherwise.

    Attempt ``n`` that fails with an overload waits
    ``min(backoff_base * 2 ** n, backoff_cap)`` seconds before attempt ``n + 1``.
    """

    def __init__(
        self,
        translator: TextTranslator,
        max_attempts: int = 5,
        backoff_base: float = 1.0,
        backoff_cap: float = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.translator = translator
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self.logger = logger or structlog.get_logger("feud_crawler.translation")
        self._sleep = sleep

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=2 * self.backoff_base, max=self.backoff_cap),
            retry=retry_if_exception_type(RateLimitError),
            sleep=self._sleep,
            before_sleep=self._log_retry,
        )
        result = ""
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._call(text, source_lang, target_lang)
        except RetryError as exc:
            last = exc.last_attempt.exception()
            raise RetryExhaustedError(
                f"Gave up after {self.max_attempts} attempts: {last}"
            ) from last
        return result

    async def _call(self, text: str, source_lang: str, target_lang: str) -> str:
        try:
            return await self.translator.translate(text, source_lang, target_lang)
        except RateLimitError:
            raise
        except Exception as exc:
            if is_overload(exc):
                raise RateLimitError(str(exc)) from exc
            raise

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else None
        error = retry_state.outcome.exception() if retry_state.outcome else None
        self.logger.warning(
            "translation_rate_limited",
            attempt=retry_state.attempt_number,
            max_attempts=self.max_attempts,
            delay=delay,
            error=str(error),
        )


__all__ = [
    "DeepLTranslator",
    "RateLimitError",
    "RetryExhaustedError",
    "RetryingTranslator",
    "TextTranslator",
    "TranslationError",
    "is_overload",
]
