"""Transient error retry with exponential backoff and jitter.

The scoring engine never retries on its own. Callers that want backoff
wrap a judge or embedder in RetryingJudge / RetryingEmbedder before
handing it to a scorer. Handles timeout, connection, and HTTP
status-code errors that are likely transient.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from arbiter.adapters.base import BaseEmbedder, BaseJudge, EmbeddingResult

# Exception types considered transient (network-level issues)
TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (TimeoutError, ConnectionError)

# HTTP status codes considered transient (rate-limit, server errors)
TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 529})


def _is_transient(exc: Exception) -> bool:
    """Check if an exception represents a transient error.

    Matches against known transient exception types, then checks
    for HTTP status code attributes commonly set by SDK exceptions.
    """
    if isinstance(exc, TRANSIENT_EXCEPTIONS):
        return True

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if status is not None and status in TRANSIENT_STATUS_CODES:
        return True

    return False


async def retry_with_backoff(
    coro_factory: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> Any:
    """Execute a coroutine with retry on transient errors.

    Uses exponential backoff with full jitter to avoid thundering herd.
    Raises the exception on non-transient errors or when retries are exhausted.

    Args:
        coro_factory: Callable that creates a new awaitable each call.
        max_retries: Maximum number of retry attempts (total calls = max_retries + 1).
        base_delay: Initial backoff delay in seconds.
        max_delay: Maximum backoff delay cap in seconds.

    Returns:
        The awaited result of the first successful call.
    """
    for attempt in range(max_retries + 1):
        try:
            return await coro_factory()
        except Exception as exc:
            is_last = attempt == max_retries
            if not _is_transient(exc) or is_last:
                raise

            delay = min(base_delay * (2 ** attempt), max_delay)
            jitter = random.uniform(0, delay)  # noqa: S311
            logger.warning(
                "transient {} on attempt {}/{}, retrying in {:.2f}s",
                type(exc).__name__,
                attempt + 1,
                max_retries + 1,
                jitter,
            )
            await asyncio.sleep(jitter)

    # Unreachable, but satisfies type checker
    raise RuntimeError("Retry loop exited unexpectedly")  # pragma: no cover


class RetryingJudge(BaseJudge):
    """Judge wrapper that retries transient generation failures."""

    def __init__(
        self,
        inner: BaseJudge,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        self.inner = inner
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    async def generate_structured(
        self, schema: dict[str, Any], prompt: str
    ) -> dict[str, Any]:
        return await retry_with_backoff(
            lambda: self.inner.generate_structured(schema, prompt),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )

    def provider_name(self) -> str:
        return self.inner.provider_name()


class RetryingEmbedder(BaseEmbedder):
    """Embedder wrapper that retries transient embedding failures."""

    def __init__(
        self,
        inner: BaseEmbedder,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        self.inner = inner
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    async def embed_many(self, values: list[str]) -> EmbeddingResult:
        return await retry_with_backoff(
            lambda: self.inner.embed_many(values),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )

    def provider_name(self) -> str:
        return self.inner.provider_name()
