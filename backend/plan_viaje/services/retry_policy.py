"""Retry policy: re-runs an async operation on transient network failures."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry.

    max_attempts counts the first call, so the default of 2 means
    "retry exactly once". Only exceptions in retry_on are retried;
    everything else propagates on the first failure.
    """
    max_attempts: int = 2
    delay: float = 0.45
    retry_on: tuple[type[BaseException], ...] = (
        httpx.TimeoutException,
        httpx.TransportError,
    )
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    def is_retryable(self, exc: BaseException) -> bool:
        return isinstance(exc, self.retry_on)

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "operation") -> T:
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.is_retryable(e) or attempt >= self.max_attempts:
                    raise
                logger.warning(
                    f"{label} failed (attempt {attempt}/{self.max_attempts}): "
                    f"{type(e).__name__}: {e}, retrying in {self.delay:.2f}s"
                )
                attempt += 1
                if self.delay > 0:
                    await self.sleep(self.delay)
