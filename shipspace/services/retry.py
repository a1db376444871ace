import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

from shipspace.core.config import settings
from shipspace.core.errors import TransientError

log = logging.getLogger(__name__)

T = TypeVar("T")


def compute_backoff_seconds(attempt: int, base: float = 0.1, cap: float = 2.0) -> float:
    # exponential backoff with jitter
    exp = min(cap, base * (2 ** max(0, attempt - 1)))
    jitter = random.uniform(0, exp / 3)
    return exp + jitter


async def retry_transient(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Re-run `fn` while it raises TransientError. Any other error propagates on the first attempt.
    Only for side-effect-free reads.
    """
    attempts = attempts or settings.retry_attempts
    attempt = 1
    while True:
        try:
            return await fn()
        except TransientError:
            if attempt >= attempts:
                log.warning("transient failure persisted after %d attempts", attempts)
                raise
            delay = compute_backoff_seconds(attempt)
            log.info("transient failure (attempt %d/%d), retrying in %.2fs", attempt, attempts, delay)
            await sleep(delay)
            attempt += 1
