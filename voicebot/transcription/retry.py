"""Linear-backoff retry for remote transcription calls."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from voicebot.constants import MSG_RETRY_FAILED

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base_delay: float = 1.0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.base_delay * attempt


async def with_retry(operation: Callable[[], Awaitable[T]], policy: RetryPolicy) -> T:
    """Await ``operation`` until it succeeds or ``policy.attempts`` is used up.

    Every exception is treated the same way; the last one is re-raised.
    """
    for attempt in range(1, policy.attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            logger.warning(MSG_RETRY_FAILED, attempt, policy.attempts, exc)
            match attempt == policy.attempts:
                case True:
                    raise
                case False:
                    await asyncio.sleep(policy.delay_for(attempt))
    raise RuntimeError("Retry limit exceeded")
