"""Retry policy for outbound calls."""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


class RetryableError(Exception):
    """Raised by an attempt to ask for another try."""
    pass


@dataclass
class RetryPolicy:
    """Exponential backoff with jitter.

    delay(n) = min(base_delay * multiplier**n, max_delay) * (1 ± jitter)
    where n is the number of attempts already made, starting at 0.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0
    jitter: float = 0.1

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay,
            max_delay=config.max_delay,
            jitter=config.jitter,
        )

    def delay_for(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        delay = min(self.base_delay * (self.multiplier ** attempt), self.max_delay)
        if self.jitter:
            delay *= 1 + self.jitter * (2 * rng() - 1)
        return max(delay, 0.0)

    async def run(
        self,
        fn: Callable[[], Awaitable[T]],
        retry_on: Tuple[Type[BaseException], ...] = (RetryableError,),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
        on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    ) -> T:
        """Call fn until it succeeds or attempts run out.

        Only exceptions in retry_on are retried; the last one is re-raised.
        """
        attempts = max(self.max_attempts, 1)
        for attempt in range(attempts):
            try:
                return await fn()
            except retry_on as e:
                if attempt == attempts - 1:
                    raise
                delay = self.delay_for(attempt, rng)
                if on_retry:
                    on_retry(attempt + 1, e, delay)
                await sleep(delay)
        raise RuntimeError("unreachable")
