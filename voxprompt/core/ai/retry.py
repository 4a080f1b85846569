"""Retry policy applied by the AI gateway to remote calls."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from voxprompt.core.ai.base import AIAuthenticationError, AIProviderError
from voxprompt.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """
    Bounded retry with a fixed or multiplicative delay.

    The delay before attempt ``n + 1`` is
    ``delay_seconds * backoff_factor ** (n - 1)``, so ``backoff_factor=1.0``
    gives a flat pause. Errors listed in ``give_up_on`` are raised at once
    even when they also match ``retry_on``.
    """

    max_attempts: int = 2
    delay_seconds: float = 1.0
    backoff_factor: float = 1.0
    retry_on: tuple[type[BaseException], ...] = (AIProviderError,)
    give_up_on: tuple[type[BaseException], ...] = (AIAuthenticationError,)
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Pause after the failed *attempt* (1-based)."""
        return self.delay_seconds * (self.backoff_factor ** (attempt - 1))

    def should_retry(self, exc: BaseException) -> bool:
        if isinstance(exc, self.give_up_on):
            return False
        return isinstance(exc, self.retry_on)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "operation",
    ) -> tuple[T, int]:
        """
        Run *operation* until it succeeds or attempts run out.

        Returns:
            The operation result and the number of attempts it took.

        Raises:
            The last error raised by *operation*.
        """
        attempt = 1
        while True:
            try:
                result = await operation()
            except Exception as exc:
                if not self.should_retry(exc) or attempt >= self.max_attempts:
                    logger.error(
                        f"{operation_name}_failed",
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                        error=str(exc),
                    )
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    f"{operation_name}_attempt_failed",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    retry_in_seconds=delay,
                    error=str(exc),
                )
                await self.sleep(delay)
                attempt += 1
                continue

            if attempt > 1:
                logger.info(f"{operation_name}_succeeded_after_retry", attempt=attempt)
            return result, attempt
