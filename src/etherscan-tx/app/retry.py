import logging
from dataclasses import dataclass
from typing import Callable

from .classifier import ClassifiedResponse
from .config import DEFAULT_BACKOFF_SECONDS, DEFAULT_MAX_RETRIES
from .context import CallContext

logger = logging.getLogger(__name__)


def is_retryable(outcome: ClassifiedResponse) -> bool:
    return outcome.retryable


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry for provider throttling only.
    Transport errors are exceptions and pass straight through `run`.
    """

    max_attempts: int = DEFAULT_MAX_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    multiplier: float = 2.0
    max_backoff_seconds: float = 8.0

    def delay_for(self, attempt: int) -> float:
        delay = self.backoff_seconds * (self.multiplier ** (attempt - 1))
        return min(delay, self.max_backoff_seconds)

    def run(
        self,
        ctx: CallContext,
        call: Callable[[], ClassifiedResponse],
        retryable: Callable[[ClassifiedResponse], bool] = is_retryable,
    ) -> ClassifiedResponse:
        attempts = max(1, self.max_attempts)
        outcome = call()
        for attempt in range(1, attempts):
            if not retryable(outcome):
                return outcome
            delay = self.delay_for(attempt)
            logger.warning(
                "Rate limited (attempt %d/%d), retrying in %.2fs: %s",
                attempt,
                attempts,
                delay,
                outcome.message,
            )
            if not ctx.wait(delay):
                return outcome
            outcome = call()
        return outcome
