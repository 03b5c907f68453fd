"""
Retry scheduling and the explicit retry loop.

``RetryScheduler`` answers "retry, and after how long?" for a classified
error. ``RetryManager`` runs the loop: call, classify, decide, notify the
observer, sleep, re-issue.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..config.constants import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
)
from .error_classifier import ErrorClassifier
from .errors import AppError, NetworkError, ServerError

logger = logging.getLogger(__name__)

# (error, attempt, delay_ms)
RetryObserver = Callable[[AppError, int, float], Any]


@dataclass
class RetryPolicy:
    """Backoff parameters."""
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: float = DEFAULT_BASE_DELAY_MS
    max_delay_ms: float = DEFAULT_MAX_DELAY_MS
    jitter_factor: float = 0.0


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay_ms: float = 0.0


class RetryScheduler:
    """Pure retry decisions for classified errors."""

    def __init__(self, policy: Optional[RetryPolicy] = None):
        self.policy = policy or RetryPolicy()

    def should_retry(
        self,
        error: AppError,
        attempt: int = 0,
        max_retries: Optional[int] = None
    ) -> RetryDecision:
        """
        Decide whether to retry.

        Args:
            error: The classified error
            attempt: Retries already performed by the caller
            max_retries: Override for the policy limit

        Returns:
            RetryDecision with the delay in milliseconds when retrying
        """
        limit = self.policy.max_retries if max_retries is None else max_retries

        if not error.retryable:
            return RetryDecision(retry=False)

        # Network errors also carry their own counter; the higher one wins
        counter = attempt
        if isinstance(error, NetworkError):
            counter = max(error.retry_count, attempt)
        if counter >= limit:
            return RetryDecision(retry=False)

        return RetryDecision(retry=True, delay_ms=self.calculate_delay(error, counter))

    def calculate_delay(self, error: AppError, counter: int) -> float:
        """Exponential backoff in ms, overridden by Retry-After; always capped."""
        cap = self.policy.max_delay_ms

        if isinstance(error, ServerError) and error.retry_after is not None:
            return min(error.retry_after * 1000.0, cap)

        delay = self.policy.base_delay_ms * (2 ** counter)
        if self.policy.jitter_factor > 0:
            delay += random.uniform(0, self.policy.jitter_factor) * delay
        return min(delay, cap)


class RetryManager:
    """
    Executes async operations with retry.

    Errors are classified before every decision, so callers always see an
    ``AppError``. On exhaustion the last classified error is raised.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        self.scheduler = RetryScheduler(policy)
        self._sleep = sleep or asyncio.sleep

    @property
    def policy(self) -> RetryPolicy:
        return self.scheduler.policy

    async def execute_with_retry(
        self,
        func: Callable[[], Awaitable[Any]],
        *,
        max_retries: Optional[int] = None,
        on_retry: Optional[RetryObserver] = None
    ) -> Any:
        """
        Execute ``func`` until it succeeds or the error is not retryable.

        Args:
            func: Zero-argument coroutine function issuing the call
            max_retries: Override for the policy limit
            on_retry: Called as ``on_retry(error, attempt, delay_ms)`` before
                each sleep

        Returns:
            Result of the first successful call

        Raises:
            AppError: The final classified error
        """
        attempt = 0

        while True:
            try:
                return await func()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                error = ErrorClassifier.classify(exc)

                # A fresh network error continues the count of this loop
                if isinstance(error, NetworkError) and error.retry_count < attempt:
                    error.retry_count = attempt

                decision = self.scheduler.should_retry(error, attempt, max_retries)
                if not decision.retry:
                    if error is exc:
                        raise
                    raise error from exc

                attempt += 1
                if isinstance(error, NetworkError):
                    error.retry_count += 1

                logger.warning(
                    f"Retrying after {error.code.value} "
                    f"(attempt {attempt}, delay {decision.delay_ms:.0f}ms)",
                    extra={
                        "error_type": error.type.value,
                        "error_code": error.code.value,
                        "attempt": attempt,
                        "delay_ms": decision.delay_ms,
                    }
                )

                if on_retry is not None:
                    try:
                        on_retry(error, attempt, decision.delay_ms)
                    except Exception:  # noqa: BLE001
                        logger.exception("Retry observer raised; continuing")

                await self._sleep(decision.delay_ms / 1000.0)
