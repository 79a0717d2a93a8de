"""
Unified retry engine.

One bounded-attempt loop serves both generic operations (chunk calls,
summaries) and vendor transport calls. The difference between them lives
in the :class:`RetryPolicy` and in the classifier passed per call.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Type

from ..config import constants
from .error_classifier import ErrorClassification, ErrorClassifier

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Retry limits and delays."""
    max_attempts: int = constants.MAX_RETRIES
    base_delay: float = constants.BASE_RETRY_DELAY_SECONDS
    max_delay: float = constants.MAX_RETRY_DELAY_SECONDS
    # Added before attempt n (n >= 1) as pre_attempt_delay * n
    pre_attempt_delay: float = 0.0
    jitter: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0 or self.pre_attempt_delay < 0:
            raise ValueError("delays must not be negative")

    @classmethod
    def default(cls) -> "RetryPolicy":
        return cls()

    @classmethod
    def transport(cls) -> "RetryPolicy":
        """Policy for vendor chat-completion calls."""
        return cls(
            max_attempts=constants.TRANSPORT_MAX_ATTEMPTS,
            base_delay=constants.BASE_RETRY_DELAY_SECONDS,
            max_delay=constants.MAX_RETRY_DELAY_SECONDS,
            pre_attempt_delay=constants.TRANSPORT_PRE_ATTEMPT_DELAY_SECONDS,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the failed 0-based ``attempt``."""
        delay = self.base_delay * (2 ** attempt)
        if self.jitter and delay > 0:
            delay += random.uniform(0, delay / 2)
        return min(delay, self.max_delay)


@dataclass
class RetryState:
    """Tracks one retry loop invocation."""
    attempt_count: int = 0
    last_error: Optional[Exception] = None
    next_delay: float = 0.0
    total_delay: float = 0.0

    def record_failure(self, error: Exception, delay: float):
        self.last_error = error
        self.next_delay = delay
        self.total_delay += delay


class RetryExhaustedError(Exception):
    """All attempts failed with retryable errors."""

    def __init__(self, operation: str, attempts: int, last_error: Exception):
        super().__init__(f"{operation}: max retries exceeded after {attempts} attempts: {last_error}")
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error


class RetryManager:
    """
    Executes async operations with bounded retries.

    This class handles:
    - Error classification through a per-call classifier
    - Exponential backoff with jitter, or the classifier's cool-down
    - A growing pre-attempt delay for rate-limit avoidance
    - Prompt cancellation of pending sleeps
    """

    def __init__(
        self,
        default_policy: Optional[RetryPolicy] = None,
        classifier: Type[ErrorClassifier] = ErrorClassifier
    ):
        self.default_policy = default_policy or RetryPolicy.default()
        self.classifier = classifier

    async def execute_with_retry(
        self,
        func: Callable[[], Awaitable[Any]],
        *,
        operation: str = "operation",
        policy: Optional[RetryPolicy] = None,
        classifier: Optional[Type[ErrorClassifier]] = None
    ) -> Any:
        """
        Execute ``func`` with retry logic.

        Args:
            func: Zero-argument coroutine factory
            operation: Label used in logs and in the exhaustion error
            policy: Overrides the manager's default policy
            classifier: Overrides the manager's default classifier

        Returns:
            Result from the first successful attempt

        Raises:
            RetryExhaustedError: When every attempt failed with a retryable error
            Exception: The original error when it is not retryable
        """
        policy = policy or self.default_policy
        classifier = classifier or self.classifier
        state = RetryState()

        while state.attempt_count < policy.max_attempts:
            if state.attempt_count > 0 and policy.pre_attempt_delay > 0:
                await asyncio.sleep(policy.pre_attempt_delay * state.attempt_count)

            try:
                result = await func()
            except Exception as error:  # noqa: BLE001
                state.attempt_count += 1
                classification = classifier.classify_error(error)

                if not classification.is_retryable:
                    logger.debug(
                        f"{operation} failed with non-retryable error: {error}",
                        extra={"operation": operation, "category": classification.category.value}
                    )
                    raise

                if state.attempt_count >= policy.max_attempts:
                    state.record_failure(error, 0.0)
                    break

                delay = self._calculate_delay(classification, state.attempt_count - 1, policy)
                state.record_failure(error, delay)
                logger.warning(
                    f"{operation} attempt {state.attempt_count}/{policy.max_attempts} failed: {error}. "
                    f"Retrying in {delay:.1f}s",
                    extra={
                        "operation": operation,
                        "attempt": state.attempt_count,
                        "category": classification.category.value,
                        "delay": delay,
                    }
                )
                await asyncio.sleep(delay)
                continue

            if state.attempt_count > 0:
                logger.info(
                    f"{operation} succeeded after {state.attempt_count} retries",
                    extra={"operation": operation, "total_delay": state.total_delay}
                )
            return result

        logger.error(
            f"{operation} exhausted {state.attempt_count} attempts",
            extra={"operation": operation, "total_delay": state.total_delay}
        )
        raise RetryExhaustedError(operation, state.attempt_count, state.last_error) from state.last_error

    def _calculate_delay(self, classification: ErrorClassification, attempt: int, policy: RetryPolicy) -> float:
        if classification.suggested_delay is not None:
            return min(classification.suggested_delay, policy.max_delay)
        return policy.backoff_delay(attempt)
