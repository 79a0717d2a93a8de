"""Unit tests for the retry engine."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from landr_agent.config.errors import ConfigurationError
from landr_agent.reliability.error_classifier import VendorErrorClassifier
from landr_agent.reliability.retry import RetryExhaustedError, RetryManager, RetryPolicy
from tests.helpers.mock_exceptions import (
    MockServerError,
    make_bad_request_error,
    make_rate_limit_error,
    make_tool_use_failed_error,
)

pytestmark = pytest.mark.unit


def failing(error, times=None, result="ok"):
    """Coroutine factory failing ``times`` times (always when None) before returning ``result``."""
    calls = []

    async def func():
        calls.append(1)
        if times is None or len(calls) <= times:
            raise error
        return result

    func.calls = calls
    return func


@pytest.fixture
def manager():
    return RetryManager(RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0, jitter=False))


class TestRetryPolicy:

    def test_defaults(self):
        policy = RetryPolicy.default()
        assert policy.max_attempts == 3
        assert policy.base_delay == 2.0
        assert policy.max_delay == 60.0
        assert policy.pre_attempt_delay == 0.0

    def test_transport_policy(self):
        policy = RetryPolicy.transport()
        assert policy.max_attempts == 4
        assert policy.pre_attempt_delay == 1.0

    def test_backoff_without_jitter(self):
        policy = RetryPolicy(base_delay=2.0, max_delay=60.0, jitter=False)
        assert [policy.backoff_delay(n) for n in range(4)] == [2.0, 4.0, 8.0, 16.0]

    def test_backoff_capped(self):
        policy = RetryPolicy(base_delay=2.0, max_delay=10.0)
        assert policy.backoff_delay(10) == 10.0

    def test_jitter_bounded(self):
        policy = RetryPolicy(base_delay=2.0, max_delay=60.0, jitter=True)
        for _ in range(20):
            assert 4.0 <= policy.backoff_delay(1) <= 6.0

    @pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"base_delay": -1.0}, {"pre_attempt_delay": -0.5}])
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestExecuteWithRetry:

    @pytest.mark.asyncio
    async def test_success_first_attempt(self, manager):
        func = failing(RuntimeError("unused"), times=0, result=42)
        assert await manager.execute_with_retry(func) == 42
        assert len(func.calls) == 1

    @pytest.mark.asyncio
    async def test_transient_then_success(self, manager):
        func = failing(MockServerError(status_code=503), times=2)
        assert await manager.execute_with_retry(func, operation="summary") == "ok"
        assert len(func.calls) == 3

    @pytest.mark.asyncio
    async def test_exhaustion_makes_exactly_max_attempts(self, manager):
        error = MockServerError(status_code=502)
        func = failing(error)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await manager.execute_with_retry(func, operation="chunk0")

        assert len(func.calls) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is error
        assert exc_info.value.__cause__ is error
        assert "chunk0" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_retryable_raised_after_one_attempt(self, manager):
        error = ValueError("bad input")
        func = failing(error)

        with pytest.raises(ValueError) as exc_info:
            await manager.execute_with_retry(func)

        assert exc_info.value is error
        assert len(func.calls) == 1

    @pytest.mark.asyncio
    async def test_configuration_error_not_retried(self, manager):
        func = failing(ConfigurationError("missing key"))

        with pytest.raises(ConfigurationError):
            await manager.execute_with_retry(func)
        assert len(func.calls) == 1

    @pytest.mark.asyncio
    async def test_policy_override(self, manager):
        func = failing(MockServerError())

        with pytest.raises(RetryExhaustedError):
            await manager.execute_with_retry(func, policy=RetryPolicy(max_attempts=5, base_delay=0.0, jitter=False))
        assert len(func.calls) == 5

    @pytest.mark.asyncio
    async def test_vendor_classifier_treats_4xx_as_terminal(self, manager):
        func = failing(make_bad_request_error())

        with pytest.raises(Exception):
            await manager.execute_with_retry(func, classifier=VendorErrorClassifier)
        assert len(func.calls) == 1

    @pytest.mark.asyncio
    async def test_vendor_classifier_retries_rejected_tool_call(self, manager):
        func = failing(make_tool_use_failed_error(), times=1)

        assert await manager.execute_with_retry(func, classifier=VendorErrorClassifier) == "ok"
        assert len(func.calls) == 2


class TestDelays:

    @pytest.mark.asyncio
    async def test_rate_limit_waits_cooldown(self):
        manager = RetryManager(RetryPolicy(max_attempts=2, base_delay=0.0, max_delay=60.0, jitter=False))
        func = failing(make_rate_limit_error(), times=1)

        with patch("landr_agent.reliability.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await manager.execute_with_retry(func, classifier=VendorErrorClassifier)

        sleep.assert_awaited_once_with(30.0)

    @pytest.mark.asyncio
    async def test_longer_retry_after_wins(self):
        manager = RetryManager(RetryPolicy(max_attempts=2, base_delay=0.0, max_delay=60.0, jitter=False))
        func = failing(make_rate_limit_error(retry_after=45), times=1)

        with patch("landr_agent.reliability.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await manager.execute_with_retry(func, classifier=VendorErrorClassifier)

        sleep.assert_awaited_once_with(45.0)

    @pytest.mark.asyncio
    async def test_pre_attempt_delay_grows(self):
        policy = RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0, pre_attempt_delay=1.0, jitter=False)
        manager = RetryManager(policy)
        func = failing(MockServerError(), times=2)

        with patch("landr_agent.reliability.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await manager.execute_with_retry(func)

        waits = [call.args[0] for call in sleep.await_args_list]
        # backoff of 0 after each failure, then the pre-attempt delay
        assert waits == [0.0, 1.0, 0.0, 2.0]

    @pytest.mark.asyncio
    async def test_exponential_backoff(self):
        manager = RetryManager(RetryPolicy(max_attempts=4, base_delay=2.0, max_delay=60.0, jitter=False))
        func = failing(MockServerError())

        with patch("landr_agent.reliability.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(RetryExhaustedError):
                await manager.execute_with_retry(func)

        assert [call.args[0] for call in sleep.await_args_list] == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_cancellation_interrupts_backoff(self):
        manager = RetryManager(RetryPolicy(max_attempts=3, base_delay=60.0, max_delay=60.0, jitter=False))
        func = failing(MockServerError())

        task = asyncio.create_task(manager.execute_with_retry(func))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=1.0)
        assert len(func.calls) == 1
