"""Unit tests for the retry policy."""

import pytest

from voxprompt.core.ai.base import (
    AIAuthenticationError,
    AIProviderError,
    AIServiceUnavailableError,
)
from voxprompt.core.ai.retry import RetryPolicy


class FakeSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def flaky(*outcomes):
    """Operation that raises or returns each outcome in turn."""
    remaining = list(outcomes)
    calls = {"count": 0}

    async def operation():
        calls["count"] += 1
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return operation, calls


@pytest.mark.unit
class TestRetryPolicyConfig:

    def test_defaults_are_two_attempts_one_second_flat(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 2
        assert policy.delay_for(1) == 1.0
        assert policy.delay_for(2) == 1.0

    def test_backoff_multiplies_delay(self):
        policy = RetryPolicy(max_attempts=4, delay_seconds=0.5, backoff_factor=2.0)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            RetryPolicy(delay_seconds=-1)

    def test_auth_errors_are_not_retryable(self):
        policy = RetryPolicy()
        assert policy.should_retry(AIServiceUnavailableError("down")) is True
        assert policy.should_retry(AIProviderError("boom")) is True
        assert policy.should_retry(AIAuthenticationError("bad key")) is False
        assert policy.should_retry(ValueError("unrelated")) is False


@pytest.mark.unit
@pytest.mark.asyncio
class TestRetryPolicyExecute:

    async def test_first_attempt_success(self):
        sleep = FakeSleep()
        operation, calls = flaky("ok")

        result, attempts = await RetryPolicy(sleep=sleep).execute(operation)

        assert result == "ok"
        assert attempts == 1
        assert calls["count"] == 1
        assert sleep.delays == []

    async def test_success_after_one_failure_waits_once(self):
        sleep = FakeSleep()
        operation, calls = flaky(AIServiceUnavailableError("down"), "second")

        result, attempts = await RetryPolicy(sleep=sleep).execute(operation)

        assert result == "second"
        assert attempts == 2
        assert sleep.delays == [1.0]

    async def test_raises_last_error_when_attempts_exhausted(self):
        sleep = FakeSleep()
        operation, calls = flaky(AIProviderError("first"), AIProviderError("last"))

        with pytest.raises(AIProviderError, match="last"):
            await RetryPolicy(sleep=sleep).execute(operation)

        assert calls["count"] == 2
        assert sleep.delays == [1.0]

    async def test_auth_error_raised_without_retry(self):
        sleep = FakeSleep()
        operation, calls = flaky(AIAuthenticationError("bad key"), "never")

        with pytest.raises(AIAuthenticationError):
            await RetryPolicy(sleep=sleep).execute(operation)

        assert calls["count"] == 1
        assert sleep.delays == []

    async def test_unlisted_error_propagates_immediately(self):
        sleep = FakeSleep()
        operation, calls = flaky(KeyError("x"), "never")

        with pytest.raises(KeyError):
            await RetryPolicy(sleep=sleep).execute(operation)

        assert calls["count"] == 1

    async def test_single_attempt_policy_never_sleeps(self):
        sleep = FakeSleep()
        operation, calls = flaky(AIServiceUnavailableError("down"))

        with pytest.raises(AIServiceUnavailableError):
            await RetryPolicy(max_attempts=1, sleep=sleep).execute(operation)

        assert sleep.delays == []
