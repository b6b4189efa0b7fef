"""Tests for retry utilities."""
import pytest
from flexconf.utils.connection import RetryPolicy, retry_with_policy, with_retry

FAST = dict(min_wait=0.01, max_wait=0.1)


class TestWithRetry:
    """Tests for retry decorator."""

    @pytest.mark.asyncio
    async def test_async_success_no_retry(self):
        """Successful async function doesn't retry."""
        call_count = 0

        @with_retry((OSError,), max_attempts=3)
        async def succeeding_func():
            nonlocal call_count
            call_count += 1
            return "success"

        result = await succeeding_func()
        assert result == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_async_retry_then_success(self):
        """Async function retries on failure then succeeds."""
        call_count = 0

        @with_retry((ConnectionRefusedError,), max_attempts=3, **FAST)
        async def failing_then_succeeding():
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise ConnectionRefusedError("Connection refused")
            return "success"

        result = await failing_then_succeeding()
        assert result == "success"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_async_max_retries_exceeded(self):
        """Async function raises after max retries."""
        call_count = 0

        @with_retry((TimeoutError,), max_attempts=3, **FAST)
        async def always_failing():
            nonlocal call_count
            call_count += 1
            raise TimeoutError("Always times out")

        with pytest.raises(TimeoutError):
            await always_failing()
        assert call_count == 3

    def test_sync_retry_then_success(self):
        """Sync functions are retried too."""
        call_count = 0

        @with_retry((OSError,), max_attempts=3, **FAST)
        def flaky():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise OSError("busy")
            return "ok"

        assert flaky() == "ok"
        assert call_count == 3

    def test_unlisted_exception_not_retried(self):
        """Exceptions outside the given types propagate on the first failure."""
        call_count = 0

        @with_retry((OSError,), max_attempts=3, **FAST)
        def raises_value_error():
            nonlocal call_count
            call_count += 1
            raise ValueError("Not retryable")

        with pytest.raises(ValueError):
            raises_value_error()
        assert call_count == 1

    def test_single_attempt_by_default(self):
        """Without max_attempts the function is called once."""
        call_count = 0

        @with_retry((KeyError,))
        def raises_key_error():
            nonlocal call_count
            call_count += 1
            raise KeyError("x")

        with pytest.raises(KeyError):
            raises_key_error()
        assert call_count == 1

    def test_exception_types_required(self):
        with pytest.raises(ValueError):
            with_retry(())


class TestRetryWithPolicy:
    def test_policy_default_is_one_attempt(self):
        assert RetryPolicy().max_attempts == 1

    def test_policy_attempts(self):
        call_count = 0

        @retry_with_policy(RetryPolicy(max_attempts=2, min_wait=0, max_wait=0), (OSError,))
        def always_failing():
            nonlocal call_count
            call_count += 1
            raise OSError("busy")

        with pytest.raises(OSError):
            always_failing()
        assert call_count == 2
