"""Tests for retry logic."""

import pytest
from statsig_client.retry import (
    NO_RETRY,
    RETRYABLE_STATUS_CODES,
    RequestOutcome,
    RetryPolicy,
    calculate_backoff,
    execute_with_retry,
    is_retryable_status,
    max_call_duration,
)
from statsig_client.errors import HTTPStatusError, NetworkError


class RecordingSleep:
    """Sleep stand-in that records durations instead of blocking."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class TestCalculateBackoff:
    """Tests for calculate_backoff function."""

    def test_grows_by_factor_of_ten(self):
        """Backoff should be multiplied by 10 per attempt."""
        policy = RetryPolicy(max_retries=3, initial_backoff_ms=1000)

        assert calculate_backoff(0, policy) == pytest.approx(1.0)
        assert calculate_backoff(1, policy) == pytest.approx(10.0)
        assert calculate_backoff(2, policy) == pytest.approx(100.0)

    def test_zero_initial_backoff(self):
        """Zero initial backoff stays zero."""
        assert calculate_backoff(3, NO_RETRY) == 0

    def test_max_call_duration_sums_backoffs(self):
        """Worst-case sleep is the sum of every backoff."""
        policy = RetryPolicy(max_retries=3, initial_backoff_ms=1000)
        assert max_call_duration(policy) == pytest.approx(111.0)

    def test_max_call_duration_respects_ceiling(self):
        """Worst-case sleep is capped by the ceiling."""
        policy = RetryPolicy(max_retries=5, initial_backoff_ms=1000, max_total_backoff_ms=20000)
        assert max_call_duration(policy) == pytest.approx(20.0)

    def test_negative_retries_rejected(self):
        """A negative retry count is invalid."""
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)


class TestIsRetryableStatus:
    """Tests for is_retryable_status function."""

    @pytest.mark.parametrize("code", [408, 500, 502, 503, 504, 522, 524, 599])
    def test_transient_codes_are_retryable(self, code):
        """Timeout and server/edge failures should be retryable."""
        assert is_retryable_status(code)

    @pytest.mark.parametrize("code", [400, 401, 403, 404, 409, 429, 501, 505, 520])
    def test_other_codes_are_final(self, code):
        """Every other code should be final."""
        assert not is_retryable_status(code)

    def test_exact_set(self):
        """The retryable set should not drift."""
        assert RETRYABLE_STATUS_CODES == {408, 500, 502, 503, 504, 522, 524, 599}


class TestExecuteWithRetry:
    """Tests for execute_with_retry function."""

    def test_success_on_first_try(self):
        """Should return success on first try without sleeping."""
        sleep = RecordingSleep()
        call_count = 0

        def success():
            nonlocal call_count
            call_count += 1
            return RequestOutcome(should_retry=False, data="ok")

        result = execute_with_retry(success, RetryPolicy(max_retries=3), sleep=sleep)

        assert result.success
        assert result.data == "ok"
        assert result.attempts == 1
        assert call_count == 1
        assert sleep.calls == []

    def test_retries_until_success(self):
        """Should retry retry-eligible outcomes."""
        sleep = RecordingSleep()
        call_count = 0

        def fail_twice():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                return RequestOutcome(should_retry=True, error=NetworkError("refused"))
            return RequestOutcome(should_retry=False, data="ok")

        result = execute_with_retry(
            fail_twice, RetryPolicy(max_retries=3, initial_backoff_ms=10), sleep=sleep
        )

        assert result.success
        assert result.data == "ok"
        assert result.attempts == 3
        assert sleep.calls == [pytest.approx(0.01), pytest.approx(0.1)]

    def test_no_retry_on_final_error(self):
        """Should return a final error immediately."""
        sleep = RecordingSleep()
        error = HTTPStatusError(404)

        result = execute_with_retry(
            lambda: RequestOutcome(should_retry=False, error=error),
            RetryPolicy(max_retries=3),
            sleep=sleep,
        )

        assert not result.success
        assert result.error is error
        assert result.attempts == 1
        assert sleep.calls == []

    def test_exhausts_all_retries(self):
        """Two retries mean three attempts and two sleeps in ratio 1:10."""
        sleep = RecordingSleep()
        call_count = 0

        def always_fail():
            nonlocal call_count
            call_count += 1
            return RequestOutcome(should_retry=True, error=HTTPStatusError(503, retryable=True))

        result = execute_with_retry(
            always_fail, RetryPolicy(max_retries=2, initial_backoff_ms=1000), sleep=sleep
        )

        assert not result.success
        assert isinstance(result.error, HTTPStatusError)
        assert result.attempts == 3  # 1 initial + 2 retries
        assert call_count == 3
        assert sleep.calls == [pytest.approx(1.0), pytest.approx(10.0)]
        assert sleep.calls[1] / sleep.calls[0] == pytest.approx(10)

    def test_zero_retries_is_single_attempt(self):
        """max_retries=0 should perform exactly one attempt."""
        sleep = RecordingSleep()
        call_count = 0

        def always_fail():
            nonlocal call_count
            call_count += 1
            return RequestOutcome(should_retry=True, error=NetworkError("refused"))

        result = execute_with_retry(always_fail, NO_RETRY, sleep=sleep)

        assert not result.success
        assert isinstance(result.error, NetworkError)
        assert call_count == 1
        assert sleep.calls == []

    def test_ceiling_stops_retrying_early(self):
        """Should stop once the next sleep would exceed the ceiling."""
        sleep = RecordingSleep()
        call_count = 0

        def always_fail():
            nonlocal call_count
            call_count += 1
            return RequestOutcome(should_retry=True, error=NetworkError("refused"))

        policy = RetryPolicy(max_retries=5, initial_backoff_ms=1000, max_total_backoff_ms=15000)
        result = execute_with_retry(always_fail, policy, sleep=sleep)

        assert not result.success
        assert call_count == 3
        assert sleep.calls == [pytest.approx(1.0), pytest.approx(10.0)]
        assert result.total_backoff == pytest.approx(11.0)
