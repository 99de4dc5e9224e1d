"""Unit tests for the signin brute-force guard."""

import threading
from datetime import timedelta

import pytest

from app.auth.login_guard import LoginAttemptGuard

WINDOW = timedelta(minutes=15)


@pytest.fixture
def guard(monotonic) -> LoginAttemptGuard:
    return LoginAttemptGuard(5, WINDOW, clock=monotonic)


def _fail(guard: LoginAttemptGuard, client_id: str, times: int) -> None:
    for _ in range(times):
        guard.record_failed_attempt(client_id)


class TestThreshold:
    """Blocking kicks in at exactly max_attempts failures."""

    def test_unknown_client_is_not_blocked(self, guard):
        assert guard.is_blocked("10.0.0.1") is False

    def test_below_limit_is_not_blocked(self, guard):
        _fail(guard, "10.0.0.1", 4)
        assert guard.is_blocked("10.0.0.1") is False

    def test_at_limit_is_blocked(self, guard):
        _fail(guard, "10.0.0.1", 5)
        assert guard.is_blocked("10.0.0.1") is True

    def test_checking_does_not_consume_attempts(self, guard):
        _fail(guard, "10.0.0.1", 4)
        for _ in range(10):
            assert guard.is_blocked("10.0.0.1") is False
        assert guard.attempt_count("10.0.0.1") == 4

    def test_failures_keep_counting_while_blocked(self, guard):
        _fail(guard, "10.0.0.1", 7)
        assert guard.attempt_count("10.0.0.1") == 7
        assert guard.is_blocked("10.0.0.1") is True


class TestSlidingWindow:
    def test_block_lifts_after_window(self, guard, monotonic):
        _fail(guard, "10.0.0.1", 5)
        monotonic.advance(WINDOW + timedelta(seconds=1))
        assert guard.is_blocked("10.0.0.1") is False

    def test_attempt_exactly_window_old_is_dropped(self, guard, monotonic):
        _fail(guard, "10.0.0.1", 5)
        monotonic.advance(WINDOW)
        assert guard.is_blocked("10.0.0.1") is False

    def test_attempt_just_inside_window_still_counts(self, guard, monotonic):
        _fail(guard, "10.0.0.1", 5)
        monotonic.advance(WINDOW - timedelta(seconds=1))
        assert guard.is_blocked("10.0.0.1") is True

    def test_only_old_attempts_expire(self, guard, monotonic):
        _fail(guard, "10.0.0.1", 3)
        monotonic.advance(timedelta(minutes=10))
        _fail(guard, "10.0.0.1", 2)
        assert guard.is_blocked("10.0.0.1") is True

        monotonic.advance(timedelta(minutes=6))
        assert guard.is_blocked("10.0.0.1") is False
        assert guard.attempt_count("10.0.0.1") == 2

    def test_stale_entries_are_pruned_on_check(self, guard, monotonic):
        _fail(guard, "10.0.0.1", 2)
        monotonic.advance(WINDOW * 2)
        assert guard.attempt_count("10.0.0.1") == 2
        guard.is_blocked("10.0.0.1")
        assert guard.attempt_count("10.0.0.1") == 0


class TestReset:
    def test_reset_clears_history(self, guard):
        _fail(guard, "10.0.0.1", 5)
        guard.reset("10.0.0.1")
        assert guard.is_blocked("10.0.0.1") is False
        assert guard.attempt_count("10.0.0.1") == 0

    def test_reset_unknown_client_is_noop(self, guard):
        guard.reset("never-seen")
        assert guard.attempt_count("never-seen") == 0

    def test_clients_are_isolated(self, guard):
        _fail(guard, "10.0.0.1", 5)
        _fail(guard, "10.0.0.2", 1)

        assert guard.is_blocked("10.0.0.1") is True
        assert guard.is_blocked("10.0.0.2") is False

        guard.reset("10.0.0.2")
        assert guard.is_blocked("10.0.0.1") is True


class TestConcurrency:
    def test_concurrent_failures_are_all_counted(self):
        guard = LoginAttemptGuard(1000, WINDOW)
        workers = 8
        per_worker = 100
        barrier = threading.Barrier(workers)

        def hammer() -> None:
            barrier.wait()
            for _ in range(per_worker):
                guard.record_failed_attempt("10.0.0.1")
                guard.is_blocked("10.0.0.1")

        threads = [threading.Thread(target=hammer) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert guard.attempt_count("10.0.0.1") == workers * per_worker
        assert guard.is_blocked("10.0.0.1") is False


class TestConstruction:
    @pytest.mark.parametrize("max_attempts", [0, -1])
    def test_rejects_non_positive_limit(self, max_attempts):
        with pytest.raises(ValueError):
            LoginAttemptGuard(max_attempts, WINDOW)

    @pytest.mark.parametrize("window", [timedelta(0), timedelta(seconds=-5)])
    def test_rejects_non_positive_window(self, window):
        with pytest.raises(ValueError):
            LoginAttemptGuard(5, window)
