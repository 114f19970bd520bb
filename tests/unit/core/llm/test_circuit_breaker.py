"""
Unit tests for the circuit breaker.
"""
import pytest

from core.errors import CircuitOpenError
from core.llm.circuit_breaker import CLOSED, HALF_OPEN, OPEN, CircuitBreaker


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def boom():
    raise RuntimeError("boom")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker("test", threshold=3, reset_seconds=30, clock=clock)


class TestCircuitBreaker:

    def test_passes_results_through(self, breaker):
        assert breaker.call(lambda x: x * 2, 21) == 42
        assert breaker.state == CLOSED

    def test_opens_after_threshold(self, breaker):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(boom)

        assert breaker.state == OPEN
        with pytest.raises(CircuitOpenError):
            breaker.call(lambda: "never")

    def test_success_resets_failure_count(self, breaker):
        for _ in range(2):
            with pytest.raises(RuntimeError):
                breaker.call(boom)
        breaker.call(lambda: None)

        assert breaker.failures == 0
        with pytest.raises(RuntimeError):
            breaker.call(boom)
        assert breaker.state == CLOSED

    def test_half_open_after_reset_window(self, breaker, clock):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(boom)

        clock.now += 31
        assert breaker.call(lambda: "ok") == "ok"
        assert breaker.state == CLOSED

    def test_half_open_failure_reopens(self, breaker, clock):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(boom)

        clock.now += 31
        with pytest.raises(RuntimeError):
            breaker.call(boom)

        assert breaker.state == OPEN
        with pytest.raises(CircuitOpenError):
            breaker.call(lambda: "never")

    def test_untracked_exceptions_do_not_count(self, clock):
        breaker = CircuitBreaker("test", threshold=1, clock=clock, tracked_exceptions=(ValueError,))
        with pytest.raises(RuntimeError):
            breaker.call(boom)
        assert breaker.state == CLOSED

    def test_reset(self, breaker):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(boom)
        breaker.reset()
        assert breaker.state == CLOSED
        assert breaker.failures == 0

    def test_half_open_state_visible_during_trial(self, breaker, clock):
        for _ in range(3):
            with pytest.raises(RuntimeError):
                breaker.call(boom)
        clock.now += 31

        seen = []
        breaker.call(lambda: seen.append(breaker.state))

        assert seen == [HALF_OPEN]
