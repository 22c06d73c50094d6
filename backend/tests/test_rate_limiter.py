import pytest

from roampedia.services.rate_limiter import RateLimitExceeded, SlidingWindowRateLimiter


@pytest.fixture
def limiter(clock):
    return SlidingWindowRateLimiter(max_attempts=5, window_seconds=900, clock=clock)


def test_sixth_attempt_in_window_is_rejected(limiter, clock):
    for _ in range(5):
        limiter.hit("10.0.0.1")
        clock.advance(10)

    with pytest.raises(RateLimitExceeded) as exc:
        limiter.hit("10.0.0.1")
    assert exc.value.retry_after == 850


def test_keys_are_independent(limiter):
    for _ in range(5):
        limiter.hit("10.0.0.1")
    limiter.hit("10.0.0.2")


def test_window_slides(limiter, clock):
    for _ in range(5):
        limiter.hit("10.0.0.1")
    clock.advance(900)
    limiter.hit("10.0.0.1")


def test_reset(limiter):
    for _ in range(5):
        limiter.hit("10.0.0.1")
    limiter.reset("10.0.0.1")
    limiter.hit("10.0.0.1")


def test_expired_keys_are_forgotten(limiter, clock):
    for i in range(1000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter) == 1000

    clock.advance(10_000)
    limiter.hit("10.9.9.9")
    assert len(limiter) == 1


def test_sweep_keeps_keys_still_inside_their_window(limiter, clock):
    limiter.hit("10.0.0.1")
    clock.advance(600)
    limiter.hit("10.0.0.2")
    clock.advance(400)
    limiter.hit("10.0.0.3")
    assert len(limiter) == 2
