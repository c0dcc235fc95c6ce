import threading
import time

import pytest

from hubspot_mcp.ratelimit import SlidingWindowLimiter


def test_hundred_calls_are_never_throttled(clock):
    limiter = SlidingWindowLimiter(clock=clock, sleep=clock.sleep)
    for _ in range(100):
        assert limiter.acquire() == 0.0
    assert clock.sleeps == []
    assert len(limiter) == 100


def test_hundred_and_first_call_waits_for_oldest_to_expire(clock):
    limiter = SlidingWindowLimiter(clock=clock, sleep=clock.sleep)
    for _ in range(100):
        limiter.acquire()
        clock.advance(0.01)
    # oldest at t=0, now t=1.0: 10 - 1.0 + 0.05
    waited = limiter.acquire()
    assert waited == pytest.approx(9.05)
    assert clock.sleeps == [pytest.approx(9.05)]


def test_burst_at_same_instant_waits_full_window_plus_margin(clock):
    limiter = SlidingWindowLimiter(clock=clock, sleep=clock.sleep)
    for _ in range(100):
        limiter.acquire()
    limiter.acquire()
    assert clock.sleeps == [pytest.approx(10.05)]


def test_window_slides_after_expiry(clock):
    limiter = SlidingWindowLimiter(clock=clock, sleep=clock.sleep)
    for _ in range(100):
        limiter.acquire()
    clock.advance(10.0)
    assert limiter.acquire() == 0.0
    assert len(limiter) == 1


def test_window_never_exceeds_ceiling(clock):
    limiter = SlidingWindowLimiter(window=1.0, ceiling=5, margin=0.01, clock=clock, sleep=clock.sleep)
    for _ in range(40):
        limiter.acquire()
        assert len(limiter) <= 5
        clock.advance(0.05)
    assert clock.sleeps


def test_custom_parameters(clock):
    limiter = SlidingWindowLimiter(window=2.0, ceiling=2, margin=0.5, clock=clock, sleep=clock.sleep)
    limiter.acquire()
    clock.advance(1.0)
    limiter.acquire()
    # oldest at t=0, now t=1.0: 2.0 - 1.0 + 0.5
    assert limiter.acquire() == pytest.approx(1.5)


def test_concurrent_acquires_respect_ceiling():
    window, ceiling = 0.5, 5
    local = threading.local()

    def clock() -> float:
        # the last reading inside acquire() is the timestamp it records
        local.now = time.monotonic()
        return local.now

    limiter = SlidingWindowLimiter(window=window, ceiling=ceiling, margin=0.01, clock=clock)
    admitted: list[float] = []
    record = threading.Lock()
    sizes: list[int] = []

    def worker():
        for _ in range(4):
            limiter.acquire()
            with record:
                admitted.append(local.now)
                sizes.append(len(limiter))

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(admitted) == 20
    assert max(sizes) <= ceiling
    stamps = sorted(admitted)
    for i in range(len(stamps) - ceiling):
        assert stamps[i + ceiling] - stamps[i] >= window
