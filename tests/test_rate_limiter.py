import threading

import pytest

from geofee.services.rate_limiter import DISTANCE_BUCKET, GEOCODE_BUCKET, RateLimiter


def test_sixty_first_call_in_window_is_denied(clock):
    limiter = RateLimiter(limit=60, window_seconds=60, clock=clock)
    for _ in range(60):
        assert limiter.try_acquire(GEOCODE_BUCKET)
        clock.advance(0.5)

    assert limiter.try_acquire(GEOCODE_BUCKET) is False


def test_call_admitted_once_oldest_timestamp_ages_out(clock):
    limiter = RateLimiter(limit=60, window_seconds=60, clock=clock)
    start = clock.now
    for _ in range(60):
        assert limiter.try_acquire(GEOCODE_BUCKET)
        clock.advance(0.5)
    assert limiter.try_acquire(GEOCODE_BUCKET) is False

    clock.now = start + 60.01
    assert limiter.try_acquire(GEOCODE_BUCKET) is True
    assert limiter.try_acquire(GEOCODE_BUCKET) is False


def test_denied_call_does_not_record_timestamp(clock):
    limiter = RateLimiter(limit=1, window_seconds=10, clock=clock)
    assert limiter.try_acquire(GEOCODE_BUCKET)
    clock.advance(5)
    assert limiter.try_acquire(GEOCODE_BUCKET) is False
    clock.advance(5.01)
    # The denied call at t+5 must not extend the window.
    assert limiter.try_acquire(GEOCODE_BUCKET) is True


def test_buckets_are_independent(clock):
    limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)
    assert limiter.try_acquire(GEOCODE_BUCKET)
    assert limiter.try_acquire(GEOCODE_BUCKET)
    assert limiter.try_acquire(GEOCODE_BUCKET) is False

    assert limiter.try_acquire(DISTANCE_BUCKET)
    assert limiter.remaining(DISTANCE_BUCKET) == 1
    assert limiter.remaining(GEOCODE_BUCKET) == 0


def test_concurrent_callers_never_over_admit():
    limiter = RateLimiter(limit=50, window_seconds=60)
    admitted = []
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            if limiter.try_acquire(DISTANCE_BUCKET):
                with lock:
                    admitted.append(1)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(admitted) == 50


def test_reset_clears_all_buckets(clock):
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.try_acquire(GEOCODE_BUCKET)
    limiter.reset()
    assert limiter.try_acquire(GEOCODE_BUCKET)


@pytest.mark.parametrize("limit,window", [(0, 60), (10, 0)])
def test_rejects_invalid_configuration(limit, window):
    with pytest.raises(ValueError):
        RateLimiter(limit=limit, window_seconds=window)
