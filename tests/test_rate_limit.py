import threading
from datetime import datetime, timedelta

from overtime.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def test_blocks_after_max_attempts_within_window():
    clock = FakeClock(datetime(2024, 6, 10, 9, 0))
    limiter = RateLimiter(max_attempts=3, window=timedelta(minutes=15), clock=clock)

    assert [limiter.is_allowed("ana@redejb.com.br") for _ in range(4)] == [True, True, True, False]
    assert limiter.remaining("ana@redejb.com.br") == 0


def test_window_expiry_starts_a_fresh_count():
    clock = FakeClock(datetime(2024, 6, 10, 9, 0))
    limiter = RateLimiter(max_attempts=2, window=timedelta(minutes=15), clock=clock)
    limiter.is_allowed("key")
    limiter.is_allowed("key")
    assert not limiter.is_allowed("key")

    clock.advance(minutes=15, seconds=1)

    assert limiter.is_allowed("key")
    assert limiter.remaining("key") == 1


def test_keys_are_counted_independently():
    limiter = RateLimiter(max_attempts=1)

    assert limiter.is_allowed("a")
    assert limiter.is_allowed("b")
    assert not limiter.is_allowed("a")


def test_reset_clears_a_key():
    limiter = RateLimiter(max_attempts=1)
    limiter.is_allowed("a")

    limiter.reset("a")

    assert limiter.remaining("a") == 1
    assert limiter.is_allowed("a")


def test_instances_do_not_share_state():
    first = RateLimiter(max_attempts=1)
    second = RateLimiter(max_attempts=1)
    first.is_allowed("a")

    assert second.is_allowed("a")


def test_concurrent_attempts_never_exceed_the_cap():
    fixed = datetime(2024, 6, 10, 9, 0)
    for _ in range(50):
        limiter = RateLimiter(max_attempts=5, window=timedelta(minutes=15), clock=lambda: fixed)
        barrier = threading.Barrier(20)
        results = []

        def attempt():
            barrier.wait()
            results.append(limiter.is_allowed("ana@redejb.com.br"))

        threads = [threading.Thread(target=attempt) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 5
        assert limiter.remaining("ana@redejb.com.br") == 0
