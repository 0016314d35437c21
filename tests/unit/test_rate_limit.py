import pytest

from mykahfi_portal.domain.rate_limit import FixedWindowRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limiter_blocks_after_limit_until_window_expires() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=2, window_seconds=60, clock=clock)

    assert limiter.hit("login:a").allowed
    assert limiter.hit("login:a").allowed
    blocked = limiter.hit("login:a")
    assert not blocked.allowed
    assert blocked.retry_after_seconds == 60

    clock.now += 59.5
    assert limiter.hit("login:a").retry_after_seconds == 1

    clock.now += 1
    assert limiter.hit("login:a").allowed


def test_limiter_keys_are_independent_and_resettable() -> None:
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())

    assert limiter.hit("login:a").allowed
    assert limiter.hit("login:b").allowed
    assert not limiter.hit("login:a").allowed

    limiter.reset("login:a")
    assert limiter.hit("login:a").allowed


@pytest.mark.parametrize(("limit", "window"), [(0, 60), (1, 0)])
def test_limiter_rejects_invalid_configuration(limit: int, window: float) -> None:
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(limit=limit, window_seconds=window)
