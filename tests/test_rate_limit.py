import pytest

from moodmixer.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start
        self.slept = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.slept.append(seconds)
        self.now += seconds


def test_calls_under_rpm_do_not_sleep():
    clock = FakeClock()
    limiter = RateLimiter(rpm=3, clock=clock, sleep=clock.sleep)
    assert [limiter.wait() for _ in range(3)] == [0.0, 0.0, 0.0]
    assert clock.slept == []


def test_rpm_cap_sleeps_until_window_frees():
    clock = FakeClock()
    limiter = RateLimiter(rpm=2, clock=clock, sleep=clock.sleep)
    limiter.wait()
    clock.now += 10
    limiter.wait()
    slept = limiter.wait()
    assert slept == pytest.approx(60.0 - 10.0 + 0.05)
    assert clock.slept == [slept]


def test_daily_limit_sleeps_until_reset():
    clock = FakeClock()
    limiter = RateLimiter(rpm=100, daily_limit=2, clock=clock, sleep=clock.sleep)
    limiter.wait()
    limiter.wait()
    limiter.wait()
    assert clock.slept and clock.slept[0] == pytest.approx(86400 + 1)
    assert limiter.daily_count == 1
