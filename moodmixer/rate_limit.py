# moodmixer/rate_limit.py
# Throttle for model calls: a sliding one-minute window plus an optional
# daily quota. Blocking; async callers reach it through a worker thread.
import logging
import time
from collections import deque

logger = logging.getLogger(__name__)

MINUTE = 60.0
DAY = 86400.0
SLACK = 0.05


class RateLimiter:
    def __init__(self, rpm=10, burst=10, daily_limit=None, clock=time.time, sleep=time.sleep):
        self.rpm = max(1, rpm)
        self.burst = burst
        self.daily_limit = daily_limit
        self.events = deque()
        self.daily_count = 0
        self._clock = clock
        self._sleep = sleep
        self.last_reset = clock()

    @property
    def capacity(self) -> int:
        return min(self.burst, self.rpm)

    def _quota_exhausted(self, now) -> bool:
        if now - self.last_reset >= DAY:
            self.daily_count = 0
            self.last_reset = now
        return bool(self.daily_limit) and self.daily_count >= self.daily_limit

    def _wait_for_quota(self, now):
        pause = DAY - (now - self.last_reset) + 1
        logger.info("Daily limit %s reached; pausing %.1f sec", self.daily_limit, pause)
        self._sleep(pause)
        self.daily_count = 0
        self.last_reset = self._clock()
        return self.last_reset

    def _wait_for_window(self, now) -> float:
        while self.events and now - self.events[0] > MINUTE:
            self.events.popleft()
        if len(self.events) < self.capacity:
            return 0.0
        pause = MINUTE - (now - self.events[0]) + SLACK
        if pause <= 0:
            return 0.0
        logger.info("RPM cap hit (%s/min); pausing %.1f sec", self.rpm, pause)
        self._sleep(pause)
        self.events.popleft()
        return pause

    def wait(self) -> float:
        """Block until a call is allowed, record it, return seconds spent in the window wait."""
        now = self._clock()
        if self._quota_exhausted(now):
            now = self._wait_for_quota(now)
        slept = self._wait_for_window(now)
        self.events.append(self._clock())
        self.daily_count += 1
        return slept
