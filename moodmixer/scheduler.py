# moodmixer/scheduler.py
import asyncio
import heapq
import itertools
import time
from abc import ABC, abstractmethod


class Scheduler(ABC):
    """
    Source of time and delays for the transition state machine.
    Swapped for ManualScheduler in tests so transitions run on virtual time.
    """
    @abstractmethod
    def now(self) -> float:
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        pass


class AsyncioScheduler(Scheduler):
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


class ManualScheduler(Scheduler):
    """
    Virtual clock. `sleep` parks the caller until `advance` moves time past
    its deadline; timers fire in deadline order, ties in registration order.
    """
    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, fut in self._timers if not fut.done())

    async def sleep(self, seconds: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        heapq.heappush(self._timers, (self._now + max(0.0, seconds), next(self._seq), fut))
        await fut

    async def settle(self, rounds: int = 20) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        target = self._now + seconds
        await self.settle()
        while self._timers and self._timers[0][0] <= target:
            deadline, _, fut = heapq.heappop(self._timers)
            self._now = deadline
            if not fut.done():
                fut.set_result(None)
            await self.settle()
        self._now = target
        await self.settle()
