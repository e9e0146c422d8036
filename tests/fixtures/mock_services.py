"""Mock services for testing."""

import asyncio
from collections import deque
from typing import Iterable, Optional

from autosmp.actuators.simulated import SimulatedActuator
from autosmp.core.interfaces import ILoadSampler


class ScriptedSampler(ILoadSampler):
    """Returns scripted load readings, then ``default`` forever.

    An exception instance in the script is raised instead of returned.
    """

    def __init__(self, readings: Iterable = (), default: int = 0):
        self.readings = deque(readings)
        self.default = default
        self.call_count = 0

    def push(self, *readings):
        self.readings.extend(readings)

    def sample_and_reset(self) -> int:
        self.call_count += 1
        if not self.readings:
            return self.default
        reading = self.readings.popleft()
        if isinstance(reading, Exception):
            raise reading
        return reading


class BlockingActuator(SimulatedActuator):
    """Simulated actuator whose switches wait on a gate."""

    def __init__(self, capacity: int, online: Optional[Iterable[int]] = None):
        super().__init__(capacity, online=online)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def bring_online(self, unit_id: int) -> bool:
        self.entered.set()
        await self.release.wait()
        return await super().bring_online(unit_id)

    async def take_offline(self, unit_id: int) -> bool:
        self.entered.set()
        await self.release.wait()
        return await super().take_offline(unit_id)


class RaisingActuator(SimulatedActuator):
    """Simulated actuator that raises OSError for selected units."""

    async def bring_online(self, unit_id: int) -> bool:
        if unit_id in self.failing:
            raise OSError(16, "Device or resource busy")
        return await super().bring_online(unit_id)


async def wait_until(predicate, timeout: float = 1.0, interval: float = 0.005) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return predicate()
