"""In-memory actuator for dry runs."""

import logging
from typing import Dict, Iterable, Optional, Set

from autosmp.core.interfaces import IUnitActuator

logger = logging.getLogger(__name__)


class SimulatedActuator(IUnitActuator):
    """Keeps unit state in a dict instead of touching the host."""

    def __init__(
        self,
        capacity: int,
        online: Optional[Iterable[int]] = None,
        rates: Optional[Dict[int, int]] = None,
        failing: Optional[Iterable[int]] = None
    ):
        self._capacity = capacity
        initially_online = set(range(capacity)) if online is None else set(online) | {0}
        self.state: Dict[int, bool] = {i: i in initially_online for i in range(capacity)}
        self.rates: Dict[int, int] = dict(rates or {})
        self.failing: Set[int] = set(failing or ())
        self.calls = []

    def capacity(self) -> int:
        return self._capacity

    def is_online(self, unit_id: int) -> bool:
        return self.state[unit_id]

    async def bring_online(self, unit_id: int) -> bool:
        return self._switch(unit_id, True)

    async def take_offline(self, unit_id: int) -> bool:
        return self._switch(unit_id, False)

    def _switch(self, unit_id: int, online: bool) -> bool:
        self.calls.append((unit_id, online))
        if unit_id in self.failing:
            logger.debug(f"Simulated failure for unit {unit_id}")
            return False
        self.state[unit_id] = online
        return True

    def read_performance(self, unit_id: int) -> Optional[int]:
        return self.rates.get(unit_id)
