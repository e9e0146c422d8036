"""Fixed pool of compute units."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from autosmp.core.interfaces import IUnitActuator
from autosmp.hotplug.errors import ActionFailedError

logger = logging.getLogger(__name__)

PRIMARY_UNIT = 0


@dataclass
class Unit:
    """One compute unit of the pool."""
    id: int
    online: bool = True
    performance_metric: Optional[int] = None
    times_toggled: int = 0

    @property
    def is_primary(self) -> bool:
        return self.id == PRIMARY_UNIT


class UnitPool:
    """Units keyed by stable id plus the actuator that switches them.

    The unit set never changes after construction. Only ``set_online``
    mutates the online state, and only after the actuator succeeded.
    """

    def __init__(self, actuator: IUnitActuator, capacity: Optional[int] = None):
        self.actuator = actuator
        size = capacity if capacity is not None else actuator.capacity()
        if size < 1:
            raise ValueError(f"Pool capacity must be at least 1, got {size}")

        self._units: Dict[int, Unit] = {}
        for unit_id in range(size):
            online = True if unit_id == PRIMARY_UNIT else bool(actuator.is_online(unit_id))
            self._units[unit_id] = Unit(id=unit_id, online=online)

        logger.info(
            f"Unit pool initialized ({self.online_count()}/{size} units online)"
        )

    @property
    def capacity(self) -> int:
        return len(self._units)

    def get(self, unit_id: int) -> Unit:
        return self._units[unit_id]

    def units(self) -> List[Unit]:
        """All units ordered by id."""
        return [self._units[i] for i in sorted(self._units)]

    def online_ids(self) -> List[int]:
        return [u.id for u in self.units() if u.online]

    def offline_ids(self) -> List[int]:
        return [u.id for u in self.units() if not u.online]

    def online_count(self) -> int:
        return sum(1 for u in self._units.values() if u.online)

    async def refresh_performance(self):
        """Reload the performance metric of every online non-primary unit.

        The actuator reads happen in a worker thread.
        """
        targets = [u for u in self.units() if u.online and not u.is_primary]
        metrics = await asyncio.to_thread(
            lambda: [self.actuator.read_performance(u.id) for u in targets]
        )
        for unit, metric in zip(targets, metrics):
            unit.performance_metric = metric

    async def set_online(self, unit_id: int, online: bool) -> bool:
        """Switch one unit through the actuator.

        Returns False when the unit already was in the requested state.
        Raises ``ActionFailedError`` when the actuator refuses.
        """
        unit = self._units[unit_id]
        if unit.online == online:
            return False
        if unit.is_primary and not online:
            raise ActionFailedError(unit_id, online, "primary unit cannot go offline")

        try:
            if online:
                ok = await self.actuator.bring_online(unit_id)
            else:
                ok = await self.actuator.take_offline(unit_id)
        except OSError as e:
            raise ActionFailedError(unit_id, online, str(e)) from e

        if not ok:
            raise ActionFailedError(unit_id, online, "actuator refused")

        unit.online = online
        unit.times_toggled += 1
        if not online:
            unit.performance_metric = None
        return True

    def toggle_counts(self) -> Dict[int, int]:
        """Per-unit transition counters keyed by unit id."""
        return {u.id: u.times_toggled for u in self.units()}
