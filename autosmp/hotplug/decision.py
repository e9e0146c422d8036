"""Periodic load-driven scaling decision."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from autosmp.core.config import HotplugConfig
from autosmp.core.events import EventBus, UnitStateChanged
from autosmp.core.interfaces import ILoadSampler
from autosmp.hotplug.errors import (
    ActionFailedError,
    NoCapacityError,
    NoEligibleUnitError,
    SampleUnavailableError,
)
from autosmp.hotplug.pool import UnitPool
from autosmp.hotplug.selector import pick_unit_to_bring_online, pick_unit_to_take_offline

logger = logging.getLogger(__name__)


class TickAction(Enum):
    """What a single tick did to the pool."""
    HOLD = "hold"
    BRING_ONLINE = "bring_online"
    TAKE_OFFLINE = "take_offline"
    FAILED = "failed"


@dataclass
class TickOutcome:
    """Result of one decision tick."""
    action: TickAction
    load: int
    online_count: int
    consecutive_cycles: int
    unit_id: Optional[int] = None
    error: str = ""


class DecisionEngine:
    """Threshold comparison with a shared hysteresis counter.

    A tick that qualifies in either direction increments
    ``consecutive_cycles``; only an actual pool change resets it. Ticks in the
    dead band, or with the pool already at its bound, leave it untouched, so
    qualifying ticks in one direction count toward the other.

    The caller must hold the controller lock for the whole ``tick``.
    """

    def __init__(
        self,
        config: HotplugConfig,
        pool: UnitPool,
        sampler: ILoadSampler,
        event_bus: Optional[EventBus] = None
    ):
        self.config = config
        self.pool = pool
        self.sampler = sampler
        self.event_bus = event_bus
        self.consecutive_cycles = 0

    def effective_max_units(self) -> int:
        if self.config.max_units is None:
            return self.pool.capacity
        return self.config.max_units

    def read_load(self) -> int:
        """Take the load sample, degrading to 0 when none is available."""
        try:
            return self.sampler.sample_and_reset()
        except SampleUnavailableError as e:
            logger.warning(f"Load sample unavailable, assuming idle: {e}")
            return 0

    async def tick(self) -> TickOutcome:
        """Run one complete decision."""
        cfg = self.config
        load = self.read_load()
        online = self.pool.online_count()

        if online < self.effective_max_units() and load >= cfg.load_threshold_up:
            self.consecutive_cycles += 1
            if self.consecutive_cycles >= cfg.cycles_required_up:
                return await self._scale_up(load, online)
        elif online > cfg.min_units and load <= cfg.load_threshold_down:
            self.consecutive_cycles += 1
            if self.consecutive_cycles >= cfg.cycles_required_down:
                return await self._scale_down(load, online)

        logger.debug(
            f"Tick: load={load} online={online} cycles={self.consecutive_cycles}"
        )
        return TickOutcome(TickAction.HOLD, load, online, self.consecutive_cycles)

    async def _scale_up(self, load: int, online: int) -> TickOutcome:
        try:
            unit_id = pick_unit_to_bring_online(self.pool)
        except NoCapacityError as e:
            logger.debug(f"Scale-up skipped: {e}")
            return TickOutcome(TickAction.HOLD, load, online, self.consecutive_cycles)

        return await self._apply(unit_id, True, load, online)

    async def _scale_down(self, load: int, online: int) -> TickOutcome:
        await self.pool.refresh_performance()
        try:
            unit_id = pick_unit_to_take_offline(self.pool, self.config.min_units)
        except NoEligibleUnitError as e:
            logger.debug(f"Scale-down skipped: {e}")
            return TickOutcome(TickAction.HOLD, load, online, self.consecutive_cycles)

        return await self._apply(unit_id, False, load, online)

    async def _apply(self, unit_id: int, online: bool, load: int, before: int) -> TickOutcome:
        try:
            await self.pool.set_online(unit_id, online)
        except ActionFailedError as e:
            logger.error(f"{e} (load={load}), retrying on next qualifying tick")
            return TickOutcome(
                TickAction.FAILED, load, before, self.consecutive_cycles,
                unit_id=unit_id, error=str(e)
            )

        self.consecutive_cycles = 0
        count = self.pool.online_count()
        logger.info(
            f"Unit {unit_id} {'on' if online else 'off'} "
            f"(load={load}, online={count})"
        )

        if self.event_bus:
            self.event_bus.publish_nowait(UnitStateChanged(
                unit_id=unit_id,
                online=online,
                reason="load",
                online_count=count
            ))

        return TickOutcome(
            TickAction.BRING_ONLINE if online else TickAction.TAKE_OFFLINE,
            load, count, self.consecutive_cycles, unit_id=unit_id
        )
