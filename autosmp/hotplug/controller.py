"""Hotplug controller: scheduling, enable/disable and suspend/resume."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from autosmp.core.config import HotplugConfig
from autosmp.core.events import (
    ControllerStateChanged,
    EventBus,
    SystemResumed,
    SystemSuspending,
    UnitStateChanged,
)
from autosmp.core.interfaces import IHotplugController, ILoadSampler
from autosmp.hotplug.decision import DecisionEngine, TickOutcome
from autosmp.hotplug.errors import ActionFailedError
from autosmp.hotplug.pool import PRIMARY_UNIT, UnitPool

logger = logging.getLogger(__name__)


class HotplugController(IHotplugController):
    """Owns the periodic tick and every forced pool change.

    Ticks, enable/disable and suspend/resume all run under one
    ``asyncio.Lock``. Cancelling the tick task is only done while holding
    that lock, so a tick is never interrupted once it has started.
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
        self.engine = DecisionEngine(config, pool, sampler, event_bus)

        # Fixed for the lifetime of the controller
        self.stats_enabled = config.stats_enabled

        self._lock = asyncio.Lock()
        self._tick_task: Optional[asyncio.Task] = None
        self._enabled = False
        self._suspended = False
        self._started = False

        logger.info(
            f"Hotplug controller initialized (pool={pool.capacity}, "
            f"min={config.min_units}, max={self.engine.effective_max_units()})"
        )

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.shutdown()

    @property
    def consecutive_cycles(self) -> int:
        return self.engine.consecutive_cycles

    def is_enabled(self) -> bool:
        return self._enabled

    def is_suspended(self) -> bool:
        return self._suspended

    def is_tick_scheduled(self) -> bool:
        return self._tick_task is not None and not self._tick_task.done()

    async def start(self):
        """Register power-state handlers and schedule the first tick."""
        if self._started:
            return
        self._started = True

        if self.event_bus:
            self.event_bus.subscribe(SystemSuspending, self.on_suspend)
            self.event_bus.subscribe(SystemResumed, self.on_resume)

        if not self.config.enabled:
            logger.info("Hotplug controller disabled in config")
            return

        async with self._lock:
            self._enabled = True
            self._schedule(self.config.startup_delay_ms)

        logger.info(f"Hotplug controller started (first tick in {self.config.startup_delay_ms}ms)")
        self._publish_state("start")

    async def shutdown(self):
        """Stop ticking, restore the pool and deregister handlers."""
        if not self._started:
            return

        await self.disable()

        if self.event_bus:
            self.event_bus.unsubscribe(SystemSuspending, self.on_suspend)
            self.event_bus.unsubscribe(SystemResumed, self.on_resume)

        self._started = False
        logger.info("Hotplug controller shut down")

    async def enable(self):
        """Enable periodic decisions. No-op when already enabled."""
        async with self._lock:
            if self._enabled:
                return
            self._enabled = True
            if not self._suspended:
                self._schedule(self.config.poll_interval_ms)

        logger.info("Hotplug controller enabled")
        self._publish_state("enable")

    async def disable(self):
        """Disable periodic decisions and bring every unit back online.

        Waits for an in-flight tick to finish before touching the pool.
        """
        async with self._lock:
            self._enabled = False
            await self._cancel_tick()
            await self._bring_online(self.pool.offline_ids(), "disable")

        logger.info("Hotplug controller disabled")
        self._publish_state("disable")

    async def on_suspend(self, event: Optional[SystemSuspending] = None):
        """Stop ticking and, if configured, collapse to the primary unit."""
        async with self._lock:
            if self._suspended:
                logger.debug("Already suspended")
                return
            self._suspended = True
            await self._cancel_tick()

            parked = 0
            if self.config.single_unit_on_suspend:
                for unit_id in self.pool.online_ids():
                    if unit_id == PRIMARY_UNIT:
                        continue
                    try:
                        await self.pool.set_online(unit_id, False)
                    except ActionFailedError as e:
                        logger.error(f"Suspend: {e}")
                        continue
                    parked += 1
                    self._publish_unit(unit_id, False, "suspend")

        logger.info(f"Hotplug controller suspended ({parked} units parked)")
        self._publish_state("suspend")

    async def on_resume(self, event: Optional[SystemResumed] = None):
        """Restore full capacity and resume ticking if enabled.

        With ``single_unit_on_suspend`` set at resume time every offline unit
        comes back, not only the ones parked by the suspend.
        """
        async with self._lock:
            if not self._suspended:
                logger.debug("Resume without suspend ignored")
                return
            self._suspended = False

            if self.config.single_unit_on_suspend:
                await self._bring_online(self.pool.offline_ids(), "resume")

            if self._enabled:
                self._schedule(self.config.poll_interval_ms)

        logger.info("Hotplug controller resumed")
        self._publish_state("resume")

    async def tick_now(self) -> TickOutcome:
        """Run one decision immediately, serialized with the scheduled ticks."""
        async with self._lock:
            return await self.engine.tick()

    def status(self) -> Dict[str, Any]:
        """Snapshot of controller and pool state."""
        return {
            "enabled": self._enabled,
            "suspended": self._suspended,
            "tick_scheduled": self.is_tick_scheduled(),
            "consecutive_cycles": self.engine.consecutive_cycles,
            "online_units": self.pool.online_ids(),
            "online_count": self.pool.online_count(),
            "capacity": self.pool.capacity,
        }

    def _schedule(self, delay_ms: int):
        """Start the tick loop unless one is already pending. Lock held."""
        if self.is_tick_scheduled():
            return
        self._tick_task = asyncio.create_task(self._tick_loop(delay_ms))

    async def _cancel_tick(self):
        """Cancel the pending tick and wait for it. Lock held."""
        task, self._tick_task = self._tick_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _tick_loop(self, delay_ms: int):
        """Sleep, tick, reschedule."""
        while True:
            await asyncio.sleep(delay_ms / 1000.0)

            async with self._lock:
                if not self._enabled or self._suspended:
                    return
                try:
                    await self.engine.tick()
                except Exception as e:
                    logger.error(f"Tick failed: {e}", exc_info=True)

            delay_ms = self.config.poll_interval_ms

    async def _bring_online(self, unit_ids: List[int], reason: str):
        """Force units online, logging and skipping failures. Lock held."""
        for unit_id in unit_ids:
            try:
                changed = await self.pool.set_online(unit_id, True)
            except ActionFailedError as e:
                logger.error(f"{reason.capitalize()}: {e}")
                continue
            if changed:
                self._publish_unit(unit_id, True, reason)

    def _publish_unit(self, unit_id: int, online: bool, reason: str):
        if self.event_bus:
            self.event_bus.publish_nowait(UnitStateChanged(
                unit_id=unit_id,
                online=online,
                reason=reason,
                online_count=self.pool.online_count()
            ))

    def _publish_state(self, trigger: str):
        if self.event_bus:
            self.event_bus.publish_nowait(ControllerStateChanged(
                enabled=self._enabled,
                suspended=self._suspended,
                trigger=trigger
            ))
