"""Adaptive core hotplugging.

This package decides, once per poll interval, whether the pool of compute
units should grow or shrink:

- ``LoadSampler`` (``autosmp.sampling``) supplies the load reading
- ``DecisionEngine`` compares it against the thresholds with hysteresis
- ``selector`` picks which unit to switch
- ``HotplugController`` schedules ticks and handles enable/disable and
  suspend/resume

Usage:
    from autosmp.hotplug import HotplugController, UnitPool
    from autosmp.core.config import HotplugConfig

    pool = UnitPool(actuator)
    controller = HotplugController(HotplugConfig(), pool, sampler, event_bus)

    async with controller:
        ...  # ticks run until shutdown
"""

from autosmp.hotplug.controller import HotplugController
from autosmp.hotplug.decision import DecisionEngine, TickAction, TickOutcome
from autosmp.hotplug.errors import (
    HotplugError,
    NoCapacityError,
    NoEligibleUnitError,
    SampleUnavailableError,
    ActionFailedError,
)
from autosmp.hotplug.pool import Unit, UnitPool, PRIMARY_UNIT
from autosmp.hotplug.selector import pick_unit_to_bring_online, pick_unit_to_take_offline

__all__ = [
    "HotplugController",
    "DecisionEngine",
    "TickAction",
    "TickOutcome",
    "HotplugError",
    "NoCapacityError",
    "NoEligibleUnitError",
    "SampleUnavailableError",
    "ActionFailedError",
    "Unit",
    "UnitPool",
    "PRIMARY_UNIT",
    "pick_unit_to_bring_online",
    "pick_unit_to_take_offline",
    "create_hotplug_controller",
]


def create_hotplug_controller(
    config,
    actuator,
    sampler,
    event_bus=None
) -> HotplugController:
    """Factory function to create a configured hotplug controller.

    Args:
        config: HotplugConfig with thresholds and bounds
        actuator: IUnitActuator switching the units
        sampler: ILoadSampler providing the load reading
        event_bus: Optional EventBus for power-state events and notifications

    Returns:
        Configured HotplugController (not started)
    """
    pool = UnitPool(actuator, capacity=config.pool_capacity)
    return HotplugController(config, pool, sampler, event_bus)
