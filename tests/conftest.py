"""Pytest configuration and fixtures."""

import pytest

from autosmp.actuators.simulated import SimulatedActuator
from autosmp.core.config import HotplugConfig
from autosmp.core.events import EventBus
from autosmp.hotplug.controller import HotplugController
from autosmp.hotplug.pool import UnitPool
from tests.fixtures.mock_services import ScriptedSampler


@pytest.fixture
def hotplug_config():
    """Fast-ticking configuration for tests."""
    return HotplugConfig(
        poll_interval_ms=5,
        min_units=1,
        max_units=4,
        load_threshold_up=25,
        load_threshold_down=5,
        cycles_required_up=1,
        cycles_required_down=5,
        single_unit_on_suspend=True,
        startup_delay_ms=0,
        pool_capacity=4,
        actuator="simulated",
    )


@pytest.fixture
def actuator():
    """Four-unit pool with only the primary online."""
    return SimulatedActuator(4, online=[0])


@pytest.fixture
def sampler():
    return ScriptedSampler()


@pytest.fixture
def pool(actuator):
    return UnitPool(actuator)


@pytest.fixture
def controller(hotplug_config, pool, sampler):
    """Controller without an event bus (not started)."""
    return HotplugController(hotplug_config, pool, sampler)


@pytest.fixture
async def event_bus():
    """Create and start event bus."""
    bus = EventBus()
    await bus.start()
    yield bus
    await bus.stop()
