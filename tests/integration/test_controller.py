"""Integration tests for the hotplug controller lifecycle."""

import asyncio

import pytest

from autosmp.actuators.simulated import SimulatedActuator
from autosmp.core.events import (
    ControllerStateChanged,
    EventBus,
    SystemResumed,
    SystemSuspending,
    UnitStateChanged,
)
from autosmp.hotplug import create_hotplug_controller
from autosmp.hotplug.controller import HotplugController
from autosmp.hotplug.pool import UnitPool
from tests.fixtures.mock_services import BlockingActuator, ScriptedSampler, wait_until


class TestEnableDisable:
    """Test enable/disable transitions."""

    async def test_enable_is_idempotent(self, controller):
        await controller.enable()
        first_task = controller._tick_task

        await controller.enable()

        assert controller.is_enabled()
        assert controller._tick_task is first_task
        await controller.disable()

    async def test_scheduled_ticks_scale_up(self, controller, sampler):
        sampler.default = 30
        await controller.enable()

        assert await wait_until(lambda: controller.pool.online_count() == 4)
        await controller.disable()

    async def test_disable_restores_full_pool(self, controller):
        await controller.pool.set_online(2, True)

        await controller.disable()

        assert controller.pool.online_ids() == [0, 1, 2, 3]
        assert not controller.is_tick_scheduled()

    async def test_disable_waits_for_in_flight_tick(self, hotplug_config):
        """disable() returns only after the running tick finished."""
        actuator = BlockingActuator(4, online=[0])
        pool = UnitPool(actuator)
        controller = HotplugController(hotplug_config, pool, ScriptedSampler(default=30))

        await controller.enable()
        await asyncio.wait_for(actuator.entered.wait(), timeout=1.0)

        disabling = asyncio.create_task(controller.disable())
        await asyncio.sleep(0.02)
        assert not disabling.done()
        assert controller.is_enabled() is True

        actuator.release.set()
        await asyncio.wait_for(disabling, timeout=1.0)

        assert actuator.calls[0] == (1, True)
        assert pool.get(1).times_toggled == 1
        assert controller.consecutive_cycles == 0
        assert pool.online_ids() == [0, 1, 2, 3]
        assert not controller.is_tick_scheduled()

    async def test_no_ticks_after_disable(self, controller, sampler):
        await controller.enable()
        await asyncio.sleep(0.02)
        await controller.disable()

        calls = sampler.call_count
        await asyncio.sleep(0.03)
        assert sampler.call_count == calls

    async def test_tick_errors_do_not_stop_loop(self, controller, sampler):
        sampler.push(RuntimeError("boom"))
        sampler.default = 30
        await controller.enable()

        assert await wait_until(lambda: controller.pool.online_count() == 4)
        await controller.disable()


class TestSuspendResume:
    """Test power-state handling."""

    async def test_round_trip_restores_online_set(self, hotplug_config):
        pool = UnitPool(SimulatedActuator(4))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        assert pool.online_ids() == [0]
        assert controller.is_suspended()

        await controller.on_resume()
        assert pool.online_ids() == [0, 1, 2, 3]
        assert not controller.is_suspended()

    async def test_resume_restores_full_capacity(self, hotplug_config):
        """Units that were already offline before suspend come back too."""
        pool = UnitPool(SimulatedActuator(4, online=[0, 1, 3]))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        await controller.on_resume()

        assert pool.online_ids() == [0, 1, 2, 3]

    async def test_resume_follows_current_single_unit_setting(self, hotplug_config):
        hotplug_config.single_unit_on_suspend = False
        pool = UnitPool(SimulatedActuator(4, online=[0, 2]))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        hotplug_config.single_unit_on_suspend = True
        await controller.on_resume()

        assert pool.online_ids() == [0, 1, 2, 3]

    async def test_resume_without_single_unit_leaves_pool(self, hotplug_config):
        pool = UnitPool(SimulatedActuator(4))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        hotplug_config.single_unit_on_suspend = False
        await controller.on_resume()

        assert pool.online_ids() == [0]

    async def test_suspend_ignores_min_units(self, hotplug_config):
        hotplug_config.min_units = 3
        pool = UnitPool(SimulatedActuator(4))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()

        assert pool.online_ids() == [0]

    async def test_suspend_keeps_pool_without_single_unit(self, hotplug_config):
        hotplug_config.single_unit_on_suspend = False
        pool = UnitPool(SimulatedActuator(4, online=[0, 2]))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        assert pool.online_ids() == [0, 2]

        await controller.on_resume()
        assert pool.online_ids() == [0, 2]

    async def test_suspend_stops_ticks_and_resume_restarts(self, controller, sampler):
        await controller.enable()
        await controller.on_suspend()

        assert not controller.is_tick_scheduled()
        calls = sampler.call_count
        await asyncio.sleep(0.03)
        assert sampler.call_count == calls

        await controller.on_resume()
        assert controller.is_tick_scheduled()
        assert await wait_until(lambda: sampler.call_count > calls)
        await controller.disable()

    async def test_resume_when_disabled_does_not_schedule(self, controller):
        await controller.on_suspend()
        await controller.on_resume()

        assert not controller.is_tick_scheduled()

    async def test_enable_while_suspended_waits_for_resume(self, controller):
        await controller.on_suspend()
        await controller.enable()

        assert controller.is_enabled()
        assert not controller.is_tick_scheduled()

        await controller.on_resume()
        assert controller.is_tick_scheduled()
        await controller.disable()

    async def test_repeated_suspend_is_noop(self, hotplug_config):
        actuator = SimulatedActuator(4, online=[0, 1])
        pool = UnitPool(actuator)
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        calls = list(actuator.calls)
        await controller.on_suspend()

        assert actuator.calls == calls
        assert controller.is_suspended()

    async def test_lifecycle_does_not_wait_on_full_event_queue(self, hotplug_config):
        """A stalled bus drops events instead of blocking under the lock."""
        bus = EventBus(max_queue_size=1)
        controller = create_hotplug_controller(
            hotplug_config, SimulatedActuator(4), ScriptedSampler([0] * 10), bus
        )

        await asyncio.wait_for(controller.on_suspend(), timeout=0.5)
        await asyncio.wait_for(controller.on_resume(), timeout=0.5)
        for _ in range(5):
            await asyncio.wait_for(controller.tick_now(), timeout=0.5)

        assert controller.pool.online_count() == 3

    async def test_resume_without_suspend_is_noop(self, controller):
        await controller.on_resume()

        assert controller.pool.online_ids() == [0]
        assert not controller.is_suspended()

    async def test_disable_while_suspended_restores_everything(self, hotplug_config):
        pool = UnitPool(SimulatedActuator(4, online=[0, 1]))
        controller = HotplugController(hotplug_config, pool, ScriptedSampler())

        await controller.on_suspend()
        await controller.disable()

        assert pool.online_ids() == [0, 1, 2, 3]


class TestEventBusIntegration:
    """Test scoped registration and published events."""

    async def test_power_events_drive_controller(self, hotplug_config, event_bus):
        hotplug_config.startup_delay_ms = 60000
        controller = create_hotplug_controller(
            hotplug_config, SimulatedActuator(4), ScriptedSampler(), event_bus
        )

        async with controller:
            await event_bus.publish(SystemSuspending(source="test"))
            await event_bus.drain()
            assert controller.is_suspended()
            assert controller.pool.online_ids() == [0]

            await event_bus.publish(SystemResumed(source="test"))
            await event_bus.drain()
            assert not controller.is_suspended()
            assert controller.pool.online_count() == 4

        assert event_bus.subscriber_count(SystemSuspending) == 0
        assert event_bus.subscriber_count(SystemResumed) == 0

    async def test_start_respects_startup_delay(self, hotplug_config, event_bus):
        hotplug_config.startup_delay_ms = 60000
        sampler = ScriptedSampler(default=30)
        controller = create_hotplug_controller(
            hotplug_config, SimulatedActuator(4, online=[0]), sampler, event_bus
        )

        await controller.start()
        await asyncio.sleep(0.03)

        assert controller.is_tick_scheduled()
        assert sampler.call_count == 0
        await controller.shutdown()

    async def test_start_disabled_in_config(self, hotplug_config, event_bus):
        hotplug_config.enabled = False
        controller = create_hotplug_controller(
            hotplug_config, SimulatedActuator(4), ScriptedSampler(), event_bus
        )

        await controller.start()

        assert not controller.is_enabled()
        assert not controller.is_tick_scheduled()
        assert event_bus.subscriber_count(SystemSuspending) == 1
        await controller.shutdown()

    async def test_unit_events_published(self, hotplug_config, event_bus):
        seen = []
        event_bus.subscribe(UnitStateChanged, seen.append)
        event_bus.subscribe(ControllerStateChanged, seen.append)

        controller = create_hotplug_controller(
            hotplug_config, SimulatedActuator(4, online=[0]),
            ScriptedSampler([30]), event_bus
        )
        await controller.tick_now()
        await controller.disable()
        await event_bus.drain()

        unit_events = [e for e in seen if isinstance(e, UnitStateChanged)]
        assert [(e.unit_id, e.online, e.reason) for e in unit_events] == [
            (1, True, "load"),
            (2, True, "disable"),
            (3, True, "disable"),
        ]
        assert unit_events[-1].online_count == 4

        state_events = [e for e in seen if isinstance(e, ControllerStateChanged)]
        assert state_events[-1].trigger == "disable"
        assert state_events[-1].enabled is False

    async def test_status(self, controller):
        status = controller.status()

        assert status["enabled"] is False
        assert status["online_units"] == [0]
        assert status["capacity"] == 4
