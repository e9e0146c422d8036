"""Core system components.

This module contains the foundational pieces shared by every subsystem:
- Configuration loading and validation
- Event bus and event types (including power-state notifications)
- Collaborator interfaces (sampler, actuator, controller)
- Event logging listeners

Usage:
    from autosmp.core import SystemConfig, EventBus, load_config
    from autosmp.hotplug import HotplugController
"""

from autosmp.core.config import (
    SystemConfig,
    HotplugConfig,
    ObserverConfig,
    load_config,
    validate_config,
)
from autosmp.core.events import (
    EventBus,
    Event,
    SystemSuspending,
    SystemResumed,
    UnitStateChanged,
    ControllerStateChanged,
)
from autosmp.core.interfaces import (
    ILoadSampler,
    IUnitActuator,
    IHotplugController,
)
from autosmp.core.events_listener import (
    SystemEventLogger,
    register_event_listeners
)

__all__ = [
    # Configuration
    "SystemConfig",
    "HotplugConfig",
    "ObserverConfig",
    "load_config",
    "validate_config",

    # Event System
    "EventBus",
    "Event",
    "SystemSuspending",
    "SystemResumed",
    "UnitStateChanged",
    "ControllerStateChanged",

    # Interfaces
    "ILoadSampler",
    "IUnitActuator",
    "IHotplugController",

    # Logging & Listeners
    "SystemEventLogger",
    "register_event_listeners",
]
