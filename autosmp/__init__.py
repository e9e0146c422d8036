"""
autosmp - adaptive CPU core hotplugging.

Brings cores online when the run queue stays deep and takes the slowest
cores offline when it stays shallow, with hysteresis, pool bounds and a
single-core policy while the system is suspended.

Usage:
    from autosmp import load_config, create_hotplug_controller

    config = load_config()
    # See main.py for full initialization
"""

__version__ = "1.0.0"
__license__ = "GPL-2.0-or-later"

# Core exports
from autosmp.core import (
    SystemConfig,
    HotplugConfig,
    load_config,
    validate_config,
    EventBus,
)

# Service exports
from autosmp.hotplug import HotplugController, UnitPool, create_hotplug_controller
from autosmp.sampling import LoadSampler, LoadObserver
from autosmp.actuators import SimulatedActuator, SysfsCpuActuator, create_actuator
from autosmp.tunables import TunableSurface

# Utility exports
from autosmp.utils import setup_logging

__all__ = [
    # Version info
    "__version__",
    "__license__",

    # Core
    "SystemConfig",
    "HotplugConfig",
    "load_config",
    "validate_config",
    "EventBus",

    # Services
    "HotplugController",
    "UnitPool",
    "create_hotplug_controller",
    "LoadSampler",
    "LoadObserver",
    "SimulatedActuator",
    "SysfsCpuActuator",
    "create_actuator",
    "TunableSurface",

    # Utilities
    "setup_logging",
]


def get_version() -> str:
    """Get the current version of autosmp."""
    return __version__
