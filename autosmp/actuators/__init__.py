"""Power-unit actuators.

``SysfsCpuActuator`` drives real CPU hotplug on Linux;
``SimulatedActuator`` keeps state in memory for dry runs and tests.
"""

import psutil

from autosmp.actuators.simulated import SimulatedActuator
from autosmp.actuators.sysfs import SysfsCpuActuator, parse_cpu_list

__all__ = [
    "SimulatedActuator",
    "SysfsCpuActuator",
    "parse_cpu_list",
    "create_actuator",
]


def create_actuator(config):
    """Build the actuator named by ``HotplugConfig.actuator``."""
    if config.actuator == "simulated":
        capacity = config.pool_capacity
        if capacity is None:
            capacity = psutil.cpu_count(logical=True) or 1
        return SimulatedActuator(capacity)
    return SysfsCpuActuator(config.sysfs_root, capacity=config.pool_capacity)
