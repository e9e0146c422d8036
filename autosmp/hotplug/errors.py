"""Hotplug error taxonomy.

Policy errors (``NoCapacityError``, ``NoEligibleUnitError``) are expected and
only mean the tick takes no action. ``SampleUnavailableError`` degrades the
tick to a zero load reading. ``ActionFailedError`` wraps an actuator refusal;
the same action is retried on the next qualifying tick.
"""


class HotplugError(Exception):
    """Base class for controller errors."""
    pass


class NoCapacityError(HotplugError):
    """Every unit in the pool is already online."""
    pass


class NoEligibleUnitError(HotplugError):
    """No online unit may be taken offline."""
    pass


class SampleUnavailableError(HotplugError):
    """The load sampler could not produce a reading."""
    pass


class ActionFailedError(HotplugError):
    """The actuator failed to switch a unit."""

    def __init__(self, unit_id: int, online: bool, reason: str = ""):
        self.unit_id = unit_id
        self.online = online
        self.reason = reason
        action = "online" if online else "offline"
        message = f"Failed to bring unit {unit_id} {action}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
