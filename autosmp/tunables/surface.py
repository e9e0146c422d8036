"""Named read/write settings for a running controller."""

import logging
from typing import Any, Callable, Dict, List

from autosmp.hotplug.controller import HotplugController
from autosmp.utils.validation import parse_bool, parse_unsigned

logger = logging.getLogger(__name__)

# name -> parser; every entry is an attribute of HotplugConfig
PARAMETERS: Dict[str, Callable[[Any], Any]] = {
    "poll_interval_ms": parse_unsigned,
    "min_units": parse_unsigned,
    "max_units": parse_unsigned,
    "load_threshold_up": parse_unsigned,
    "load_threshold_down": parse_unsigned,
    "cycles_required_up": parse_unsigned,
    "cycles_required_down": parse_unsigned,
    "single_unit_on_suspend": parse_bool,
}

ENABLED = "enabled"
TIMES_TOGGLED = "times_toggled"


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class TunableSurface:
    """Text-valued settings backed by the controller's ``HotplugConfig``.

    Writes take effect on the next tick. Values are only parsed, never
    range-checked, so inconsistent combinations (for example a down
    threshold above the up threshold) are accepted as written.
    """

    def __init__(self, controller: HotplugController):
        self.controller = controller

    def names(self) -> List[str]:
        names = list(PARAMETERS) + [ENABLED]
        if self.controller.stats_enabled:
            names.append(TIMES_TOGGLED)
        return names

    def read(self, name: str) -> str:
        if name == ENABLED:
            return _render(self.controller.is_enabled())
        if name == TIMES_TOGGLED:
            self._require_stats()
            return "".join(
                f"{unit_id} {count}\n"
                for unit_id, count in self.controller.pool.toggle_counts().items()
            )
        if name == "max_units":
            return _render(self.controller.engine.effective_max_units())
        if name in PARAMETERS:
            return _render(getattr(self.controller.config, name))
        raise KeyError(name)

    async def write(self, name: str, text: Any):
        """Parse and apply one setting.

        Raises:
            KeyError: unknown setting
            PermissionError: read-only setting
            ValidationError: malformed value (nothing is changed)
        """
        if name == TIMES_TOGGLED:
            self._require_stats()
            raise PermissionError(f"{name} is read-only")

        if name == ENABLED:
            if parse_bool(text):
                await self.controller.enable()
            else:
                await self.controller.disable()
            return

        if name not in PARAMETERS:
            raise KeyError(name)

        value = PARAMETERS[name](text)
        setattr(self.controller.config, name, value)
        logger.info(f"Tunable {name} set to {_render(value)}")

    def snapshot(self) -> Dict[str, str]:
        """Current value of every readable setting."""
        return {name: self.read(name) for name in self.names()}

    def _require_stats(self):
        if not self.controller.stats_enabled:
            raise KeyError(TIMES_TOGGLED)
