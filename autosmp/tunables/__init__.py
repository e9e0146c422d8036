"""Runtime tunables for the hotplug controller."""

from autosmp.tunables.surface import TunableSurface, PARAMETERS

__all__ = [
    "TunableSurface",
    "PARAMETERS",
]
