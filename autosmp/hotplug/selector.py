"""Unit selection policy.

Scale-up takes the lowest-id offline unit so growth is reproducible.
Scale-down removes the slowest online unit, which keeps the most aggregate
throughput per unit removed.
"""

from autosmp.hotplug.errors import NoCapacityError, NoEligibleUnitError
from autosmp.hotplug.pool import UnitPool


def pick_unit_to_bring_online(pool: UnitPool) -> int:
    """Lowest-id unit that is currently offline."""
    offline = pool.offline_ids()
    if not offline:
        raise NoCapacityError(f"All {pool.capacity} units are online")
    return offline[0]


def pick_unit_to_take_offline(pool: UnitPool, min_units: int = 1) -> int:
    """Online non-primary unit with the lowest performance metric.

    Units without a metric rank as 0; ties go to the lowest id.
    """
    online_count = pool.online_count()
    if online_count <= max(1, min_units):
        raise NoEligibleUnitError(
            f"{online_count} units online, minimum is {max(1, min_units)}"
        )

    candidates = [u for u in pool.units() if u.online and not u.is_primary]
    if not candidates:
        raise NoEligibleUnitError("Only the primary unit is online")

    slowest = min(candidates, key=lambda u: (u.performance_metric or 0, u.id))
    return slowest.id
