"""Linux CPU hotplug through sysfs."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import psutil

from autosmp.core.interfaces import IUnitActuator

logger = logging.getLogger(__name__)


def parse_cpu_list(text: str) -> List[int]:
    """Expand a kernel cpu list such as ``0-3,6`` into ids."""
    ids = []
    for part in text.strip().split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = part.split("-", 1)
            ids.extend(range(int(start), int(end) + 1))
        else:
            ids.append(int(part))
    return sorted(set(ids))


class SysfsCpuActuator(IUnitActuator):
    """Switches CPU cores via ``cpuN/online`` (requires root)."""

    def __init__(self, root: str = "/sys/devices/system/cpu", capacity: Optional[int] = None):
        self.root = Path(root)
        self._capacity = capacity if capacity is not None else self._detect_capacity()
        logger.info(f"Sysfs actuator initialized ({self._capacity} cores under {self.root})")

    def _detect_capacity(self) -> int:
        present = self.root / "present"
        try:
            ids = parse_cpu_list(present.read_text())
            if ids:
                return max(ids) + 1
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {present}: {e}")
        return psutil.cpu_count(logical=True) or 1

    def _online_file(self, unit_id: int) -> Path:
        return self.root / f"cpu{unit_id}" / "online"

    def capacity(self) -> int:
        return self._capacity

    def is_online(self, unit_id: int) -> bool:
        path = self._online_file(unit_id)
        if not path.exists():
            # Cores without an online file cannot be hotplugged
            return True
        return path.read_text().strip() == "1"

    async def bring_online(self, unit_id: int) -> bool:
        return await asyncio.to_thread(self._write_online, unit_id, True)

    async def take_offline(self, unit_id: int) -> bool:
        return await asyncio.to_thread(self._write_online, unit_id, False)

    def _write_online(self, unit_id: int, online: bool) -> bool:
        path = self._online_file(unit_id)
        if not path.exists():
            logger.error(f"cpu{unit_id} is not hotpluggable")
            return False
        with open(path, "w") as f:
            f.write("1" if online else "0")
        return self.is_online(unit_id) == online

    def read_performance(self, unit_id: int) -> Optional[int]:
        path = self.root / f"cpu{unit_id}" / "cpufreq" / "scaling_cur_freq"
        try:
            return int(path.read_text().strip())
        except (OSError, ValueError):
            return None
