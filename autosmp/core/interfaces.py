"""Interface definitions for all major components."""

from abc import ABC, abstractmethod
from typing import Optional


class ILoadSampler(ABC):
    """Read-and-clear load statistic."""

    @abstractmethod
    def sample_and_reset(self) -> int:
        """Return the load accumulated since the last call and reset it."""
        pass


class IUnitActuator(ABC):
    """Performs the actual online/offline switch of a pool unit."""

    @abstractmethod
    def capacity(self) -> int:
        """Number of units in the pool."""
        pass

    @abstractmethod
    def is_online(self, unit_id: int) -> bool:
        """Current hardware state of a unit."""
        pass

    @abstractmethod
    async def bring_online(self, unit_id: int) -> bool:
        """Bring a unit online. Returns False on failure."""
        pass

    @abstractmethod
    async def take_offline(self, unit_id: int) -> bool:
        """Take a unit offline. Returns False on failure."""
        pass

    @abstractmethod
    def read_performance(self, unit_id: int) -> Optional[int]:
        """Current operating rate of a unit, None when unknown."""
        pass


class IHotplugController(ABC):
    """Lifecycle interface of the pool controller."""

    @abstractmethod
    async def enable(self) -> None:
        """Start periodic decisions."""
        pass

    @abstractmethod
    async def disable(self) -> None:
        """Stop periodic decisions and restore full capacity."""
        pass

    @abstractmethod
    async def on_suspend(self, event=None) -> None:
        """Handle entry into the suspended power state."""
        pass

    @abstractmethod
    async def on_resume(self, event=None) -> None:
        """Handle exit from the suspended power state."""
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """Check whether periodic decisions are enabled."""
        pass

    @abstractmethod
    def is_suspended(self) -> bool:
        """Check suspended status."""
        pass
