"""Load sampling.

``LoadSampler`` is the read-and-clear accumulator consumed by the decision
engine; ``LoadObserver`` is the psutil-backed feeder that keeps it filled.

Usage:
    from autosmp.sampling import LoadSampler, LoadObserver
    from autosmp.core.config import ObserverConfig

    sampler = LoadSampler()
    observer = LoadObserver(ObserverConfig(), sampler)
    await observer.start()
"""

from autosmp.sampling.sampler import LoadSampler
from autosmp.sampling.observer import LoadObserver

__all__ = [
    "LoadSampler",
    "LoadObserver",
]
