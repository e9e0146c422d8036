"""Host load observer feeding the sampler."""

import asyncio
import logging
from typing import Optional

import psutil

from autosmp.core.config import ObserverConfig
from autosmp.sampling.sampler import LoadSampler

logger = logging.getLogger(__name__)


class LoadObserver:
    """Continuously probes host load and records it into a ``LoadSampler``."""

    def __init__(self, config: ObserverConfig, sampler: LoadSampler):
        self.config = config
        self.sampler = sampler
        self._task: Optional[asyncio.Task] = None
        self._failures = 0

        if config.metric == "utilization":
            # Prime the counter; the first call always returns 0.0
            psutil.cpu_percent(interval=None)

        logger.info(
            f"Load observer initialized (metric={config.metric}, "
            f"interval={config.sample_interval_ms}ms)"
        )

    async def start(self):
        """Start the sampling loop."""
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._observe_loop())
        logger.info("Load observer started")

    async def stop(self):
        """Stop the sampling loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Load observer stopped")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _observe_loop(self):
        """Continuous probing loop."""
        while True:
            try:
                value = await asyncio.to_thread(self.probe)
                self.sampler.record(value)
                if self._failures:
                    logger.info(f"Load probe recovered after {self._failures} failures")
                    self._failures = 0
            except asyncio.CancelledError:
                break
            except (psutil.Error, OSError) as e:
                self._failures += 1
                if self._failures == 1:
                    logger.warning(f"Load probe failed: {e}")
                self.sampler.mark_unavailable(str(e))
            except Exception as e:
                self._failures += 1
                logger.error(f"Load probe error: {e}", exc_info=True)
                self.sampler.mark_unavailable(str(e))

            await asyncio.sleep(self.config.sample_interval_ms / 1000.0)

    def probe(self) -> int:
        """Take one load reading in the configured metric."""
        if self.config.metric == "utilization":
            return int(psutil.cpu_percent(interval=None))
        return self.count_runnable() * self.config.scale

    def count_runnable(self) -> int:
        """Count processes currently in the running state."""
        running = 0
        for proc in psutil.process_iter(['status']):
            try:
                if proc.info['status'] == psutil.STATUS_RUNNING:
                    running += 1
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return running
