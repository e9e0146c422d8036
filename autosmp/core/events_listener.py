import logging
from pathlib import Path
import json

from autosmp.core.events import (
    EventBus,
    UnitStateChanged,
    ControllerStateChanged,
    SystemSuspending,
    SystemResumed
)

logger = logging.getLogger(__name__)


class SystemEventLogger:
    def __init__(self, log_dir: str = "data/logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.metrics_file = self.log_dir / "metrics.jsonl"

    async def on_unit_state_changed(self, event: UnitStateChanged):
        logger.debug(
            f"Unit {event.unit_id} -> {'online' if event.online else 'offline'} "
            f"({event.reason}, {event.online_count} online)"
        )

        await self._write_metric({
            "event": "unit_state_changed",
            "timestamp": event.timestamp.isoformat(),
            "unit_id": event.unit_id,
            "online": event.online,
            "reason": event.reason,
            "online_count": event.online_count
        })

    async def on_controller_state_changed(self, event: ControllerStateChanged):
        logger.info(
            f"Controller {event.trigger}: "
            f"enabled={event.enabled}, suspended={event.suspended}"
        )

        await self._write_metric({
            "event": "controller_state_changed",
            "timestamp": event.timestamp.isoformat(),
            "enabled": event.enabled,
            "suspended": event.suspended,
            "trigger": event.trigger
        })

    async def on_power_state(self, event):
        state = "suspending" if isinstance(event, SystemSuspending) else "resumed"
        logger.info(f"Power state: {state} (source: {event.source or 'unknown'})")

    async def _write_metric(self, data: dict):
        try:
            with open(self.metrics_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(data) + '\n')
        except OSError as e:
            logger.error(f"Failed to write metric: {e}")


def register_event_listeners(event_bus: EventBus, log_dir: str = "data/logs"):
    event_logger = SystemEventLogger(log_dir)

    event_bus.subscribe(UnitStateChanged, event_logger.on_unit_state_changed)
    event_bus.subscribe(ControllerStateChanged, event_logger.on_controller_state_changed)
    event_bus.subscribe(SystemSuspending, event_logger.on_power_state)
    event_bus.subscribe(SystemResumed, event_logger.on_power_state)

    logger.info("Event listeners registered")
    return event_logger
