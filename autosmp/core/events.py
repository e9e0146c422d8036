"""Event system for decoupled communication between components."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Type
import asyncio
import inspect
import logging

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Base event class.

    Note: All fields have defaults to allow subclasses to add required fields.
    """
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SystemSuspending(Event):
    """The host is entering its suspended (screen-off) power state."""
    source: str = ""


@dataclass
class SystemResumed(Event):
    """The host left the suspended power state."""
    source: str = ""


@dataclass
class UnitStateChanged(Event):
    """A pool unit was brought online or taken offline."""
    unit_id: int = 0
    online: bool = False
    reason: str = ""  # 'load', 'suspend', 'resume', 'disable'
    online_count: int = 0


@dataclass
class ControllerStateChanged(Event):
    """Controller was enabled, disabled, suspended or resumed."""
    enabled: bool = False
    suspended: bool = False
    trigger: str = ""


class EventBus:
    """Central event bus for system-wide communication with backpressure."""

    def __init__(self, max_queue_size: int = 1000):
        self._handlers: Dict[Type[Event], List[Callable]] = {}
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._running = False
        self._task = None
        logger.info(f"Event bus initialized (max_queue_size={max_queue_size})")

    def subscribe(self, event_type: Type[Event], handler: Callable):
        """Register an event handler."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed {handler.__name__} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[Event], handler: Callable):
        """Remove an event handler."""
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)
            logger.debug(f"Unsubscribed {handler.__name__} from {event_type.__name__}")

    def subscriber_count(self, event_type: Type[Event]) -> int:
        """Number of handlers registered for an event type."""
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: Event):
        """Publish an event to all subscribers."""
        try:
            await asyncio.wait_for(self._queue.put(event), timeout=1.0)
        except asyncio.TimeoutError:
            logger.error(f"Event queue full, dropping {type(event).__name__}")

    def publish_nowait(self, event: Event) -> bool:
        """Queue an event without waiting. Returns False when it was dropped."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(f"Event queue full, dropping {type(event).__name__}")
            return False
        return True

    async def start(self):
        """Start processing events."""
        self._running = True
        self._task = asyncio.create_task(self._process_events())
        logger.info("Event bus started")

    async def stop(self):
        """Stop processing events."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Event bus stopped")

    async def drain(self):
        """Wait until every queued event has been dispatched."""
        await self._queue.join()

    async def _process_events(self):
        """Process events from queue."""
        while self._running:
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.1)
            except asyncio.TimeoutError:
                continue
            try:
                await self._dispatch(event)
            except Exception as e:
                logger.error(f"Error processing event: {e}", exc_info=True)
            finally:
                self._queue.task_done()

    async def _dispatch(self, event: Event):
        """Dispatch event to handlers with error isolation."""
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(f"No handlers for {event_type.__name__}")
            return

        logger.debug(f"Dispatching {event_type.__name__} to {len(handlers)} handlers")

        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {handler.__name__} failed for {event_type.__name__}: {e}",
                    exc_info=True
                )
