"""Main entry point for autosmp."""

import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from autosmp.core.config import load_config, validate_config
from autosmp.core.events import EventBus, SystemSuspending, SystemResumed
from autosmp.core.events_listener import register_event_listeners
from autosmp.actuators import create_actuator
from autosmp.hotplug import create_hotplug_controller
from autosmp.sampling import LoadSampler, LoadObserver
from autosmp.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def install_signal_handlers(loop, event_bus: EventBus, stop_event: asyncio.Event):
    """SIGUSR1/SIGUSR2 announce suspend/resume, SIGINT/SIGTERM stop."""
    def announce(event):
        asyncio.ensure_future(event_bus.publish(event))

    loop.add_signal_handler(signal.SIGUSR1, announce, SystemSuspending(source="SIGUSR1"))
    loop.add_signal_handler(signal.SIGUSR2, announce, SystemResumed(source="SIGUSR2"))
    loop.add_signal_handler(signal.SIGINT, stop_event.set)
    loop.add_signal_handler(signal.SIGTERM, stop_event.set)


async def main():
    """Main application entry point."""
    # Load configuration
    config = load_config()

    # Setup logging
    setup_logging(config.debug_mode, config.log_level, config.log_dir)

    # Service references for cleanup
    event_bus = None
    observer = None
    controller = None

    try:
        actuator = create_actuator(config.hotplug)

        # Validate configuration against the real pool size
        errors = validate_config(config, pool_capacity=actuator.capacity())
        if errors:
            logger.error("Configuration errors:")
            for error in errors:
                logger.error(f"  - {error}")
            sys.exit(1)

        logger.info("=" * 60)
        logger.info("autosmp initializing")
        logger.info("=" * 60)

        # Initialize event bus
        event_bus = EventBus(max_queue_size=1000)
        await event_bus.start()
        register_event_listeners(event_bus, config.log_dir)

        # Initialize load sampling
        sampler = LoadSampler()
        observer = LoadObserver(config.observer, sampler)
        await observer.start()

        # Initialize controller
        controller = create_hotplug_controller(config.hotplug, actuator, sampler, event_bus)
        await controller.start()

        stop_event = asyncio.Event()
        install_signal_handlers(asyncio.get_running_loop(), event_bus, stop_event)

        logger.info("=" * 60)
        logger.info(f"System ready - {controller.status()}")
        logger.info("=" * 60)

        await stop_event.wait()
        logger.info("Shutdown signal received")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        logger.info("Shutting down...")

        # Graceful shutdown in reverse order
        if controller:
            await controller.shutdown()

        if observer:
            await observer.stop()

        if event_bus:
            await event_bus.stop()

        logger.info("Shutdown complete")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown complete.")
