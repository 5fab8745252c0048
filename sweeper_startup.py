import asyncio
import logging
import signal
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from medreminder.adapters.db.mongo.client import init_database
from medreminder.core.config import get_settings
from medreminder.core.structured_logger import configure_logging
from medreminder.workers.dose_sweeper import run_dose_sweeper_forever

logger = logging.getLogger("medreminder")


async def main() -> None:
    """
    Entry point for the standalone dose sweeper.

    This process is intended to be run separately from the API workers:
        PYTHONPATH=./src python3 sweeper_startup.py
    """
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)
    if not settings.sweeper.enabled:
        logger.info("Dose sweeper is disabled. Set DOSE_SWEEPER_ENABLED=true to enable.")
        return

    logger.info("🚀 Starting dose sweeper…")
    client: Optional[AsyncIOMotorClient] = await init_database(settings.database)

    # Graceful shutdown via signals
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("🛑 Shutdown signal received for sweeper, stopping gracefully…")
        stop_event.set()

    loop = asyncio.get_running_loop()
    if hasattr(signal, "SIGTERM"):
        loop.add_signal_handler(signal.SIGTERM, _signal_handler)
    if hasattr(signal, "SIGINT"):
        loop.add_signal_handler(signal.SIGINT, _signal_handler)

    try:
        # The loop finishes its current pass and returns once stop_event is set
        await run_dose_sweeper_forever(stop_event)
    finally:
        if client:
            client.close()
            logger.info("Sweeper MongoDB client closed.")


if __name__ == "__main__":
    asyncio.run(main())
