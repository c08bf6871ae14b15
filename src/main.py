"""Monitoring service entry point."""

import asyncio
import logging

from src.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Start the interval manager and block until interrupted."""
    from src.app import run

    logger.info(
        "Starting monitoring service (settings=%s, tz=%s)...",
        settings.settings_path,
        settings.scheduler_timezone,
    )
    asyncio.run(run())


if __name__ == "__main__":
    main()
