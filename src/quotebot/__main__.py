"""
Main entry point for the homeowners quote bot.

Run with:  python -m quotebot
"""

import asyncio
import logging

from quotebot.config import settings


def setup_logging() -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def main() -> None:
    """Wire the quoting API client into the Telegram adapter and run it."""
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting quote bot...")
    logger.info("Quote API: %s", settings.quote_api_base_url)

    # Import adapter here to avoid loading aiogram before logging is configured
    from quotebot.adapters.telegram.bot import TelegramAdapter
    from quotebot.adapters.telegram.sessions import WizardSessions
    from quotebot.core.engine import Pacing
    from quotebot.core.script import QUOTE_SCRIPT
    from quotebot.services.quote_api import QuoteApiClient

    async with QuoteApiClient.from_settings(settings) as client:
        sessions = WizardSessions(
            backend=client,
            script=QUOTE_SCRIPT,
            dashboard_url=settings.dashboard_url,
            coverage_type=settings.coverage_type,
            pacing=Pacing.from_settings(settings),
        )
        adapter = TelegramAdapter(sessions)

        try:
            await adapter.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            await adapter.stop()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
