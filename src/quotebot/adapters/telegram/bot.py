"""
Telegram adapter — implements PlatformAdapter using aiogram 3.x.

Runs a single bot identity (TELEGRAM_BOT_TOKEN) in polling mode. The
WizardSessions registry is injected into every handler through the
dispatcher's workflow data.
"""

import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import BotCommand

from quotebot.adapters.base import PlatformAdapter
from quotebot.adapters.telegram.handlers import router as wizard_router
from quotebot.adapters.telegram.sessions import WizardSessions
from quotebot.config import settings

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand(command="start", description="Start a new homeowners quote"),
    BotCommand(command="cancel", description="Cancel the current quote"),
]


class TelegramAdapter(PlatformAdapter):
    """Telegram implementation of the platform adapter."""

    def __init__(self, sessions: WizardSessions, token: str | None = None) -> None:
        self.sessions = sessions
        self.dp = Dispatcher(sessions=sessions)
        self.dp.include_router(wizard_router)
        self._token = token or settings.telegram_bot_token
        self._bot: Bot | None = None

    async def start(self) -> None:
        """Resolve the bot identity, publish the command menu and start polling."""
        if not self._token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not set. Set it in .env")

        self._bot = Bot(
            token=self._token,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )
        me = await self._bot.me()
        logger.info("Bot identity: @%s (id=%d)", me.username, me.id)

        try:
            await self._bot.set_my_commands(BOT_COMMANDS)
        except Exception as e:
            logger.warning("Failed to set bot commands: %s", e)
        logger.info("Starting Telegram bot (polling mode)...")
        await self.dp.start_polling(self._bot)

    async def stop(self) -> None:
        """Close the bot session."""
        if self._bot is None:
            return
        logger.info("Stopping Telegram bot...")
        await self._bot.session.close()
        self._bot = None
