"""
Per-chat wizard sessions for Telegram.

Each chat gets its own ConversationEngine, wired to:
  - TelegramRenderer  — sends new timeline entries, typing and final buttons
  - TelegramNavigator — turns "go to /dashboard" into a link button

Sessions live in memory only; a restart forgets every conversation.
"""

import logging

from aiogram import Bot
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError

from quotebot.adapters.telegram.formatters import FINAL_PROMPT, format_assistant_entry
from quotebot.adapters.telegram.keyboards import final_actions_keyboard, link_keyboard, options_keyboard
from quotebot.core.engine import ConversationEngine, Pacing
from quotebot.core.gate import CompletionGate
from quotebot.core.pipeline import QuoteBackend, SubmissionPipeline
from quotebot.core.steps import StepScript
from quotebot.core.timeline import Role, TimelineEntry

logger = logging.getLogger(__name__)


class TelegramRenderer:
    """
    ConversationObserver that mirrors the timeline into a Telegram chat.

    User entries are not echoed: the user already sees what they typed,
    and option picks are acknowledged on the button itself. Send failures
    are logged and swallowed so a flaky network cannot wedge the engine.
    """

    def __init__(self, bot: Bot, chat_id: int, script: StepScript) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.script = script

    async def on_entry(self, entry: TimelineEntry) -> None:
        if entry.role is not Role.ASSISTANT:
            return
        markup = None
        if entry.step is not None and not entry.is_quote_result:
            markup = options_keyboard(entry.step)
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=format_assistant_entry(entry, self.script),
                reply_markup=markup,
            )
        except TelegramAPIError as e:
            logger.warning("Failed to deliver entry %s to chat %d: %s", entry.id, self.chat_id, e)

    async def on_typing(self, visible: bool) -> None:
        if not visible:
            return
        try:
            await self.bot.send_chat_action(chat_id=self.chat_id, action=ChatAction.TYPING)
        except TelegramAPIError as e:
            logger.debug("Typing indicator failed for chat %d: %s", self.chat_id, e)

    async def on_gate_open(self) -> None:
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=FINAL_PROMPT,
                reply_markup=final_actions_keyboard(),
            )
        except TelegramAPIError as e:
            logger.warning("Failed to send final actions to chat %d: %s", self.chat_id, e)


class TelegramNavigator:
    """Navigation collaborator: sends a link into the web app."""

    def __init__(self, bot: Bot, chat_id: int, base_url: str) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.base_url = base_url.rstrip("/")

    async def navigate_to(self, route: str) -> None:
        url = f"{self.base_url}{route}"
        await self.bot.send_message(
            chat_id=self.chat_id,
            text="Your quote is saved. Open your dashboard to review it and continue:",
            reply_markup=link_keyboard("📊 Open dashboard", url),
        )


class WizardSessions:
    """In-memory registry: chat id → running engine."""

    def __init__(
        self,
        *,
        backend: QuoteBackend,
        script: StepScript,
        dashboard_url: str,
        coverage_type: str = "homeowners",
        pacing: Pacing | None = None,
    ) -> None:
        self.backend = backend
        self.script = script
        self.dashboard_url = dashboard_url
        self.coverage_type = coverage_type
        self.pacing = pacing
        self._engines: dict[int, ConversationEngine] = {}

    def create(self, bot: Bot, chat_id: int) -> ConversationEngine:
        """Start a fresh engine for the chat, replacing any previous one."""
        engine = ConversationEngine(
            self.script,
            SubmissionPipeline(self.backend, coverage_type=self.coverage_type),
            CompletionGate(TelegramNavigator(bot, chat_id, self.dashboard_url)),
            observer=TelegramRenderer(bot, chat_id, self.script),
            pacing=self.pacing,
        )
        self._engines[chat_id] = engine
        logger.info("Wizard session created for chat %d", chat_id)
        return engine

    def get(self, chat_id: int) -> ConversationEngine | None:
        return self._engines.get(chat_id)

    def drop(self, chat_id: int) -> bool:
        return self._engines.pop(chat_id, None) is not None

    def __len__(self) -> int:
        return len(self._engines)
