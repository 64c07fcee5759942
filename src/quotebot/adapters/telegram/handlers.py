"""
Telegram handlers for the quote wizard.

Each handler converts Telegram objects into engine input and delegates:
text messages become PlainText answers, option buttons become
Selections, and final buttons go to the completion gate. The engine
decides whether input is accepted; handlers never track wizard state.

Flow:
  /start → welcome → [Get my quote] → questions … → quote → final actions
"""

import logging

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, Message

from quotebot.adapters.telegram.formatters import WELCOME_TEXT
from quotebot.adapters.telegram.keyboards import (
    FINAL_PREFIX,
    OPTION_PREFIX,
    START_CALLBACK,
    parse_option_callback,
    welcome_keyboard,
)
from quotebot.adapters.telegram.sessions import WizardSessions
from quotebot.core.steps import PlainText

logger = logging.getLogger(__name__)
router = Router(name="quote_wizard")

NO_SESSION_TEXT = "Send /start to begin a new quote."
BUSY_TEXT = "Still working on your last answer, one moment..."


# ── Entry points ─────────────────────────────────────────────


@router.message(CommandStart())
async def cmd_start(message: Message, sessions: WizardSessions) -> None:
    """Show the welcome screen; any previous session is discarded."""
    sessions.drop(message.chat.id)
    await message.answer(WELCOME_TEXT, reply_markup=welcome_keyboard())


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, sessions: WizardSessions) -> None:
    """Abandon the current quote."""
    if sessions.drop(message.chat.id):
        await message.answer("❌ Quote cancelled. " + NO_SESSION_TEXT)
    else:
        await message.answer(NO_SESSION_TEXT)


@router.callback_query(F.data == START_CALLBACK)
async def start_wizard(callback: CallbackQuery, bot: Bot, sessions: WizardSessions) -> None:
    """Welcome button pressed: start a fresh conversation."""
    await callback.answer()
    chat_id = callback.message.chat.id  # type: ignore[union-attr]
    await callback.message.edit_reply_markup(reply_markup=None)  # type: ignore[union-attr]
    engine = sessions.create(bot, chat_id)
    await engine.start_conversation()


# ── Answers ──────────────────────────────────────────────────


@router.callback_query(F.data.startswith(f"{OPTION_PREFIX}:"))
async def pick_option(callback: CallbackQuery, sessions: WizardSessions) -> None:
    """Option button pressed: answer the current step with that selection."""
    chat_id = callback.message.chat.id  # type: ignore[union-attr]
    engine = sessions.get(chat_id)
    if engine is None:
        await callback.answer(NO_SESSION_TEXT)
        return

    if engine.state.processing:
        await callback.answer(BUSY_TEXT)
        return

    parsed = parse_option_callback(callback.data or "")
    step = engine.current_step
    if parsed is None or step is None or step.id != parsed[0]:
        await callback.answer("That question has already been answered.")
        return

    option = step.option(parsed[1])
    if option is None:
        await callback.answer("That option is no longer available.")
        return

    await callback.answer(option.text)
    await callback.message.edit_reply_markup(reply_markup=None)  # type: ignore[union-attr]
    if not await engine.handle_user_response(option, step):
        logger.debug("Option %r dropped in chat %d: wizard was busy", option.text, chat_id)


@router.message(F.text)
async def free_text(message: Message, sessions: WizardSessions) -> None:
    """Typed answer for the current step."""
    engine = sessions.get(message.chat.id)
    if engine is None:
        await message.answer(NO_SESSION_TEXT)
        return

    text = (message.text or "").strip()
    if not text:
        await message.answer("Please type an answer:")
        return

    await engine.handle_user_response(PlainText(text))


# ── Final decision ───────────────────────────────────────────


@router.callback_query(F.data.startswith(f"{FINAL_PREFIX}:"))
async def final_action(callback: CallbackQuery, sessions: WizardSessions) -> None:
    """Final button pressed once the quote is shown."""
    await callback.answer()
    chat_id = callback.message.chat.id  # type: ignore[union-attr]
    engine = sessions.get(chat_id)
    if engine is None:
        await callback.message.answer(NO_SESSION_TEXT)  # type: ignore[union-attr]
        return

    action = (callback.data or "").partition(":")[2]
    if await engine.handle_final_action(action):
        await callback.message.edit_reply_markup(reply_markup=None)  # type: ignore[union-attr]
        sessions.drop(chat_id)
        logger.info("Wizard finished in chat %d with action %r", chat_id, action)
