from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from quotebot.adapters.telegram.formatters import WELCOME_TEXT
from quotebot.adapters.telegram.handlers import (
    BUSY_TEXT,
    NO_SESSION_TEXT,
    cmd_cancel,
    cmd_start,
    final_action,
    free_text,
    pick_option,
    start_wizard,
)
from quotebot.adapters.telegram.sessions import WizardSessions
from quotebot.core.engine import Pacing, Phase
from quotebot.core.script import QUOTE_SCRIPT
from tests.helpers import make_backend

CHAT_ID = 501


def make_bot() -> MagicMock:
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.send_chat_action = AsyncMock()
    return bot


def make_message(text: str | None = None) -> MagicMock:
    message = MagicMock()
    message.chat.id = CHAT_ID
    message.text = text
    message.answer = AsyncMock()
    message.edit_reply_markup = AsyncMock()
    return message


def make_callback(data: str) -> MagicMock:
    callback = MagicMock()
    callback.data = data
    callback.answer = AsyncMock()
    callback.message = make_message()
    return callback


@pytest.fixture
def sessions() -> WizardSessions:
    return WizardSessions(
        backend=make_backend(),
        script=QUOTE_SCRIPT,
        dashboard_url="https://app.example.com",
        pacing=Pacing.instant(),
    )


@pytest.mark.asyncio
async def test_start_command_shows_welcome_and_resets(sessions) -> None:
    sessions.create(make_bot(), CHAT_ID)
    message = make_message("/start")

    await cmd_start(message, sessions)

    assert sessions.get(CHAT_ID) is None
    assert message.answer.await_args.args[0] == WELCOME_TEXT


@pytest.mark.asyncio
async def test_text_without_session_points_to_start(sessions) -> None:
    message = make_message("hello")

    await free_text(message, sessions)

    message.answer.assert_awaited_once_with(NO_SESSION_TEXT)


@pytest.mark.asyncio
async def test_blank_text_is_not_an_answer(sessions) -> None:
    bot = make_bot()
    await start_wizard(make_callback("wizard:start"), bot, sessions)
    engine = sessions.get(CHAT_ID)
    message = make_message("   ")

    await free_text(message, sessions)

    assert len(engine.timeline) == 1
    message.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_wizard_button_starts_conversation(sessions) -> None:
    bot = make_bot()

    await start_wizard(make_callback("wizard:start"), bot, sessions)

    engine = sessions.get(CHAT_ID)
    assert engine is not None
    assert engine.state.phase is Phase.AWAITING_INPUT
    assert bot.send_message.await_count == 1

    await free_text(make_message("Jane Doe"), sessions)
    assert engine.profile["full_name"] == "Jane Doe"


@pytest.mark.asyncio
async def test_stale_option_button_is_rejected(sessions) -> None:
    await start_wizard(make_callback("wizard:start"), make_bot(), sessions)
    callback = make_callback("opt:dwelling_limit:1")

    await pick_option(callback, sessions)

    callback.answer.assert_awaited_once_with("That question has already been answered.")
    assert "dwelling_limit" not in sessions.get(CHAT_ID).profile


@pytest.mark.asyncio
async def test_option_button_answers_current_step(sessions) -> None:
    await start_wizard(make_callback("wizard:start"), make_bot(), sessions)
    engine = sessions.get(CHAT_ID)
    for text in ["Jane Doe", "j@x.io", "555", "1 Main", "TX", "73301"]:
        await free_text(make_message(text), sessions)
    callback = make_callback("opt:dwelling_limit:1")

    await pick_option(callback, sessions)

    assert engine.profile["dwelling_limit"] == 300000
    callback.answer.assert_awaited_once_with("$300,000")
    callback.message.edit_reply_markup.assert_awaited_once_with(reply_markup=None)


@pytest.mark.asyncio
async def test_final_action_navigates_and_ends_session(sessions) -> None:
    bot = make_bot()
    await start_wizard(make_callback("wizard:start"), bot, sessions)
    engine = sessions.get(CHAT_ID)
    for text in ["Jane Doe", "j@x.io", "555", "1 Main", "TX", "73301", "300000", "1999"]:
        await free_text(make_message(text), sessions)
    assert engine.state.phase is Phase.GATE_OPEN

    await final_action(make_callback("final:proceed"), sessions)

    assert sessions.get(CHAT_ID) is None
    markup = bot.send_message.await_args.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].url == "https://app.example.com/dashboard"


@pytest.mark.asyncio
async def test_cancel(sessions) -> None:
    sessions.create(make_bot(), CHAT_ID)
    message = make_message("/cancel")

    await cmd_cancel(message, sessions)
    await cmd_cancel(message, sessions)

    assert sessions.get(CHAT_ID) is None
    first, second = (call.args[0] for call in message.answer.await_args_list)
    assert first.startswith("❌ Quote cancelled.")
    assert second == NO_SESSION_TEXT


@pytest.mark.asyncio
async def test_second_option_press_while_busy_gets_feedback() -> None:
    hold = asyncio.Event()
    release = asyncio.Event()

    async def sleep(_seconds: float) -> None:
        if hold.is_set():
            await release.wait()

    sessions = WizardSessions(
        backend=make_backend(),
        script=QUOTE_SCRIPT,
        dashboard_url="https://app.example.com",
        pacing=Pacing(start=0, reveal=0, answer=1, settle=0, sleep=sleep),
    )
    await start_wizard(make_callback("wizard:start"), make_bot(), sessions)
    engine = sessions.get(CHAT_ID)
    for text in ["Jane Doe", "j@x.io", "555", "1 Main", "TX", "73301"]:
        await free_text(make_message(text), sessions)

    hold.set()
    first = asyncio.create_task(pick_option(make_callback("opt:dwelling_limit:1"), sessions))
    await asyncio.sleep(0)
    assert engine.state.processing is True

    second = make_callback("opt:dwelling_limit:2")
    await pick_option(second, sessions)

    second.answer.assert_awaited_once_with(BUSY_TEXT)
    second.message.edit_reply_markup.assert_not_awaited()

    release.set()
    await first
    assert engine.profile["dwelling_limit"] == 300000
