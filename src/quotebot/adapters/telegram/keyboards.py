"""
Telegram inline keyboard builders for the quote wizard.

These helpers produce aiogram InlineKeyboardMarkup objects.
They are Telegram-specific and belong in the adapter layer.

Callback data formats:
  wizard:start            — welcome screen button
  opt:<step_id>:<index>   — pick option <index> of step <step_id>
  final:<action>          — final decision (proceed / view_dashboard)
"""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from quotebot.core.steps import StepDescriptor

START_CALLBACK = "wizard:start"
OPTION_PREFIX = "opt"
FINAL_PREFIX = "final"


def welcome_keyboard() -> InlineKeyboardMarkup:
    """Single button that starts the wizard."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🏠 Get my quote", callback_data=START_CALLBACK)],
    ])


def options_keyboard(step: StepDescriptor, per_row: int = 2) -> InlineKeyboardMarkup | None:
    """
    One button per option of the step, `per_row` buttons per row.

    Returns None for steps without options (free-text answer expected).
    """
    if not step.options:
        return None

    rows: list[list[InlineKeyboardButton]] = []
    for idx, option in enumerate(step.options):
        button = InlineKeyboardButton(
            text=option.text,
            callback_data=f"{OPTION_PREFIX}:{step.id}:{idx}",
        )
        if not rows or len(rows[-1]) >= per_row:
            rows.append([])
        rows[-1].append(button)
    return InlineKeyboardMarkup(inline_keyboard=rows)


def parse_option_callback(data: str) -> tuple[str, int] | None:
    """Split `opt:<step_id>:<index>` into (step_id, index); None if malformed."""
    prefix, _, rest = data.partition(":")
    step_id, _, raw_index = rest.rpartition(":")
    if prefix != OPTION_PREFIX or not step_id or not raw_index.isdigit():
        return None
    return step_id, int(raw_index)


def final_actions_keyboard() -> InlineKeyboardMarkup:
    """Shown once the wizard is finished."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [
            InlineKeyboardButton(text="✅ Proceed", callback_data=f"{FINAL_PREFIX}:proceed"),
            InlineKeyboardButton(text="📊 View dashboard", callback_data=f"{FINAL_PREFIX}:view_dashboard"),
        ],
    ])


def link_keyboard(text: str, url: str) -> InlineKeyboardMarkup:
    """Single URL button."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=text, url=url)],
    ])
