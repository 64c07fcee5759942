"""
Telegram-specific message formatters — HTML output.

These functions format timeline entries and quotes into HTML strings
suitable for Telegram's HTML parse mode. Core modules produce plain text
and structured results; all markup belongs here, never in core/.
"""

from html import escape
from typing import Any

from quotebot.core.pipeline import SubmissionResult
from quotebot.core.script import PROGRESS_TEXTS
from quotebot.core.steps import StepScript
from quotebot.core.timeline import TimelineEntry

WELCOME_TEXT = (
    "👋 <b>Welcome!</b>\n\n"
    "I'll ask a few quick questions about you and your home, "
    "then put together a homeowners quote for you.\n"
    "It takes about two minutes."
)

FINAL_PROMPT = "🎉 <b>All done!</b> What would you like to do next?"


def format_money(amount: Any) -> str:
    """`$1,400` style; a dash when the amount is unknown."""
    if amount is None:
        return "—"
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return escape(str(amount))
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_progress(script: StepScript, step_id: str) -> str:
    """'Step 2 of 8 · About you' header for question steps."""
    questions = [s for s in script if not s.is_terminal]
    position = next((i for i, s in enumerate(questions, start=1) if s.id == step_id), None)
    section = PROGRESS_TEXTS.get(step_id)
    if position is None:
        return section or ""
    header = f"Step {position} of {len(questions)}"
    if section:
        header += f" · {section}"
    return header


def format_quote_card(quote: SubmissionResult) -> str:
    """Quote summary shown when the submission succeeds."""
    lines = [
        "📄 <b>Your quote is ready</b>",
        "",
        f"💵 Monthly premium: <b>{format_money(quote.monthly)}</b>",
        f"📅 Annual premium: {format_money(quote.annual)}",
        f"🏠 Dwelling limit: {format_money(quote.dwelling_limit)}",
    ]
    if isinstance(quote.coverage, str) and quote.coverage:
        lines.append(f"🛡 Coverage: {escape(quote.coverage.capitalize())}")
    elif quote.coverage:
        lines.append(f"🛡 Coverage: {escape(str(quote.coverage))}")
    return "\n".join(lines)


def format_assistant_entry(entry: TimelineEntry, script: StepScript) -> str:
    """
    Render an assistant entry.

    Quote results become a quote card; question prompts get a progress
    header; synthetic entries (e.g. failures) are sent as-is.
    """
    if entry.is_quote_result:
        quote = entry.extra.get("quote")
        if isinstance(quote, SubmissionResult):
            return format_quote_card(quote)

    text = escape(entry.content)
    if entry.step is None or entry.step.is_terminal:
        return text

    header = format_progress(script, entry.step.id)
    if not header:
        return text
    return f"<i>{escape(header)}</i>\n{text}"
