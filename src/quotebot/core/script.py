"""
Default homeowners quote intake script.

This is the question table the engine walks when no custom script is
supplied. Prompts that greet the user by name are functions of the
friendly name; everything else is literal text.
"""

from quotebot.core.steps import (
    GENERATE_QUOTE_STEP_ID,
    Selection,
    StepDescriptor,
    StepKind,
    StepScript,
)

# ── Dwelling limit presets ───────────────────────────────────
# Shown as buttons; the stored value is the plain number the API expects.

DWELLING_LIMIT_OPTIONS: tuple[Selection, ...] = (
    Selection("$150,000", 150000),
    Selection("$300,000", 300000),
    Selection("$500,000", 500000),
    Selection("$750,000", 750000),
)


QUOTE_SCRIPT = StepScript([
    StepDescriptor(
        id="full_name",
        message="Hi! I'm here to help you get a homeowners quote in a few minutes. "
                "What's your full name?",
        field="full_name",
    ),
    StepDescriptor(
        id="email",
        message=lambda name: f"Nice to meet you, {name}! What's the best email to reach you?",
        field="email",
    ),
    StepDescriptor(
        id="phone",
        message="And a phone number, in case we need to follow up?",
        field="phone",
    ),
    StepDescriptor(
        id="address",
        message=lambda name: f"Thanks, {name}. What's the street address of the home?",
        field="address",
    ),
    StepDescriptor(
        id="state",
        message="Which state is it in? (two-letter code, e.g. TX)",
        field="state",
    ),
    StepDescriptor(
        id="zip_code",
        message="What's the ZIP code?",
        field="zip_code",
    ),
    StepDescriptor(
        id="dwelling_limit",
        message="How much would it cost to rebuild the home? Pick the closest amount "
                "or type your own.",
        field="dwelling_limit",
        options=DWELLING_LIMIT_OPTIONS,
    ),
    StepDescriptor(
        id="year_built",
        message="Almost done! What year was the home built?",
        field="year_built",
    ),
    StepDescriptor(
        id=GENERATE_QUOTE_STEP_ID,
        message=lambda name: f"Perfect, {name}. Crunching the numbers on your quote...",
        kind=StepKind.LOADING,
    ),
])


# ── Progress labels ──────────────────────────────────────────
# Section headers renderers may show above each prompt, keyed by step id.

PROGRESS_TEXTS: dict[str, str] = {
    "full_name": "About you",
    "email": "About you",
    "phone": "About you",
    "address": "Your home",
    "state": "Your home",
    "zip_code": "Your home",
    "dwelling_limit": "Coverage",
    "year_built": "Coverage",
    GENERATE_QUOTE_STEP_ID: "Your quote",
}
