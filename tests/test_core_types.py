from __future__ import annotations

import dataclasses

import pytest

from quotebot.core.profile import FRIENDLY_NAME_FALLBACK, ProfileStore, friendly_name
from quotebot.core.script import PROGRESS_TEXTS, QUOTE_SCRIPT
from quotebot.core.steps import (
    PlainText,
    Selection,
    StepDescriptor,
    StepKind,
    StepScript,
)
from quotebot.core.timeline import QUOTE_RESULT, Role, Timeline

# ── Profile ──────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("profile", "expected"),
    [
        ({"full_name": "Jane Doe"}, "Jane"),
        ({"full_name": "  Jane   Q  Doe "}, "Jane"),
        ({"name": "Sam"}, "Sam"),
        ({"full_name": "", "name": "Sam Lee"}, "Sam"),
        ({}, FRIENDLY_NAME_FALLBACK),
        ({"full_name": ""}, FRIENDLY_NAME_FALLBACK),
        ({"full_name": "   "}, FRIENDLY_NAME_FALLBACK),
        ({"full_name": 42}, FRIENDLY_NAME_FALLBACK),
    ],
)
def test_friendly_name(profile, expected) -> None:
    assert friendly_name(profile) == expected


def test_friendly_name_fallback_literal() -> None:
    assert FRIENDLY_NAME_FALLBACK == "friend"


def test_profile_snapshot_is_detached_and_read_only() -> None:
    store = ProfileStore()
    store.record("email", "a@b.c")
    snap = store.snapshot()

    store.record("phone", "555")

    assert dict(snap) == {"email": "a@b.c"}
    with pytest.raises(TypeError):
        snap["email"] = "x"  # type: ignore[index]
    assert "phone" in store and len(store) == 2


# ── Timeline ─────────────────────────────────────────────────


def test_timeline_ids_are_unique_and_ordered() -> None:
    timeline = Timeline()
    entries = [timeline.append(Role.ASSISTANT, f"m{i}") for i in range(5)]

    assert [e.seq for e in entries] == [1, 2, 3, 4, 5]
    assert len({e.id for e in entries}) == 5
    assert timeline.entries() == tuple(entries)
    assert timeline.last is entries[-1]


def test_timeline_entries_are_frozen() -> None:
    timeline = Timeline()
    entry = timeline.append(Role.ASSISTANT, QUOTE_RESULT, extra={"quote": 1})

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.content = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.extra["quote"] = 2  # type: ignore[index]
    assert entry.is_quote_result


def test_timeline_extra_is_copied() -> None:
    extra = {"quote": 1}
    entry = Timeline().append(Role.USER, "x", extra=extra)

    extra["quote"] = 2

    assert entry.extra["quote"] == 1


# ── Steps & answers ──────────────────────────────────────────


def test_answers_expose_display_and_stored_values() -> None:
    assert (PlainText("hi").display_text, PlainText("hi").stored_value) == ("hi", "hi")
    choice = Selection("$300,000", 300000)
    assert (choice.display_text, choice.stored_value) == ("$300,000", 300000)


def test_step_render_literal_and_callable() -> None:
    literal = StepDescriptor(id="a", message="Hello")
    dynamic = StepDescriptor(id="b", message=lambda name: f"Hi {name}")

    assert literal.render("Jane") == "Hello"
    assert dynamic.render("Jane") == "Hi Jane"


def test_terminal_detection() -> None:
    assert StepDescriptor(id="x", message="", kind=StepKind.LOADING).is_terminal
    assert StepDescriptor(id="generate_quote", message="").is_terminal
    assert not StepDescriptor(id="x", message="").is_terminal


def test_step_option_lookup() -> None:
    step = StepDescriptor(id="x", message="", options=(Selection("A", 1),))

    assert step.option(0) == Selection("A", 1)
    assert step.option(1) is None
    assert step.option(-1) is None


def test_script_validation() -> None:
    with pytest.raises(ValueError):
        StepScript([])
    with pytest.raises(ValueError, match="Duplicate"):
        StepScript([StepDescriptor(id="a", message=""), StepDescriptor(id="a", message="")])


def test_script_step_at() -> None:
    script = StepScript([StepDescriptor(id="a", message=""), StepDescriptor(id="b", message="")])

    assert script.step_at(1).id == "b"
    assert script.step_at(2) is None
    assert script.step_at(None) is None
    assert not hasattr(script, "index_of")


def test_default_script_shape() -> None:
    fields = [step.field for step in QUOTE_SCRIPT if step.field]

    assert fields == [
        "full_name", "email", "phone", "address",
        "state", "zip_code", "dwelling_limit", "year_built",
    ]
    assert QUOTE_SCRIPT[-1].is_terminal
    assert sum(step.is_terminal for step in QUOTE_SCRIPT) == 1
    assert set(PROGRESS_TEXTS) == {step.id for step in QUOTE_SCRIPT}
