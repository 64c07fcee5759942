"""Pytest fixtures for the quote wizard.

Engines built here use zero-delay pacing and recording collaborators so
every conversation runs deterministically.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from quotebot.core.engine import ConversationEngine, Pacing
from quotebot.core.gate import CompletionGate
from quotebot.core.pipeline import SubmissionPipeline
from quotebot.core.steps import Selection, StepDescriptor, StepKind, StepScript
from tests.helpers import RecordingNavigator, RecordingObserver, make_backend


@pytest.fixture
def short_script() -> StepScript:
    """Three questions (one with options) followed by the loading step."""
    return StepScript([
        StepDescriptor(id="full_name", message="What's your name?", field="full_name"),
        StepDescriptor(
            id="email",
            message=lambda name: f"Hi {name}, your email?",
            field="email",
        ),
        StepDescriptor(
            id="dwelling_limit",
            message="Rebuild cost?",
            field="dwelling_limit",
            options=(Selection("$300,000", 300000), Selection("$500,000", 500000)),
        ),
        StepDescriptor(id="generate_quote", message="Working on it...", kind=StepKind.LOADING),
    ])


@pytest.fixture
def backend() -> MagicMock:
    return make_backend()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def make_engine(backend: MagicMock, observer: RecordingObserver, navigator: RecordingNavigator):
    """Factory for an engine wired to the recording collaborators."""

    def _make(
        script: StepScript,
        *,
        pacing: Pacing | None = None,
        backend_override: Any = None,
    ) -> ConversationEngine:
        return ConversationEngine(
            script,
            SubmissionPipeline(backend_override or backend),
            CompletionGate(navigator),
            observer=observer,
            pacing=pacing or Pacing.instant(),
        )

    return _make
