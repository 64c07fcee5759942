"""
Conversation engine — the state machine that drives the intake wizard.

The engine walks a step script one step at a time:

  idle → advancing → awaiting_input ⇄ advancing → submitting → gate_open

Each advancement reveals the step's prompt, then either waits for the
user's answer or, on the terminal step, runs the submission pipeline.
At most one advancement is ever in flight: the `processing` flag is set
before the first await, and input arriving while it is set is dropped.

The engine knows nothing about rendering. Renderers subscribe through a
ConversationObserver and read an immutable ConversationView.
"""

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from quotebot.config import Settings
from quotebot.core.gate import CompletionGate
from quotebot.core.pipeline import SubmissionPipeline
from quotebot.core.profile import ProfileStore, ProfileValue, friendly_name
from quotebot.core.steps import StepDescriptor, StepScript, UserAnswer
from quotebot.core.timeline import Role, Timeline, TimelineEntry

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    IDLE = "idle"
    ADVANCING = "advancing"
    AWAITING_INPUT = "awaiting_input"
    SUBMITTING = "submitting"
    GATE_OPEN = "gate_open"


@dataclass
class ConversationState:
    """Mutable engine state. `cursor is None` means the script is exhausted."""

    phase: Phase = Phase.IDLE
    cursor: int | None = 0
    awaiting_user: bool = False
    processing: bool = False
    show_typing: bool = False


@dataclass(frozen=True)
class ConversationView:
    """Read-only projection handed to renderers."""

    messages: tuple[TimelineEntry, ...]
    cursor: int | None
    profile: Mapping[str, ProfileValue]
    awaiting_user: bool
    show_typing: bool
    phase: Phase


@dataclass(frozen=True)
class Pacing:
    """
    Artificial delays that pace the chat UI.

    They only order the reveal after the state update that precedes
    them; use Pacing.instant() for deterministic zero-delay runs.
    """

    start: float = 0.5
    reveal: float = 0.8
    answer: float = 0.8
    settle: float = 1.5
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    @classmethod
    def instant(cls) -> "Pacing":
        return cls(start=0, reveal=0, answer=0, settle=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Pacing":
        return cls(
            start=settings.start_delay,
            reveal=settings.reveal_delay,
            answer=settings.answer_delay,
            settle=settings.settle_delay,
        )

    async def wait(self, seconds: float) -> None:
        if seconds > 0:
            await self.sleep(seconds)


class ConversationObserver(Protocol):
    """
    Rendering hooks, awaited inline in timeline order.

    An exception raised by a hook is logged and the conversation carries on.
    """

    async def on_entry(self, entry: TimelineEntry) -> None: ...

    async def on_typing(self, visible: bool) -> None: ...

    async def on_gate_open(self) -> None: ...


class NullObserver:
    async def on_entry(self, entry: TimelineEntry) -> None:
        return None

    async def on_typing(self, visible: bool) -> None:
        return None

    async def on_gate_open(self) -> None:
        return None


class ConversationEngine:
    """
    Drives one conversation session.

    Args:
        script:   ordered steps to walk
        pipeline: submission chain run by the terminal step
        gate:     final-action router used once the gate is open
        observer: optional rendering hooks
        pacing:   delay strategy (defaults to the UI pacing)
    """

    def __init__(
        self,
        script: StepScript,
        pipeline: SubmissionPipeline,
        gate: CompletionGate,
        *,
        observer: ConversationObserver | None = None,
        pacing: Pacing | None = None,
    ) -> None:
        self.script = script
        self.state = ConversationState()
        self.profile = ProfileStore()
        self.timeline = Timeline()
        self._pipeline = pipeline
        self._gate = gate
        self._observer: ConversationObserver = observer or NullObserver()
        self._pacing = pacing or Pacing()

    # ── Read side ─────────────────────────────────────────────

    @property
    def current_step(self) -> StepDescriptor | None:
        return self.script.step_at(self.state.cursor)

    @property
    def friendly_name(self) -> str:
        return friendly_name(self.profile)

    def view(self) -> ConversationView:
        return ConversationView(
            messages=self.timeline.entries(),
            cursor=self.state.cursor,
            profile=self.profile.snapshot(),
            awaiting_user=self.state.awaiting_user,
            show_typing=self.state.show_typing,
            phase=self.state.phase,
        )

    # ── Entry points ──────────────────────────────────────────

    async def start_conversation(self) -> bool:
        """Begin at the first step. Returns False if already started."""
        if self.state.phase is not Phase.IDLE or self.state.processing:
            logger.debug("start_conversation ignored in phase %s", self.state.phase.value)
            return False

        self.state.processing = True
        logger.info("Conversation started (%d steps)", len(self.script))
        await self._pacing.wait(self._pacing.start)
        self.state.cursor = 0
        await self._advance()
        return True

    async def handle_user_response(
        self, answer: UserAnswer, step: StepDescriptor | None = None
    ) -> bool:
        """
        Record an answer and move on to the next step.

        Answers delivered while the engine is busy, or when it is not
        waiting for input, are dropped: no timeline entry, no profile
        write. Returns whether the answer was accepted.
        """
        if self.state.processing or self.state.phase is not Phase.AWAITING_INPUT:
            logger.debug(
                "Dropping user response in phase %s (processing=%s)",
                self.state.phase.value, self.state.processing,
            )
            return False

        step = step or self.current_step
        self.state.processing = True
        self.state.awaiting_user = False

        await self._append(Role.USER, answer.display_text, step)
        if step is not None and step.field:
            self.profile.record(step.field, answer.stored_value)

        await self._pacing.wait(self._pacing.answer)
        if self.state.cursor is not None:
            self.state.cursor += 1
        await self._advance()
        return True

    async def handle_final_action(self, action: str) -> bool:
        """Forward a final decision to the completion gate once it is open."""
        if self.state.phase is not Phase.GATE_OPEN:
            logger.debug("Final action %r before gate opened; ignoring", action)
            return False
        return await self._gate.handle_final_action(action)

    # ── Advancement ───────────────────────────────────────────

    async def _advance(self) -> None:
        self.state.phase = Phase.ADVANCING
        self.state.processing = True
        self.state.awaiting_user = False

        step = self.current_step
        if step is None:
            await self._open_gate()
            return

        text = step.render(self.friendly_name)
        await self._set_typing(True)
        await self._pacing.wait(self._pacing.reveal)
        await self._append(Role.ASSISTANT, text, step)
        await self._set_typing(False)

        if step.is_terminal:
            await self._submit(step)
            return

        self.state.phase = Phase.AWAITING_INPUT
        self.state.awaiting_user = True
        self.state.processing = False

    async def _submit(self, step: StepDescriptor) -> None:
        self.state.phase = Phase.SUBMITTING
        entry = await self._pipeline.run(self.profile.snapshot(), self.timeline, step)
        await self._notify("on_entry", entry)
        await self._pacing.wait(self._pacing.settle)
        self.state.cursor = None
        await self._open_gate()

    async def _open_gate(self) -> None:
        self.state.phase = Phase.GATE_OPEN
        self.state.awaiting_user = True
        self.state.processing = False
        await self._notify("on_gate_open")

    # ── Helpers ───────────────────────────────────────────────

    async def _append(self, role: Role, content: str, step: StepDescriptor | None) -> TimelineEntry:
        entry = self.timeline.append(role, content, step)
        await self._notify("on_entry", entry)
        return entry

    async def _set_typing(self, visible: bool) -> None:
        self.state.show_typing = visible
        await self._notify("on_typing", visible)

    async def _notify(self, hook: str, *args: object) -> None:
        # Rendering failures must not leave the engine stuck in `processing`
        try:
            await getattr(self._observer, hook)(*args)
        except Exception:
            logger.exception("Observer hook %s failed; continuing", hook)
