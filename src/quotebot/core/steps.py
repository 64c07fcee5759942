"""
Step descriptors, the step script, and the user-answer variants.

A step script is plain data: the engine indexes into it by cursor and
never mutates it. Answers arrive already tagged as either free text or a
selection, so the engine never has to inspect their shape.
"""

import enum
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from quotebot.core.profile import ProfileValue

# Step id that always triggers submission, whatever its declared kind
GENERATE_QUOTE_STEP_ID = "generate_quote"

PromptFn = Callable[[str], str]


class StepKind(str, enum.Enum):
    """Ordinary question, or the loading step that submits the profile."""

    QUESTION = "question"
    LOADING = "loading"


# ── Answers ───────────────────────────────────────────────────


@dataclass(frozen=True)
class PlainText:
    """Free-form typed answer."""

    text: str

    @property
    def display_text(self) -> str:
        return self.text

    @property
    def stored_value(self) -> ProfileValue:
        return self.text


@dataclass(frozen=True)
class Selection:
    """A picked option: `text` is shown, `value` is what gets stored."""

    text: str
    value: ProfileValue

    @property
    def display_text(self) -> str:
        return self.text

    @property
    def stored_value(self) -> ProfileValue:
        return self.value


UserAnswer = PlainText | Selection


# ── Steps ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class StepDescriptor:
    """One prompt of the wizard."""

    id: str
    message: str | PromptFn
    kind: StepKind = StepKind.QUESTION
    field: str | None = None                # profile key for the next answer
    options: tuple[Selection, ...] = ()     # offered choices, if any

    @property
    def is_terminal(self) -> bool:
        """True for the step whose reveal starts the submission pipeline."""
        return self.kind is StepKind.LOADING or self.id == GENERATE_QUOTE_STEP_ID

    def render(self, friendly_name: str) -> str:
        if callable(self.message):
            return self.message(friendly_name)
        return self.message

    def option(self, index: int) -> Selection | None:
        if 0 <= index < len(self.options):
            return self.options[index]
        return None


class StepScript(Sequence[StepDescriptor]):
    """
    Ordered, read-only sequence of steps.

    Raises ValueError for an empty script or duplicate step ids.
    """

    def __init__(self, steps: Sequence[StepDescriptor]) -> None:
        self._steps = tuple(steps)
        if not self._steps:
            raise ValueError("Step script must contain at least one step")
        seen: set[str] = set()
        for step in self._steps:
            if step.id in seen:
                raise ValueError(f"Duplicate step id: {step.id!r}")
            seen.add(step.id)

    def step_at(self, cursor: int | None) -> StepDescriptor | None:
        """Step under the cursor, or None once the script is exhausted."""
        if cursor is None or cursor < 0 or cursor >= len(self._steps):
            return None
        return self._steps[cursor]

    def __getitem__(self, index):  # type: ignore[override]
        return self._steps[index]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepDescriptor]:
        return iter(self._steps)
