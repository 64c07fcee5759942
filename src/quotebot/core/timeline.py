"""
Message timeline — the ordered, append-only log of conversation turns.

Entries are frozen once created. The sequence number gives every entry a
distinct id even when two are appended within the same clock tick.
"""

import enum
import itertools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from quotebot.core.steps import StepDescriptor

# Content sentinel: the entry carries a structured quote in extra["quote"]
QUOTE_RESULT = "quote_result"


class Role(str, enum.Enum):
    """Who authored a timeline entry."""

    ASSISTANT = "assistant"
    USER = "user"


@dataclass(frozen=True)
class TimelineEntry:
    """One turn of the conversation as shown to the user."""

    seq: int
    role: Role
    content: str
    step: StepDescriptor | None = None     # None for synthetic/error entries
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    created_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @property
    def id(self) -> str:
        return str(self.seq)

    @property
    def is_quote_result(self) -> bool:
        return self.content == QUOTE_RESULT


class Timeline:
    """Append-only entry log. Only the engine and the pipeline append."""

    def __init__(self) -> None:
        self._entries: list[TimelineEntry] = []
        self._seq = itertools.count(1)

    def append(
        self,
        role: Role,
        content: str,
        step: StepDescriptor | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> TimelineEntry:
        entry = TimelineEntry(
            seq=next(self._seq),
            role=role,
            content=content,
            step=step,
            extra=MappingProxyType(dict(extra or {})),
        )
        self._entries.append(entry)
        return entry

    def entries(self) -> tuple[TimelineEntry, ...]:
        return tuple(self._entries)

    @property
    def last(self) -> TimelineEntry | None:
        return self._entries[-1] if self._entries else None

    def __iter__(self) -> Iterator[TimelineEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
