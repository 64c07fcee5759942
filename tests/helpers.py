"""Test doubles shared across the suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from quotebot.core.timeline import TimelineEntry

QUOTE_RESPONSE = {
    "premium_monthly": 120,
    "premium_annual": 1400,
    "dwelling_limit": 300000,
    "coverage": "homeowners",
}

FULL_PROFILE = {
    "full_name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "555-0100",
    "address": "12 Oak St",
    "state": "TX",
    "zip_code": "73301",
    "dwelling_limit": "300000",
    "year_built": "1995",
}


@dataclass
class RecordingObserver:
    """Captures every rendering hook call in order."""

    entries: list[TimelineEntry] = field(default_factory=list)
    typing: list[bool] = field(default_factory=list)
    gate_opened: int = 0

    async def on_entry(self, entry: TimelineEntry) -> None:
        self.entries.append(entry)

    async def on_typing(self, visible: bool) -> None:
        self.typing.append(visible)

    async def on_gate_open(self) -> None:
        self.gate_opened += 1


@dataclass
class RecordingNavigator:
    routes: list[str] = field(default_factory=list)

    async def navigate_to(self, route: str) -> None:
        self.routes.append(route)


def make_backend(user: Any = None, prop: Any = None, quote: Any = None) -> MagicMock:
    """Backend double whose three operations succeed by default."""
    backend = MagicMock()
    backend.register_user = AsyncMock(return_value=user if user is not None else {"id": "u1"})
    backend.create_property = AsyncMock(return_value=prop if prop is not None else {"id": "p1"})
    backend.create_quote = AsyncMock(
        return_value=quote if quote is not None else dict(QUOTE_RESPONSE)
    )
    return backend
