"""
Profile store — the answers collected during the wizard.

Keys are the `field` names declared on step descriptors. A key appears
only after its step has been answered; nothing is ever removed.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

ProfileValue = str | int | float

FRIENDLY_NAME_FALLBACK = "friend"


class ProfileStore(Mapping[str, ProfileValue]):
    """Accumulating key/value record, written only by the conversation engine."""

    def __init__(self) -> None:
        self._data: dict[str, ProfileValue] = {}

    def record(self, field: str, value: ProfileValue) -> None:
        """Bind an answer to a field (a re-asked field keeps the latest answer)."""
        self._data[field] = value

    def snapshot(self) -> Mapping[str, ProfileValue]:
        """Read-only copy, safe to hand to the submission pipeline."""
        return MappingProxyType(dict(self._data))

    def __getitem__(self, key: str) -> ProfileValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ProfileStore({self._data!r})"


def friendly_name(profile: Mapping[str, object], fallback: str = FRIENDLY_NAME_FALLBACK) -> str:
    """
    First name used to personalize prompts.

    Takes `full_name`, then `name`; anything missing, empty or not a
    string yields the fallback.
    """
    raw = profile.get("full_name") or profile.get("name") or ""
    if not raw or not isinstance(raw, str):
        return fallback
    parts = raw.split()
    return parts[0] if parts else fallback
