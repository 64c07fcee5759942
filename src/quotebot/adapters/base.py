"""
Abstract base class for messaging platform adapters.

Every platform that hosts the quote wizard implements this interface.
The conversation engine never imports platform-specific libraries: an
adapter renders the timeline (as a ConversationObserver) and feeds user
input back into the engine.
"""

from abc import ABC, abstractmethod


class PlatformAdapter(ABC):
    """
    Lifecycle interface that every messaging platform adapter implements.

    The entry point only starts and stops adapters; everything else is
    wired through the per-chat wizard sessions.
    """

    @abstractmethod
    async def start(self) -> None:
        """Start listening for incoming messages (polling, webhook, etc.)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Gracefully shut down the adapter."""
        ...
