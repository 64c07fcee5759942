"""
Completion gate — routes the user's final decision once the wizard ends.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

DASHBOARD_ROUTE = "/dashboard"

# Final actions that lead to the results view
RECOGNIZED_ACTIONS: frozenset[str] = frozenset({"proceed", "view_dashboard"})


class Navigator(Protocol):
    """External collaborator that moves the user to another view."""

    async def navigate_to(self, route: str) -> None: ...


class CompletionGate:
    """Forwards recognized final actions to the navigator; owns no state."""

    def __init__(self, navigator: Navigator, route: str = DASHBOARD_ROUTE) -> None:
        self._navigator = navigator
        self._route = route

    async def handle_final_action(self, action: str) -> bool:
        """Navigate for `proceed` / `view_dashboard`. Returns whether it did."""
        if action not in RECOGNIZED_ACTIONS:
            logger.debug("Ignoring unrecognized final action: %r", action)
            return False
        logger.info("Final action %r → navigating to %s", action, self._route)
        await self._navigator.navigate_to(self._route)
        return True
