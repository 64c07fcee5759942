"""
Async HTTP client for the quoting REST API.

Implements the three remote operations the submission pipeline needs:

  POST /auth/register                 → registered user  {id, ...}
  POST /users/{user_id}/properties    → created property {id, ...}
  POST /users/{user_id}/quotes        → quote {premium_monthly, premium_annual, ...}

All quoting traffic goes through this module; core/ only sees the
QuoteBackend protocol.
"""

import logging
from typing import Any

import httpx

from quotebot.config import Settings
from quotebot.errors import QuoteApiError
from quotebot.services.schemas import PropertyCreateRequest, QuoteCreateRequest, UserRegistration

logger = logging.getLogger(__name__)


class QuoteApiClient:
    """
    Thin async wrapper around the quoting API.

    Non-2xx responses raise httpx.HTTPStatusError; a 2xx body that
    carries an "error" key raises QuoteApiError.
    """

    REGISTER_PATH = "/auth/register"
    PROPERTIES_PATH = "/users/{user_id}/properties"
    QUOTES_PATH = "/users/{user_id}/quotes"

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuoteApiClient":
        return cls(
            settings.quote_api_base_url,
            api_key=settings.quote_api_key,
            timeout=settings.quote_api_timeout,
        )

    async def register_user(self, payload: UserRegistration) -> dict[str, Any]:
        """Register the applicant; the response carries the new user id."""
        return await self._post(self.REGISTER_PATH, payload.model_dump())

    async def create_property(
        self, user_id: str | int, payload: PropertyCreateRequest
    ) -> dict[str, Any]:
        """Create the insured property under the given user."""
        path = self.PROPERTIES_PATH.format(user_id=user_id)
        return await self._post(path, payload.model_dump())

    async def create_quote(
        self, user_id: str | int, payload: QuoteCreateRequest
    ) -> dict[str, Any]:
        """Price a quote for the user's property."""
        path = self.QUOTES_PATH.format(user_id=user_id)
        return await self._post(path, payload.model_dump())

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a POST request to the quoting API."""
        resp = await self._client.post(path, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if isinstance(data, dict) and "error" in data:
            logger.error("Quote API error on %s: %s", path, data["error"])
            raise QuoteApiError(f"Quote API error: {data['error']}")
        if not isinstance(data, dict):
            raise QuoteApiError(f"Unexpected response from {path}: {data!r}")
        return data

    async def close(self) -> None:
        """Shut down the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "QuoteApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
