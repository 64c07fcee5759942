"""
Request/response schemas for the quoting API.

Requests are validated before they leave the process; responses are
validated on the way in so a missing `id` fails the stage that produced it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Requests ──────────────────────────────────────────────────


class UserRegistration(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str | None = None


class PropertyCreateRequest(BaseModel):
    address: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    dwelling_limit: float = Field(gt=0, allow_inf_nan=False)
    year_built: int


class QuoteCreateRequest(BaseModel):
    user_id: str | int
    property_id: str | int
    coverage_type: str = "homeowners"


# ── Responses ─────────────────────────────────────────────────


class CreatedResource(BaseModel):
    """Any create/register response: we only rely on the id."""

    model_config = ConfigDict(extra="allow")

    id: str | int


class QuoteResponse(BaseModel):
    """
    Raw quote as returned by the API; every field may be absent.

    Values are projected as-is. The quote already exists upstream by the
    time this is parsed, so an unexpected shape must not fail the run.
    """

    model_config = ConfigDict(extra="allow")

    premium_monthly: Any = None
    premium_annual: Any = None
    dwelling_limit: Any = None
    coverage: Any = None
