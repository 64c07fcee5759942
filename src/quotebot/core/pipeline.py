"""
Submission pipeline — turns the collected profile into a quote.

Three dependent calls run strictly in order, each needing the id returned
by the previous one:

  register user → create property (for that user) → create quote

Any failure aborts the chain. Whatever happens, exactly one assistant
entry is appended to the timeline: the quote card on success, a generic
apology on failure. Nothing propagates past this module.
"""

import logging
import math
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError

from quotebot.core.steps import StepDescriptor
from quotebot.core.timeline import QUOTE_RESULT, Role, Timeline, TimelineEntry
from quotebot.errors import InvalidProfileError, SubmissionError, SubmissionStage
from quotebot.services.schemas import (
    CreatedResource,
    PropertyCreateRequest,
    QuoteCreateRequest,
    QuoteResponse,
    UserRegistration,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Sorry, I could not generate a quote right now. Please try again."


class QuoteBackend(Protocol):
    """The three remote operations. Each may raise."""

    def register_user(self, payload: UserRegistration) -> Awaitable[Mapping[str, Any]]: ...

    def create_property(
        self, user_id: str | int, payload: PropertyCreateRequest
    ) -> Awaitable[Mapping[str, Any]]: ...

    def create_quote(
        self, user_id: str | int, payload: QuoteCreateRequest
    ) -> Awaitable[Mapping[str, Any]]: ...


@dataclass(frozen=True)
class SubmissionResult:
    """Normalized quote; absent API fields stay None, others are kept as sent."""

    monthly: Any = None
    annual: Any = None
    dwelling_limit: Any = None
    coverage: Any = None

    @classmethod
    def from_response(cls, raw: Mapping[str, Any]) -> "SubmissionResult":
        quote = QuoteResponse.model_validate(raw)
        return cls(
            monthly=quote.premium_monthly,
            annual=quote.premium_annual,
            dwelling_limit=quote.dwelling_limit,
            coverage=quote.coverage,
        )


# ── Profile → request payloads ───────────────────────────────


def _text(profile: Mapping[str, Any], field: str) -> str | None:
    value = profile.get(field)
    if value is None:
        return None
    return str(value).strip()


def parse_amount(value: Any) -> float:
    """
    Parse a money amount such as "$300,000" or 300000.

    Raises InvalidProfileError for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidProfileError("dwelling_limit", f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value).strip().replace("$", "").replace(",", "").replace(" ", "")
        try:
            amount = float(text)
        except ValueError:
            raise InvalidProfileError("dwelling_limit", f"not a number: {value!r}") from None
    if not math.isfinite(amount):
        raise InvalidProfileError("dwelling_limit", f"not a finite number: {value!r}")
    return amount


def parse_year(value: Any) -> int:
    """Parse a year such as "1995" or 1995.0; rejects fractions and non-digits."""
    if isinstance(value, bool):
        raise InvalidProfileError("year_built", f"not a whole year: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidProfileError("year_built", f"not a whole year: {value!r}")
        return int(value)
    text = str(value).strip()
    if not text.isdigit():
        raise InvalidProfileError("year_built", f"not a whole year: {value!r}")
    return int(text)


def build_requests(profile: Mapping[str, Any]) -> tuple[UserRegistration, PropertyCreateRequest]:
    """
    Validate the profile up front, before any remote call.

    Returns the registration and property payloads; raises
    InvalidProfileError naming the first offending field.
    """
    for field in ("dwelling_limit", "year_built"):
        if profile.get(field) is None:
            raise InvalidProfileError(field, "missing")

    try:
        user = UserRegistration(
            name=_text(profile, "full_name") or _text(profile, "name") or "",
            email=_text(profile, "email") or "",
            phone=_text(profile, "phone"),
        )
        prop = PropertyCreateRequest(
            address=_text(profile, "address") or "",
            state=_text(profile, "state") or "",
            zip_code=_text(profile, "zip_code") or "",
            dwelling_limit=parse_amount(profile["dwelling_limit"]),
            year_built=parse_year(profile["year_built"]),
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "profile"
        raise InvalidProfileError(field, first["msg"]) from e
    return user, prop


# ── Pipeline ─────────────────────────────────────────────────


class SubmissionPipeline:
    """Runs the register → property → quote chain against a backend."""

    def __init__(self, backend: QuoteBackend, *, coverage_type: str = "homeowners") -> None:
        self._backend = backend
        self._coverage_type = coverage_type

    async def submit(self, profile: Mapping[str, Any]) -> SubmissionResult:
        """
        Run the chain and return the normalized quote.

        Raises SubmissionError wrapping the first failure, tagged with the
        stage it happened in. Later stages never run.
        """
        stage = SubmissionStage.VALIDATE
        try:
            user_req, property_req = build_requests(profile)

            stage = SubmissionStage.REGISTER_USER
            user = CreatedResource.model_validate(await self._backend.register_user(user_req))

            stage = SubmissionStage.CREATE_PROPERTY
            prop = CreatedResource.model_validate(
                await self._backend.create_property(user.id, property_req)
            )

            stage = SubmissionStage.CREATE_QUOTE
            quote_req = QuoteCreateRequest(
                user_id=user.id,
                property_id=prop.id,
                coverage_type=self._coverage_type,
            )
            raw_quote = await self._backend.create_quote(user.id, quote_req)
            return SubmissionResult.from_response(raw_quote)
        except Exception as e:
            raise SubmissionError(stage, e) from e

    async def run(
        self,
        profile: Mapping[str, Any],
        timeline: Timeline,
        step: StepDescriptor | None = None,
    ) -> TimelineEntry:
        """Submit and append exactly one assistant entry describing the outcome."""
        try:
            result = await self.submit(profile)
        except SubmissionError as e:
            logger.error(
                "Failed to create quote via API (stage=%s): %s",
                e.stage.value, e.cause,
                exc_info=e.cause,
                extra={"stage": e.stage.value},
            )
            return timeline.append(Role.ASSISTANT, FAILURE_MESSAGE)

        logger.info(
            "Quote created: monthly=%s annual=%s coverage=%s",
            result.monthly, result.annual, result.coverage,
        )
        return timeline.append(Role.ASSISTANT, QUOTE_RESULT, step, extra={"quote": result})
