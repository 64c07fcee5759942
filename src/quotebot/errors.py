"""
Exception hierarchy for the quote wizard.

The submission pipeline catches everything at its boundary and turns it
into a single apologetic timeline message, so these types mostly exist to
carry the failing stage into the logs.
"""

import enum


class SubmissionStage(str, enum.Enum):
    """Steps of the submission chain, in execution order."""

    VALIDATE = "validate"
    REGISTER_USER = "register_user"
    CREATE_PROPERTY = "create_property"
    CREATE_QUOTE = "create_quote"


class QuoteBotError(Exception):
    """Base class for all quotebot errors."""


class InvalidProfileError(QuoteBotError, ValueError):
    """Collected answers cannot be turned into a valid submission."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class SubmissionError(QuoteBotError):
    """A stage of the submission chain failed; later stages never ran."""

    def __init__(self, stage: SubmissionStage, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage.value} failed: {cause}")


class QuoteApiError(QuoteBotError):
    """The quoting API answered with an error payload."""
