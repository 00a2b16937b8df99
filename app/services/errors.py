"""Error types shared by the Gemini adapter and the fallback orchestrator."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    NON_RECOVERABLE = "non_recoverable"


class GenerationError(Exception):
    """A single failed generation attempt.

    The adapter fills in ``status_code`` when the provider answered with an HTTP
    error; ``kind`` is derived from it unless given explicitly.
    """

    def __init__(
        self,
        message: str,
        kind: Optional[ErrorKind] = None,
        status_code: Optional[int] = None,
        model: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.model = model
        if kind is None:
            kind = ErrorKind.RATE_LIMITED if status_code == 429 else ErrorKind.NON_RECOVERABLE
        self.kind = kind


class AllModelsUnavailableError(Exception):
    """Every model in the fallback list was rate-limited."""

    def __init__(self, last_error: Exception):
        self.last_error = last_error
        super().__init__(f"All Gemini models are unavailable. Last error: {last_error}")


class InvalidConversationError(ValueError):
    """The message list cannot be turned into a prompt."""


def classify_error(exc: Exception) -> ErrorKind:
    """Decide whether a failed attempt may fall through to the next model.

    Structured errors from the adapter carry their own kind. Anything else is
    rate-limited only when its message has the 429 status signature.
    """
    if isinstance(exc, GenerationError):
        return exc.kind
    if "429" in str(exc):
        return ErrorKind.RATE_LIMITED
    return ErrorKind.NON_RECOVERABLE
