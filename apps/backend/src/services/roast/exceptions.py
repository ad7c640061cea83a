"""Domain exceptions for the roast stream.

Every failure that ends a session is reduced to one of three classified
errors (`not_found`, `rate_limited`, `unknown`) whose `message` is what the
client sees in the terminal `error` event. Client disconnection is modelled
separately as `ClientAbortedError` and is never shown to anyone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from pydantic_ai.exceptions import ModelHTTPError

from services.github.errors import RateLimitError, ResourceNotFoundError


NOT_FOUND_MESSAGE: Final = "User not found on GitHub"
GITHUB_RATE_LIMIT_MESSAGE: Final = "GitHub rate limit exceeded. Add GITHUB_TOKEN to .env"
MODEL_RATE_LIMIT_MESSAGE: Final = "The AI service is rate limited. Please wait a minute and try again."
FALLBACK_MESSAGE: Final = "Something went wrong"

CLASSIFIED_ERROR_CODES: Final = frozenset({"not_found", "rate_limited", "unknown"})


@dataclass(slots=True)
class RoastError(Exception):
    """Base class for roast session errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class ProfileNotFound(RoastError):
    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message=message, error_code="not_found")


class RateLimited(RoastError):
    def __init__(self, message: str = GITHUB_RATE_LIMIT_MESSAGE) -> None:
        super().__init__(message=message, error_code="rate_limited")


class UpstreamFailure(RoastError):
    def __init__(self, message: str = FALLBACK_MESSAGE) -> None:
        super().__init__(message=message, error_code="unknown")


class ClientAbortedError(RoastError):
    """The client went away; the session stops without reporting an error."""

    def __init__(self, message: str = "Client disconnected") -> None:
        super().__init__(message=message, error_code="aborted")


def _status_code(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def classify_error(exc: BaseException) -> RoastError:
    """Map any upstream failure onto a classified, user-presentable error.

    The result always carries one of `not_found`, `rate_limited` or `unknown`.
    """
    if isinstance(exc, RoastError) and exc.error_code in CLASSIFIED_ERROR_CODES:
        return exc

    if isinstance(exc, ResourceNotFoundError):
        return ProfileNotFound()
    if isinstance(exc, RateLimitError):
        return RateLimited()

    status = _status_code(exc)
    if isinstance(exc, ModelHTTPError):
        if status == 429:
            return RateLimited(MODEL_RATE_LIMIT_MESSAGE)
    elif status == 404:
        return ProfileNotFound()
    elif status in (403, 429) or "rate limit" in str(exc).lower():
        return RateLimited()

    message = exc.message if isinstance(exc, RoastError) else str(exc)
    return UpstreamFailure(message.strip() or FALLBACK_MESSAGE)
