"""Tests for roast error taxonomy and classification."""

from __future__ import annotations

import pytest
from pydantic_ai.exceptions import ModelHTTPError, UserError

from services.github.errors import RateLimitError, RequestError, ResourceNotFoundError
from services.roast import exceptions
from services.roast.exceptions import classify_error


def test_exception_error_codes_and_messages() -> None:
    e = exceptions.ProfileNotFound()
    assert isinstance(e, exceptions.RoastError)
    assert e.error_code == "not_found"
    assert e.message == "User not found on GitHub"

    e2 = exceptions.RateLimited()
    assert e2.error_code == "rate_limited"
    assert "GITHUB_TOKEN" in e2.message

    e3 = exceptions.UpstreamFailure()
    assert e3.error_code == "unknown"
    assert e3.message == "Something went wrong"

    e4 = exceptions.ClientAbortedError()
    assert e4.error_code == "aborted"
    assert str(e4).startswith("aborted:")


@pytest.mark.parametrize(
    ("exc", "code", "message"),
    [
        (ResourceNotFoundError(action="Get user", resource="/users/ghost"), "not_found", "User not found on GitHub"),
        (RateLimitError(action="Get user", status_code=429), "rate_limited", exceptions.GITHUB_RATE_LIMIT_MESSAGE),
        (RequestError(action="Get user", status_code=403), "rate_limited", exceptions.GITHUB_RATE_LIMIT_MESSAGE),
        (RuntimeError("API rate limit exceeded for 1.2.3.4"), "rate_limited", exceptions.GITHUB_RATE_LIMIT_MESSAGE),
        (ModelHTTPError(status_code=429, model_name="llama"), "rate_limited", exceptions.MODEL_RATE_LIMIT_MESSAGE),
        (RuntimeError("socket closed"), "unknown", "socket closed"),
        (RuntimeError(), "unknown", "Something went wrong"),
        (ValueError("   "), "unknown", "Something went wrong"),
    ],
)
def test_classify_error(exc: BaseException, code: str, message: str) -> None:
    error = classify_error(exc)

    assert error.error_code == code
    assert error.message == message


def test_model_server_error_is_unknown() -> None:
    error = classify_error(ModelHTTPError(status_code=503, model_name="llama", body="overloaded"))

    assert error.error_code == "unknown"


def test_missing_provider_configuration_passes_message_through() -> None:
    error = classify_error(ValueError("No valid LLM provider configured."))

    assert error.error_code == "unknown"
    assert error.message == "No valid LLM provider configured."


def test_classified_errors_pass_through_unchanged() -> None:
    original = exceptions.ProfileNotFound("No public repos found for @octocat.")

    assert classify_error(original) is original


@pytest.mark.parametrize(
    "exc",
    [
        exceptions.ClientAbortedError(),
        UserError("bad usage"),
        KeyError("missing"),
        RequestError(action="List"),
        OSError(),
    ],
)
def test_classification_is_total(exc: BaseException) -> None:
    assert classify_error(exc).error_code in {"not_found", "rate_limited", "unknown"}
