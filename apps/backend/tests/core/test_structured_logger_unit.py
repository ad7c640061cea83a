import logging

from core.error_handler import StructuredLogger, get_correlation_id, set_correlation_id


def test_structured_logger_redacts_sensitive_keys():
    logger = StructuredLogger("tests")

    # use non-sensitive placeholder values to avoid secret-detection false positives
    data = {
        "github_token": "placeholder_token",  # pragma: allowlist secret
        "GROQ_API_KEY": "placeholder_key",  # pragma: allowlist secret
        "email": "me@example.com",
        "username": "octocat",
    }
    sanitized = logger._sanitize_data(data)

    assert sanitized["github_token"] == "[REDACTED]"
    assert sanitized["GROQ_API_KEY"] == "[REDACTED]"
    assert sanitized["email"] == "[REDACTED]"
    assert sanitized["username"] == "octocat"


def test_structured_logger_redacts_nested_values():
    logger = StructuredLogger("tests")

    sanitized = logger._sanitize_data(
        {"headers": {"Authorization": "Bearer placeholder"}, "items": [{"password": "x"}, {"repo": "api"}]}
    )

    assert sanitized["headers"]["Authorization"] == "[REDACTED]"
    assert sanitized["items"] == [{"password": "[REDACTED]"}, {"repo": "api"}]


def test_structured_logger_prefixes_correlation_id(caplog):
    set_correlation_id("cid-42")
    try:
        with caplog.at_level(logging.INFO, logger="tests.prefix"):
            StructuredLogger("tests.prefix").info("Roast started", username="octocat")
    finally:
        set_correlation_id(None)

    assert "[cid-42] Roast started" in caplog.text


def test_correlation_id_generated_when_missing():
    set_correlation_id(None)

    first = get_correlation_id()

    assert first
    assert get_correlation_id() == first
    set_correlation_id(None)
