"""Security configuration constants for the GitRoast API.

This module centralizes security-related configuration including:
- Sensitive keys that should be sanitized from logs
- Error response fields allowed per environment
"""

# Keys are matched as substrings (case-insensitive) by `is_sensitive_key`.
SENSITIVE_KEYS: set[str] = {
    # Credentials for upstream providers
    "token",
    "github_token",
    "groq_api_key",
    "gemini_api_key",
    "api_key",
    "secret",
    "password",
    "authorization",
    "bearer",
    # Transport headers that may carry credentials
    "cookie",
    "set-cookie",
    "x-api-key",
    "x-auth-token",
    # Contact details occasionally present on public profiles
    "email",
}

# In production, error responses only contain these fields
PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
}

# Development error response fields (additional fields allowed in development)
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment."""
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
