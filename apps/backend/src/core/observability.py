"""Observability configuration for OpenTelemetry.

Tracing goes through the OpenTelemetry API. Without a configured SDK the API
hands out non-recording tracers, so instrumented code runs unchanged in tests
and local development.

PII guidance:
- Never put profile bios, commit messages, code snippets or generated text in
  span attributes; GitHub handles are fine, they are public identifiers.
- Prefer counts and outcomes (repository count, chunk count, error code).

For production export to Azure Monitor set ENABLE_OBSERVABILITY=true and
APPLICATIONINSIGHTS_CONNECTION_STRING, and install the `azure` extra.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from opentelemetry import trace


logger = logging.getLogger(__name__)

_ENV_ENABLE_OBSERVABILITY = "ENABLE_OBSERVABILITY"
_ENV_APP_INSIGHTS_CONN_STRING = "APPLICATIONINSIGHTS_CONNECTION_STRING"
_ENV_OTEL_SERVICE_NAME = "OTEL_SERVICE_NAME"

_DEFAULT_SERVICE_NAME = "gitroast-backend"

# Paths to exclude from automatic tracing (reduce noise for health checks)
EXCLUDED_URLS = "health,health/,favicon.ico"


def _is_observability_enabled() -> bool:
    value = os.getenv(_ENV_ENABLE_OBSERVABILITY, "false").lower()
    return value in {"true", "1", "yes", "on"}


@lru_cache
def configure_observability() -> bool:
    """Configure Azure Monitor export once at startup.

    Returns:
        True if export was configured, False when disabled or unavailable.
    """
    if not _is_observability_enabled():
        logger.info(
            "Observability disabled. Set %s=true to enable Azure Monitor.",
            _ENV_ENABLE_OBSERVABILITY,
        )
        return False

    connection_string = os.getenv(_ENV_APP_INSIGHTS_CONN_STRING)
    if not connection_string:
        logger.warning(
            "Observability enabled but %s not set. Skipping Azure Monitor setup.",
            _ENV_APP_INSIGHTS_CONN_STRING,
        )
        return False

    try:
        from azure.monitor.opentelemetry import configure_azure_monitor
    except ImportError:
        logger.warning(
            "azure-monitor-opentelemetry package not installed. "
            "Install the `azure` extra to export traces."
        )
        return False

    os.environ.setdefault("OTEL_SERVICE_NAME", _DEFAULT_SERVICE_NAME)
    os.environ.setdefault("OTEL_PYTHON_FASTAPI_EXCLUDED_URLS", EXCLUDED_URLS)
    configure_azure_monitor(connection_string=connection_string)
    logger.info(
        "Azure Monitor observability configured for service '%s'",
        os.environ[_ENV_OTEL_SERVICE_NAME],
    )
    return True


def get_tracer(name: str) -> trace.Tracer:
    """Get an OpenTelemetry tracer for custom spans.

    Example:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("roast.session") as span:
            span.set_attribute("roast.mode", "roast")
    """
    return trace.get_tracer(name)
