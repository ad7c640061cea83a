"""Centralized AI model factory for roast generation.

This module provides a single source of truth for creating the completion
model, supporting both Groq and Gemini providers based on configuration.

Usage:
    from services.ai.model_factory import get_chat_model

    model = get_chat_model()  # Returns pydantic-ai Model
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.groq import GroqProvider

from core.config import get_settings


if TYPE_CHECKING:
    from httpx import AsyncClient

logger = logging.getLogger(__name__)


def _is_groq_provider() -> bool:
    """Check if Groq should be used based on configuration."""
    return get_settings().LLM_PROVIDER == "groq"


def _validate_groq_credentials() -> bool:
    """Validate that the Groq API key is configured."""
    if not get_settings().GROQ_API_KEY:
        logger.warning("LLM_PROVIDER=groq but GROQ_API_KEY missing, falling back to Gemini")
        return False
    return True


def _validate_gemini_credentials() -> bool:
    """Validate that Gemini API key is configured."""
    if not get_settings().GEMINI_API_KEY:
        logger.warning("Gemini API key not configured")
        return False
    return True


def _create_groq_model(model_name: str, http_client: AsyncClient | None = None) -> Model:
    settings = get_settings()
    provider = GroqProvider(api_key=settings.GROQ_API_KEY, http_client=http_client)
    return cast(Model, GroqModel(model_name, provider=provider))


def _create_gemini_model(model_name: str, http_client: AsyncClient | None = None) -> Model:
    settings = get_settings()
    provider = GoogleProvider(api_key=settings.GEMINI_API_KEY, http_client=http_client)
    return cast(Model, GoogleModel(model_name, provider=provider))


def get_chat_model(http_client: AsyncClient | None = None) -> Model:
    """Get the completion model based on configuration.

    Args:
        http_client: Optional HTTP client shared with the provider.

    Returns:
        A pydantic-ai Model configured for the selected provider.

    Raises:
        ValueError: If neither provider has credentials.
    """
    settings = get_settings()

    if _is_groq_provider() and _validate_groq_credentials():
        logger.info(f"Using Groq chat model: {settings.CHAT_MODEL}")
        return _create_groq_model(settings.CHAT_MODEL, http_client)

    if not _validate_gemini_credentials():
        raise ValueError(
            "No valid LLM provider configured. Either set Groq credentials "
            "(GROQ_API_KEY) or Gemini credentials (GEMINI_API_KEY)."
        )

    model_name = settings.CHAT_MODEL if not _is_groq_provider() else settings.GEMINI_FALLBACK_MODEL
    logger.info(f"Using Gemini chat model: {model_name}")
    return _create_gemini_model(model_name, http_client)
