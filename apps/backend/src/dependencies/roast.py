"""Process-wide upstream clients for the roast endpoint.

Each provider builds its client once from settings; tests replace them with
`app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache

from core.config import get_settings
from services.ai.generation import PydanticAIGenerationSource
from services.github import GitHubProfileSource
from services.roast.interfaces import GenerationSourceProtocol, ProfileSourceProtocol


@lru_cache
def get_profile_source() -> ProfileSourceProtocol:
    return GitHubProfileSource(settings=get_settings())


@lru_cache
def get_generation_source() -> GenerationSourceProtocol:
    return PydanticAIGenerationSource()
