"""Protocols for the upstream services a roast session depends on.

Concrete implementations are injected by the API layer; tests substitute
in-memory fakes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol

from services.github.models import CommitStats, GitHubCommit, GitHubProfile, GitHubRepository


if TYPE_CHECKING:
    from services.ai.prompts import RenderedPrompt
    from services.roast.cancellation import CancellationToken


class ProfileSourceProtocol(Protocol):
    """Protocol for reading public GitHub data."""

    async def get_profile(self, username: str) -> GitHubProfile: ...

    async def list_repositories(self, username: str, per_page: int = 100) -> list[GitHubRepository]: ...

    async def list_commits(self, owner: str, repo: str, per_page: int | None = None) -> list[GitHubCommit]: ...

    async def get_commit_stats(self, owner: str, repo: str, sha: str) -> CommitStats: ...

    async def get_file_text(self, owner: str, repo: str, path: str) -> str | None: ...

    async def path_exists(self, owner: str, repo: str, path: str) -> bool: ...


class GenerationSourceProtocol(Protocol):
    """Protocol for a token-producing completion call."""

    def stream(
        self,
        prompt: RenderedPrompt,
        *,
        temperature: float,
        max_tokens: int,
        cancel: CancellationToken,
    ) -> AsyncIterator[str]:
        """Yield generated text fragments in order; stop once `cancel` fires."""
        ...
