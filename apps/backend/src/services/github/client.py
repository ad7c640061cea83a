"""GitHub REST source for profile, repository listing and per-repository detail."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Awaitable, Callable
from logging import Logger, getLogger
from typing import Any, Literal, overload

from githubkit import GitHub as GitHubKit
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy
from githubkit.exception import GitHubException as GitHubKitGitHubException
from githubkit.exception import RequestFailed as GitHubKitRequestFailed
from githubkit.response import Response as GitHubKitResponse

from core.config import Settings, get_settings
from services.github.errors import RateLimitError, RequestError, ResourceNotFoundError
from services.github.models import CommitStats, GitHubCommit, GitHubProfile, GitHubRepository


NOT_FOUND_ERROR = 404
RATE_LIMIT_STATUS_CODES = frozenset({403, 429})

MAX_PAGE_SIZE = 100


def get_githubkit_client(token: str | None = None) -> GitHubKit[Any]:
    """Build a githubkit client with automatic retries disabled.

    Every upstream call is attempted exactly once per roast session.
    """
    if token:
        return GitHubKit[TokenAuthStrategy](auth=TokenAuthStrategy(token=token), auto_retry=False)
    return GitHubKit[UnauthAuthStrategy](auth=UnauthAuthStrategy(), auto_retry=False)


def decode_content(content: str) -> str:
    return base64.b64decode(content).decode("utf-8", errors="replace")


def _is_rate_limited(error: GitHubKitRequestFailed) -> bool:
    return error.response.status_code in RATE_LIMIT_STATUS_CODES or "rate limit" in str(error).lower()


class GitHubProfileSource:
    """Read-only access to the public GitHub data a roast needs.

    One instance is created at startup and shared by all sessions; it holds no
    per-request state.
    """

    githubkit_client: GitHubKit[Any]
    logger: Logger

    def __init__(
        self,
        githubkit_client: GitHubKit[Any] | None = None,
        settings: Settings | None = None,
        logger: Logger | None = None,
    ):
        self.settings = settings or get_settings()
        self.githubkit_client = githubkit_client or get_githubkit_client(self.settings.GITHUB_TOKEN)
        self.logger = logger or getLogger(__name__)

    @overload
    async def _perform_rest_request(
        self,
        action: str,
        error_on_not_found: Literal[True] = True,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[Any]]],
        **request_args: Any,
    ) -> Any: ...

    @overload
    async def _perform_rest_request(
        self,
        action: str,
        error_on_not_found: Literal[False] = False,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[Any]]],
        **request_args: Any,
    ) -> Any | None: ...

    async def _perform_rest_request(
        self,
        action: str,
        error_on_not_found: bool = True,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[Any]]],
        **request_args: Any,
    ) -> Any | None:
        """Perform a request and extract the parsed response.

        Raises:
            ResourceNotFoundError: If the resource is not found and error_on_not_found is True.
            RateLimitError: If GitHub reports the request quota as exhausted.
            RequestError: If the request fails for any other reason.
        """
        self.logger.debug(f"Performing {action} with kwargs {request_args}")

        try:
            response: GitHubKitResponse[Any] = await method(**request_args)
        except GitHubKitRequestFailed as e:
            if e.response.status_code == NOT_FOUND_ERROR:
                if error_on_not_found:
                    raise ResourceNotFoundError(action=action, resource=e.response.raw_request.url.path) from e
                return None

            if _is_rate_limited(e):
                self.logger.warning(f"Rate limited performing {action}: {e}")
                raise RateLimitError(
                    action=action,
                    status_code=e.response.status_code,
                    reset_at=e.response.headers.get("x-ratelimit-reset"),
                ) from e

            self.logger.warning(f"RequestFailed performing {action} with kwargs {request_args}: {e}")
            raise RequestError(action=action, message=str(e), status_code=e.response.status_code) from e
        except GitHubKitGitHubException as e:
            self.logger.warning(f"Error performing {action} with kwargs {request_args}: {e}")
            raise RequestError(action=action, message=str(e)) from e

        return response.parsed_data

    async def get_profile(self, username: str) -> GitHubProfile:
        """Get a user's public profile."""

        user = await self._perform_rest_request(
            action="Get user",
            method=self.githubkit_client.rest.users.async_get_by_username,
            username=username,
        )
        return GitHubProfile.from_user(username=username, user=user)

    async def list_repositories(self, username: str, per_page: int = MAX_PAGE_SIZE) -> list[GitHubRepository]:
        """List a user's public repositories, most recently updated first."""

        repositories = await self._perform_rest_request(
            action="List repositories",
            method=self.githubkit_client.rest.repos.async_list_for_user,
            username=username,
            per_page=max(1, min(per_page, MAX_PAGE_SIZE)),
            sort="updated",
        )
        return [GitHubRepository.from_minimal_repository(repository) for repository in repositories]

    async def list_commits(self, owner: str, repo: str, per_page: int | None = None) -> list[GitHubCommit]:
        """List the most recent commits of a repository."""

        commits = await self._perform_rest_request(
            action="List commits",
            method=self.githubkit_client.rest.repos.async_list_commits,
            owner=owner,
            repo=repo,
            per_page=per_page or self.settings.GITHUB_COMMITS_PER_REPO,
        )
        return [GitHubCommit.from_commit(commit) for commit in commits]

    async def get_commit_stats(self, owner: str, repo: str, sha: str) -> CommitStats:
        """Get line and file counts of a single commit."""

        commit = await self._perform_rest_request(
            action="Get commit",
            method=self.githubkit_client.rest.repos.async_get_commit,
            owner=owner,
            repo=repo,
            ref=sha,
        )
        return CommitStats.from_commit(commit)

    async def get_file_text(self, owner: str, repo: str, path: str) -> str | None:
        """Get the decoded text of a file, or None if the path is missing or not a file."""

        content = await self._perform_rest_request(
            action="Get file",
            error_on_not_found=False,
            method=self.githubkit_client.rest.repos.async_get_content,
            owner=owner,
            repo=repo,
            path=path,
        )
        encoded = getattr(content, "content", None)
        if not isinstance(encoded, str):
            return None

        try:
            return decode_content(encoded)
        except (binascii.Error, ValueError):
            self.logger.debug(f"Undecodable content for {owner}/{repo}/{path}")
            return None

    async def path_exists(self, owner: str, repo: str, path: str) -> bool:
        """Check whether a file or directory exists at `path`."""

        content = await self._perform_rest_request(
            action="Check path",
            error_on_not_found=False,
            method=self.githubkit_client.rest.repos.async_get_content,
            owner=owner,
            repo=repo,
            path=path,
        )
        return content is not None
