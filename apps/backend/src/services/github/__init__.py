"""GitHub REST source used by the roast pipeline."""

from services.github.client import GitHubProfileSource, get_githubkit_client
from services.github.errors import (
    GitHubClientError,
    RateLimitError,
    RequestError,
    ResourceNotFoundError,
)
from services.github.models import CommitStats, GitHubCommit, GitHubProfile, GitHubRepository


__all__ = [
    "CommitStats",
    "GitHubClientError",
    "GitHubCommit",
    "GitHubProfile",
    "GitHubProfileSource",
    "GitHubRepository",
    "RateLimitError",
    "RequestError",
    "ResourceNotFoundError",
    "get_githubkit_client",
]
