"""Plain models for the GitHub records the roast pipeline consumes.

githubkit marks absent fields with an UNSET sentinel rather than None, so the
`from_*` constructors below only trust values of the expected type.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field


def _int(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


def days_ago(moment: datetime | None, now: datetime | None = None) -> int:
    """Whole days elapsed since `moment`; 0 when unknown."""
    if moment is None:
        return 0
    now = now or datetime.now(UTC)
    return (now - moment).days


class GitHubProfile(BaseModel):
    """A public GitHub user profile."""

    model_config = ConfigDict(frozen=True)

    username: str
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, username: str, user: Any) -> Self:
        return cls(
            username=username,
            bio=_str(getattr(user, "bio", None)),
            company=_str(getattr(user, "company", None)),
            location=_str(getattr(user, "location", None)),
            followers=_int(getattr(user, "followers", None)),
            following=_int(getattr(user, "following", None)),
            public_repos=_int(getattr(user, "public_repos", None)),
            created_at=_datetime(getattr(user, "created_at", None)),
        )

    def joined_years(self, now: datetime | None = None) -> int:
        if self.created_at is None:
            return 0
        return (now or datetime.now(UTC)).year - self.created_at.year


class GitHubRepository(BaseModel):
    """A repository as returned by the user repository listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    size: int = Field(default=0, description="Repository size in KB.")
    pushed_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_minimal_repository(cls, repository: Any) -> Self:
        return cls(
            name=repository.name,
            description=_str(getattr(repository, "description", None)),
            language=_str(getattr(repository, "language", None)),
            stars=_int(getattr(repository, "stargazers_count", None)),
            forks=_int(getattr(repository, "forks_count", None)),
            size=_int(getattr(repository, "size", None)),
            pushed_at=_datetime(getattr(repository, "pushed_at", None)),
            created_at=_datetime(getattr(repository, "created_at", None)),
        )


class GitHubCommit(BaseModel):
    """A commit from a repository's commit listing."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
    date: str = ""

    @classmethod
    def from_commit(cls, commit: Any) -> Self:
        git_commit = commit.commit
        author = getattr(git_commit, "author", None)
        authored = getattr(author, "date", None) if author is not None else None
        if isinstance(authored, datetime):
            date = authored.isoformat()
        else:
            date = _str(authored) or ""
        return cls(sha=commit.sha, message=git_commit.message or "", date=date)

    @property
    def headline(self) -> str:
        return self.message.split("\n", 1)[0]


class CommitStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    additions: int = 0
    deletions: int = 0
    files_changed: int = 0

    @classmethod
    def from_commit(cls, commit: Any) -> Self:
        stats = getattr(commit, "stats", None)
        files = getattr(commit, "files", None)
        return cls(
            additions=_int(getattr(stats, "additions", None)),
            deletions=_int(getattr(stats, "deletions", None)),
            files_changed=len(files) if isinstance(files, list) else 0,
        )
