"""Schemas for the roast endpoint: inbound request, SSE events, roast data."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


RoastMode = Literal["roast", "feedback"]
RoastEventType = Literal[
    "status",
    "response_start",
    "response_chunk",
    "response_end",
    "error",
]

TERMINAL_EVENT_TYPES: frozenset[str] = frozenset({"response_end", "error"})

GITHUB_HOST_MARKER = "github.com/"


def normalize_target(raw: str) -> str:
    """Reduce a handle, `@handle` or profile URL to the bare GitHub login.

    `https://github.com/octocat/` and `github.com/octocat?tab=repositories`
    both become `octocat`.
    """
    target = raw.strip()
    marker_at = target.lower().find(GITHUB_HOST_MARKER)
    if marker_at != -1:
        target = target[marker_at + len(GITHUB_HOST_MARKER) :]
        for separator in ("/", "?", "#"):
            target = target.split(separator, 1)[0]
    return target.lstrip("@").strip()


class RoastRequest(BaseModel):
    """Request payload for streaming a roast or a review of a GitHub profile."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=39,
        validation_alias=AliasChoices("username", "target_identifier"),
        description="GitHub handle or profile URL.",
    )
    mode: RoastMode = Field(
        default="roast",
        validation_alias=AliasChoices("mode", "output_mode"),
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("username", mode="before")
    @classmethod
    def _normalize_username(cls, v: object) -> object:
        if isinstance(v, str):
            return normalize_target(v)
        return v

    @property
    def is_roast(self) -> bool:
        return self.mode == "roast"


class RoastSseEvent(BaseModel):
    """One frame of the roast stream.

    `status`, `response_chunk` and `error` carry `content`; `response_start`
    and `response_end` are bare markers.
    """

    type: RoastEventType
    content: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def status(cls, content: str) -> RoastSseEvent:
        return cls(type="status", content=content)

    @classmethod
    def response_start(cls) -> RoastSseEvent:
        return cls(type="response_start")

    @classmethod
    def chunk(cls, content: str) -> RoastSseEvent:
        return cls(type="response_chunk", content=content)

    @classmethod
    def response_end(cls) -> RoastSseEvent:
        return cls(type="response_end")

    @classmethod
    def error(cls, content: str) -> RoastSseEvent:
        return cls(type="error", content=content)

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES

    def to_sse(self) -> str:
        """Serialize event to a `data:` SSE frame."""
        return f"data: {self.model_dump_json(exclude_none=True)}\n\n"


# -----------------------------------------------------------------------------
# Collected repository data
# -----------------------------------------------------------------------------


class CommitSummary(BaseModel):
    """First line of a commit message plus its size."""

    message: str
    additions: int = 0
    deletions: int = 0
    files_changed: int = 0
    date: str = ""

    @property
    def changes(self) -> str:
        return f"+{self.additions}/-{self.deletions}"


class CodeAnalysis(BaseModel):
    """Heuristic smells found in one sampled source file."""

    file_name: str
    lines: int
    has_console_log: bool
    has_todos: bool
    comment_ratio: int = Field(description="Percentage of comment lines.")
    snippet: str
    deep_nesting: bool
    long_lines: int
    magic_numbers: int
    single_letter_vars: int
    has_tests: bool = False
    has_gitignore: bool = False


class RepoSummary(BaseModel):
    name: str
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    last_push_days: int = 0
    created_days: int = 0
    size: int = 0
    recent_commits: list[CommitSummary] = Field(default_factory=list)
    code_analysis: CodeAnalysis | None = None


# -----------------------------------------------------------------------------
# Aggregated roast data (rendered into the prompt as JSON)
# -----------------------------------------------------------------------------


class DeveloperSnapshot(BaseModel):
    username: str
    account_age: int
    bio: str
    company: str
    location: str
    followers: int
    total_repos: int


class ShortCommit(BaseModel):
    message: str
    repo: str
    changes: str
    files: int


class LargeCommit(BaseModel):
    message: str
    repo: str
    additions: int
    deletions: int
    files: int


class VagueCommit(BaseModel):
    message: str
    repo: str
    changes: str


class RepeatedMessage(BaseModel):
    message: str
    count: int


class CommitCrimes(BaseModel):
    shortest: list[ShortCommit] = Field(default_factory=list)
    largest: list[LargeCommit] = Field(default_factory=list)
    vaguest: list[VagueCommit] = Field(default_factory=list)
    repetitive: list[RepeatedMessage] = Field(default_factory=list)


class CodeProblems(BaseModel):
    console_logs: bool
    todos: bool
    deep_nesting: bool
    no_comments: bool
    long_lines: int
    magic_numbers: int
    single_letter_vars: int
    comment_percentage: int

    @property
    def has_any(self) -> bool:
        return (
            self.console_logs
            or self.todos
            or self.deep_nesting
            or self.no_comments
            or self.long_lines > 10
            or self.magic_numbers > 5
            or self.single_letter_vars > 3
        )


class CommitHeadline(BaseModel):
    message: str
    changes: str


class CodeHorror(BaseModel):
    name: str
    language: str | None
    file: str
    stars: int
    problems: CodeProblems
    code_snippet: str
    top_commits: list[CommitHeadline] = Field(default_factory=list)


class AbandonedProject(BaseModel):
    name: str
    issue: str
    language: str | None
    days_since_touch: int
    stars: int
    size: int


class RoastStats(BaseModel):
    total_repos_analyzed: int
    total_commits_found: int
    abandoned_count: int
    active_count: int
    total_stars: int
    avg_commit_size: int
    zero_star_repos: int


class RoastData(BaseModel):
    developer: DeveloperSnapshot
    commit_crimes: CommitCrimes
    code_horrors: list[CodeHorror]
    abandoned_projects: list[AbandonedProject]
    stats: RoastStats
