"""Fold per-repository summaries into the data block the prompt is built from."""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from schemas.roast import (
    AbandonedProject,
    CodeHorror,
    CodeProblems,
    CommitCrimes,
    CommitHeadline,
    CommitSummary,
    DeveloperSnapshot,
    LargeCommit,
    RepeatedMessage,
    RepoSummary,
    RoastData,
    RoastStats,
    ShortCommit,
    VagueCommit,
)
from services.github.models import GitHubProfile


VAGUE_MESSAGE_RE = re.compile(
    r"^(update|fix|changes?|stuff|test|wip|refactor|done|commit|edit|setup|initial|ui|pushed|save)$",
    re.IGNORECASE,
)

SHORT_MESSAGE_LENGTH = 20
LARGE_COMMIT_ADDITIONS = 200
REPEATED_MESSAGE_MIN_COUNT = 3

MAX_SHORTEST = 12
MAX_LARGEST = 8
MAX_VAGUEST = 20
MAX_REPETITIVE = 5
MAX_CODE_HORRORS = 15
MAX_ABANDONED = 15
HORROR_TOP_COMMITS = 5

ABANDONED_AFTER_DAYS = 180
ACTIVE_WITHIN_DAYS = 30
TINY_REPO_KB = 10


@dataclass(frozen=True, slots=True)
class _RepoCommit:
    repo: str
    commit: CommitSummary


def _collect_commits(summaries: list[RepoSummary]) -> list[_RepoCommit]:
    return [_RepoCommit(repo=summary.name, commit=commit) for summary in summaries for commit in summary.recent_commits]


def _commit_crimes(commits: list[_RepoCommit]) -> CommitCrimes:
    short = sorted(
        (c for c in commits if 0 < len(c.commit.message) < SHORT_MESSAGE_LENGTH),
        key=lambda c: len(c.commit.message),
    )
    large = sorted(
        (c for c in commits if c.commit.additions > LARGE_COMMIT_ADDITIONS),
        key=lambda c: c.commit.additions,
        reverse=True,
    )
    vague = [c for c in commits if VAGUE_MESSAGE_RE.match(c.commit.message.strip())]

    counts = Counter(c.commit.message.strip().lower() for c in commits)
    repeated = sorted(
        ((message, count) for message, count in counts.items() if count >= REPEATED_MESSAGE_MIN_COUNT),
        key=lambda item: item[1],
        reverse=True,
    )

    return CommitCrimes(
        shortest=[
            ShortCommit(
                message=c.commit.message,
                repo=c.repo,
                changes=c.commit.changes,
                files=c.commit.files_changed,
            )
            for c in short[:MAX_SHORTEST]
        ],
        largest=[
            LargeCommit(
                message=c.commit.message,
                repo=c.repo,
                additions=c.commit.additions,
                deletions=c.commit.deletions,
                files=c.commit.files_changed,
            )
            for c in large[:MAX_LARGEST]
        ],
        vaguest=[
            VagueCommit(message=c.commit.message, repo=c.repo, changes=c.commit.changes) for c in vague[:MAX_VAGUEST]
        ],
        repetitive=[RepeatedMessage(message=message, count=count) for message, count in repeated[:MAX_REPETITIVE]],
    )


def _code_horrors(summaries: list[RepoSummary]) -> list[CodeHorror]:
    horrors: list[CodeHorror] = []
    for summary in summaries:
        analysis = summary.code_analysis
        if analysis is None:
            continue
        problems = CodeProblems(
            console_logs=analysis.has_console_log,
            todos=analysis.has_todos,
            deep_nesting=analysis.deep_nesting,
            no_comments=analysis.comment_ratio < 5,
            long_lines=analysis.long_lines,
            magic_numbers=analysis.magic_numbers,
            single_letter_vars=analysis.single_letter_vars,
            comment_percentage=analysis.comment_ratio,
        )
        if not problems.has_any:
            continue
        horrors.append(
            CodeHorror(
                name=summary.name,
                language=summary.language,
                file=analysis.file_name,
                stars=summary.stars,
                problems=problems,
                code_snippet=analysis.snippet,
                top_commits=[
                    CommitHeadline(message=commit.message, changes=commit.changes)
                    for commit in summary.recent_commits[:HORROR_TOP_COMMITS]
                ],
            )
        )
        if len(horrors) == MAX_CODE_HORRORS:
            break
    return horrors


def _abandoned_issue(summary: RepoSummary) -> str:
    if not summary.description:
        return "No description - not even trying to explain this mess"
    if summary.last_push_days > 730:
        return f"Abandoned {math.floor(summary.last_push_days / 365 + 0.5)} years ago"
    if summary.last_push_days > 365:
        return "Ghosted over a year ago"
    if summary.stars == 0:
        return "Zero stars - even you don't star your own work"
    if summary.last_push_days > ABANDONED_AFTER_DAYS:
        return f"Untouched for {summary.last_push_days} days"
    return "Repo smaller than a hello world project"


def _is_abandoned(summary: RepoSummary) -> bool:
    return (
        not summary.description
        or summary.last_push_days > ABANDONED_AFTER_DAYS
        or summary.stars == 0
        or summary.size < TINY_REPO_KB
    )


def _abandoned_projects(summaries: list[RepoSummary]) -> list[AbandonedProject]:
    projects = [
        AbandonedProject(
            name=summary.name,
            issue=_abandoned_issue(summary),
            language=summary.language,
            days_since_touch=summary.last_push_days,
            stars=summary.stars,
            size=summary.size,
        )
        for summary in summaries
        if _is_abandoned(summary)
    ]
    projects.sort(key=lambda project: project.days_since_touch, reverse=True)
    return projects[:MAX_ABANDONED]


def build_roast_data(
    profile: GitHubProfile,
    summaries: list[RepoSummary],
    now: datetime | None = None,
) -> RoastData:
    """Aggregate a profile and its repository summaries into `RoastData`."""
    commits = _collect_commits(summaries)
    total_additions = sum(c.commit.additions for c in commits)

    return RoastData(
        developer=DeveloperSnapshot(
            username=profile.username,
            account_age=profile.joined_years(now),
            bio=profile.bio or "No bio",
            company=profile.company or "Unemployed",
            location=profile.location or "Unknown",
            followers=profile.followers,
            total_repos=profile.public_repos,
        ),
        commit_crimes=_commit_crimes(commits),
        code_horrors=_code_horrors(summaries),
        abandoned_projects=_abandoned_projects(summaries),
        stats=RoastStats(
            total_repos_analyzed=len(summaries),
            total_commits_found=len(commits),
            abandoned_count=sum(1 for s in summaries if s.last_push_days > ABANDONED_AFTER_DAYS),
            active_count=sum(1 for s in summaries if s.last_push_days < ACTIVE_WITHIN_DAYS),
            total_stars=sum(s.stars for s in summaries),
            avg_commit_size=math.floor(total_additions / max(len(commits), 1) + 0.5),
            zero_star_repos=sum(1 for s in summaries if s.stars == 0),
        ),
    )
