"""Per-repository detail collection.

Each repository is inspected concurrently: recent commits with line counts, a
sampled entry-point file, and whether tests or a `.gitignore` exist. Any
sub-fetch may fail without affecting the others; the summary simply carries
less detail. Cancellation is the exception and always propagates.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from schemas.roast import CodeAnalysis, CommitSummary, RepoSummary
from services.github.models import CommitStats, GitHubCommit, GitHubRepository, days_ago
from services.roast.cancellation import CancellationToken, race
from services.roast.code_analysis import analyze_code
from services.roast.exceptions import ClientAbortedError
from services.roast.interfaces import ProfileSourceProtocol


logger = logging.getLogger(__name__)

CODE_SAMPLE_PATHS: tuple[str, ...] = (
    "src/index.js",
    "index.js",
    "app.js",
    "main.js",
    "src/index.ts",
    "index.ts",
    "app.ts",
    "main.ts",
    "src/App.tsx",
    "src/App.jsx",
    "App.tsx",
    "App.jsx",
    "server.js",
    "src/server.js",
    "src/app.py",
    "main.py",
    "app.py",
    "__init__.py",
)

TEST_PATHS: tuple[str, ...] = ("test", "tests", "__tests__", "spec", "src/test")


class RepositoryCollector:
    """Collects `RepoSummary` records for one session."""

    def __init__(
        self,
        source: ProfileSourceProtocol,
        token: CancellationToken,
        *,
        commits_per_repo: int = 30,
        detailed_commits: int = 15,
        now: datetime | None = None,
    ) -> None:
        self.source = source
        self.token = token
        self.commits_per_repo = commits_per_repo
        self.detailed_commits = detailed_commits
        self.now = now

    async def collect_all(self, owner: str, repositories: list[GitHubRepository]) -> list[RepoSummary]:
        summaries = await asyncio.gather(*(self.collect(owner, repository) for repository in repositories))
        return list(summaries)

    async def collect(self, owner: str, repository: GitHubRepository) -> RepoSummary:
        commits, analysis, has_tests, has_gitignore = await asyncio.gather(
            self._recent_commits(owner, repository.name),
            self._sample_code(owner, repository.name),
            self._has_tests(owner, repository.name),
            self._path_exists(owner, repository.name, ".gitignore"),
        )
        if analysis is not None:
            analysis = analysis.model_copy(update={"has_tests": has_tests, "has_gitignore": has_gitignore})

        return RepoSummary(
            name=repository.name,
            description=repository.description,
            language=repository.language,
            stars=repository.stars,
            forks=repository.forks,
            last_push_days=days_ago(repository.pushed_at, self.now),
            created_days=days_ago(repository.created_at, self.now),
            size=repository.size,
            recent_commits=commits,
            code_analysis=analysis,
        )

    async def _recent_commits(self, owner: str, repo: str) -> list[CommitSummary]:
        try:
            commits = await race(self.source.list_commits(owner, repo, per_page=self.commits_per_repo), self.token)
        except ClientAbortedError:
            raise
        except Exception as e:
            logger.debug(f"Commit listing failed for {owner}/{repo}: {e}")
            return []

        details = commits[: self.detailed_commits]
        stats = await asyncio.gather(*(self._commit_stats(owner, repo, commit) for commit in details))
        return [
            CommitSummary(
                message=commit.headline,
                additions=commit_stats.additions,
                deletions=commit_stats.deletions,
                files_changed=commit_stats.files_changed,
                date=commit.date,
            )
            for commit, commit_stats in zip(details, stats, strict=True)
        ]

    async def _commit_stats(self, owner: str, repo: str, commit: GitHubCommit) -> CommitStats:
        try:
            return await race(self.source.get_commit_stats(owner, repo, commit.sha), self.token)
        except ClientAbortedError:
            raise
        except Exception as e:
            logger.debug(f"Commit detail failed for {owner}/{repo}@{commit.sha}: {e}")
            return CommitStats()

    async def _sample_code(self, owner: str, repo: str) -> CodeAnalysis | None:
        for path in CODE_SAMPLE_PATHS:
            self.token.raise_if_cancelled()
            try:
                text = await race(self.source.get_file_text(owner, repo, path), self.token)
            except ClientAbortedError:
                raise
            except Exception as e:
                logger.debug(f"Probe of {owner}/{repo}/{path} failed: {e}")
                continue
            if text is not None:
                return analyze_code(text, path)
        return None

    async def _has_tests(self, owner: str, repo: str) -> bool:
        for path in TEST_PATHS:
            if await self._path_exists(owner, repo, path):
                return True
        return False

    async def _path_exists(self, owner: str, repo: str, path: str) -> bool:
        try:
            return await race(self.source.path_exists(owner, repo, path), self.token)
        except ClientAbortedError:
            raise
        except Exception:
            return False
