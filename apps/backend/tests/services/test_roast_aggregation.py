"""Tests for folding repository summaries into roast data."""

from __future__ import annotations

from datetime import UTC, datetime

from schemas.roast import CodeAnalysis, CommitSummary, RepoSummary
from services.roast.aggregation import build_roast_data
from tests.fixtures.roast_fixtures import NOW, make_profile


def _summary(name: str, commits: list[CommitSummary] | None = None, **overrides) -> RepoSummary:
    data = {
        "name": name,
        "description": "useful",
        "language": "Python",
        "stars": 5,
        "size": 200,
        "last_push_days": 5,
        "created_days": 100,
        "recent_commits": commits or [],
    }
    data.update(overrides)
    return RepoSummary(**data)


def _commit(message: str, additions: int = 1, deletions: int = 0) -> CommitSummary:
    return CommitSummary(message=message, additions=additions, deletions=deletions, files_changed=1)


def _analysis(**overrides) -> CodeAnalysis:
    data = {
        "file_name": "app.py",
        "lines": 10,
        "has_console_log": False,
        "has_todos": False,
        "comment_ratio": 20,
        "snippet": "print('hi')",
        "deep_nesting": False,
        "long_lines": 0,
        "magic_numbers": 0,
        "single_letter_vars": 0,
    }
    data.update(overrides)
    return CodeAnalysis(**data)


def test_developer_snapshot_fills_defaults() -> None:
    profile = make_profile(bio=None, company=None, location=None, created_at=datetime(2020, 3, 1, tzinfo=UTC))

    data = build_roast_data(profile, [], now=NOW)

    assert data.developer.bio == "No bio"
    assert data.developer.company == "Unemployed"
    assert data.developer.location == "Unknown"
    assert data.developer.account_age == 6
    assert data.stats.avg_commit_size == 0


def test_shortest_commits_sorted_by_length() -> None:
    commits = [_commit("a much longer commit message here"), _commit("wip"), _commit("fix it"), _commit("")]

    data = build_roast_data(make_profile(), [_summary("repo", commits)], now=NOW)

    assert [c.message for c in data.commit_crimes.shortest] == ["wip", "fix it"]
    assert data.commit_crimes.shortest[0].repo == "repo"
    assert data.commit_crimes.shortest[0].changes == "+1/-0"


def test_largest_commits_over_threshold_descending() -> None:
    commits = [_commit("big", 300), _commit("huge", 5000), _commit("small", 200)]

    data = build_roast_data(make_profile(), [_summary("repo", commits)], now=NOW)

    assert [c.message for c in data.commit_crimes.largest] == ["huge", "big"]


def test_vague_and_repetitive_messages() -> None:
    commits = [_commit("update"), _commit(" Update "), _commit("UPDATE"), _commit("fixes bug"), _commit("WIP")]

    data = build_roast_data(make_profile(), [_summary("repo", commits)], now=NOW)

    assert [c.message for c in data.commit_crimes.vaguest] == ["update", " Update ", "UPDATE", "WIP"]
    assert [(r.message, r.count) for r in data.commit_crimes.repetitive] == [("update", 3)]


def test_code_horrors_only_for_problematic_analysis() -> None:
    clean = _summary("clean", code_analysis=_analysis())
    messy = _summary(
        "messy",
        commits=[_commit(f"c{n}") for n in range(7)],
        code_analysis=_analysis(has_console_log=True, comment_ratio=0),
    )
    unsampled = _summary("unsampled")

    data = build_roast_data(make_profile(), [clean, messy, unsampled], now=NOW)

    assert [h.name for h in data.code_horrors] == ["messy"]
    horror = data.code_horrors[0]
    assert horror.problems.console_logs
    assert horror.problems.no_comments
    assert len(horror.top_commits) == 5


def test_abandoned_projects_labels_and_order() -> None:
    summaries = [
        _summary("no-docs", description=None, last_push_days=50),
        _summary("ancient", last_push_days=1100),
        _summary("ghosted", last_push_days=400),
        _summary("unloved", stars=0, last_push_days=20),
        _summary("tiny", size=3, last_push_days=10),
        _summary("stale", last_push_days=200),
        _summary("healthy"),
    ]

    data = build_roast_data(make_profile(), summaries, now=NOW)
    issues = {p.name: p.issue for p in data.abandoned_projects}

    assert [p.name for p in data.abandoned_projects] == ["ancient", "ghosted", "stale", "no-docs", "unloved", "tiny"]
    assert issues["no-docs"] == "No description - not even trying to explain this mess"
    assert issues["ancient"] == "Abandoned 3 years ago"
    assert issues["ghosted"] == "Ghosted over a year ago"
    assert issues["unloved"] == "Zero stars - even you don't star your own work"
    assert issues["tiny"] == "Repo smaller than a hello world project"
    assert issues["stale"] == "Untouched for 200 days"


def test_stats() -> None:
    summaries = [
        _summary("a", [_commit("one", 10), _commit("two", 5)], stars=0, last_push_days=400),
        _summary("b", [_commit("three", 0)], stars=7, last_push_days=3),
    ]

    stats = build_roast_data(make_profile(), summaries, now=NOW).stats

    assert stats.total_repos_analyzed == 2
    assert stats.total_commits_found == 3
    assert stats.abandoned_count == 1
    assert stats.active_count == 1
    assert stats.total_stars == 7
    assert stats.avg_commit_size == 5
    assert stats.zero_star_repos == 1
