from __future__ import annotations

import datetime as dt
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from .activity_days import DAYS_IN_LAST_SIX_MONTHS, OUT_OF_RANGE, calc_offset, count_days_since
from .git import CommitRecord, NotARepositoryError, commit_history
from .models import ActivityStats, CommitCountTable

HistoryReader = Callable[[Path], Iterable[CommitRecord]]


def new_commit_table() -> CommitCountTable:
    return {day: 0 for day in range(1, DAYS_IN_LAST_SIX_MONTHS + 1)}


def fill_commits(
    email: str,
    repo: Path,
    stats: ActivityStats,
    *,
    now: dt.datetime,
    history: HistoryReader = commit_history,
) -> None:
    """
    Add the commits `email` authored in `repo` to `stats.table`.

    A repository that cannot be opened is reported on stderr and recorded in
    `stats.skipped`; every other failure propagates.
    """
    try:
        commits = history(repo)
    except NotARepositoryError as e:
        print(f"Skipping {repo}: {e}", file=sys.stderr)
        stats.skipped.append(f"{repo}: {e}")
        return

    offset = calc_offset(now)
    for author_email, when in commits:
        if author_email != email:
            continue
        days = count_days_since(when, now=now)
        if days == OUT_OF_RANGE:
            stats.commits_out_of_range += 1
            continue
        days_ago = days + offset
        stats.table[days_ago] = stats.table.get(days_ago, 0) + 1
        stats.commits_matched += 1
    stats.repos_read += 1


def collect_activity(
    email: str,
    repos: Iterable[Path],
    *,
    now: dt.datetime,
    history: HistoryReader = commit_history,
) -> ActivityStats:
    stats = ActivityStats(table=new_commit_table())
    for repo in sorted(repos):
        fill_commits(email, repo, stats, now=now, history=history)
    return stats


def process_repositories(
    email: str,
    repos: Iterable[Path],
    *,
    now: dt.datetime,
    history: HistoryReader = commit_history,
) -> CommitCountTable:
    return collect_activity(email, repos, now=now, history=history).table
