from __future__ import annotations

import datetime as dt
import sys
import time

from .aggregate import collect_activity
from .models import Settings
from .render import print_commit_stats
from .scan import FolderScanner


def _perf(settings: Settings, label: str, started: float) -> None:
    if settings.verbose:
        print(f"[Perf] {label}: {time.perf_counter() - started:.2f}s")


def run_stats(settings: Settings, *, now: dt.datetime | None = None) -> int:
    """Scan, aggregate and print the heatmap. Fatal errors propagate to the caller."""
    if now is None:
        now = dt.datetime.now().astimezone()

    print(f"Scanning {settings.folder} for commits by {settings.email}...")

    started = time.perf_counter()
    scanner = FolderScanner(ignore_dirnames=settings.ignore_dirnames, markers=settings.markers, jobs=settings.jobs)
    repos = scanner.scan(settings.folder)
    _perf(settings, "Scan", started)
    if settings.verbose:
        print(f"[Info] Processing {len(repos)} repositories")

    started = time.perf_counter()
    stats = collect_activity(settings.email, repos, now=now)
    _perf(settings, "Stats processing", started)
    if settings.verbose:
        print(f"[Info] {stats.commits_matched} commits in range, {stats.commits_out_of_range} older")

    started = time.perf_counter()
    print_commit_stats(stats.table, now=now, color=settings.color)
    _perf(settings, "UI rendering", started)

    if stats.skipped:
        print(f"\nSkipped {len(stats.skipped)} of {len(repos)} repositories:", file=sys.stderr)
        for line in stats.skipped:
            print(f"- {line}", file=sys.stderr)
    return 0
