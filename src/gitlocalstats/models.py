from __future__ import annotations

import dataclasses
from pathlib import Path

CommitCountTable = dict[int, int]  # day offset -> commits
Column = list[int]  # one week, 7 days
Grid = dict[int, Column]  # week index (0 = most recent) -> column


@dataclasses.dataclass(frozen=True)
class Settings:
    folder: Path
    email: str
    ignore_dirnames: frozenset[str]
    markers: tuple[str, ...]
    jobs: int
    color: bool = True
    verbose: bool = False


@dataclasses.dataclass
class ActivityStats:
    table: CommitCountTable
    repos_read: int = 0
    commits_matched: int = 0
    commits_out_of_range: int = 0
    skipped: list[str] = dataclasses.field(default_factory=list)  # "path: reason"
