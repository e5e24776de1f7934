from __future__ import annotations

import datetime as dt
import subprocess
from pathlib import Path

GIT_MARKER = ".git"
JJ_MARKER = ".jj"

# author email, tab, author time as unix seconds
GIT_LOG_FORMAT = "%ae%x09%at"
JJ_LOG_TEMPLATE = 'author.email() ++ "\\t" ++ author.timestamp().utc().format("%Y-%m-%dT%H:%M:%SZ") ++ "\\n"'

CommitRecord = tuple[str, dt.datetime]


class NotARepositoryError(RuntimeError):
    """The path cannot be opened as a repository with a reachable head commit."""


class HistoryError(RuntimeError):
    """Reading the history of an opened repository failed."""


def run_git(args: list[str], cwd: Path, timeout_s: int | None = None) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        encoding="utf-8",
        errors="surrogateescape",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def run_jj(args: list[str], cwd: Path, timeout_s: int | None = None) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["jj", *args],
        cwd=str(cwd),
        capture_output=True,
        encoding="utf-8",
        errors="surrogateescape",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def get_global_email() -> str:
    try:
        code, out, _ = run_git(["config", "--global", "--get", "user.email"], cwd=Path.cwd())
    except OSError:
        return ""
    if code == 0:
        return out.strip()
    return ""


def _parse_iso(value: str) -> dt.datetime | None:
    s = (value or "").strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        d = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    return d


def open_repository(repo: Path) -> str:
    """
    Resolve the commit HEAD points at.

    Raises NotARepositoryError when `repo` is not a git work tree or HEAD has no
    commit yet (unborn branch), and HistoryError for any other git failure.
    """
    if not repo.is_dir():
        raise NotARepositoryError(f"path not found: {repo}")
    try:
        code, _, err = run_git(["rev-parse", "--git-dir"], cwd=repo)
    except OSError as e:
        raise HistoryError(f"could not run git in {repo}: {e}") from e
    if code != 0:
        raise NotARepositoryError(f"not a git repository: {repo} ({err.strip()})")

    code, out, err = run_git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
    if code == 1 and not out.strip():
        raise NotARepositoryError(f"no commits on HEAD: {repo}")
    if code != 0:
        raise HistoryError(f"could not resolve HEAD in {repo}: {err.strip()}")
    return out.strip()


def read_git_commits(repo: Path, head: str) -> list[CommitRecord]:
    code, out, err = run_git(["log", head, f"--format={GIT_LOG_FORMAT}"], cwd=repo)
    if code != 0:
        raise HistoryError(f"git log failed in {repo}: {err.strip()}")

    commits: list[CommitRecord] = []
    for line in out.splitlines():
        if not line.strip():
            continue
        email, _, seconds = line.rpartition("\t")
        try:
            when = dt.datetime.fromtimestamp(int(seconds), tz=dt.timezone.utc)
        except ValueError as e:
            raise HistoryError(f"unexpected git log line in {repo}: {line!r}") from e
        commits.append((email, when))
    return commits


def read_jj_commits(repo: Path) -> list[CommitRecord]:
    try:
        code, out, err = run_jj(["log", "--no-graph", "-r", "::@", "-T", JJ_LOG_TEMPLATE], cwd=repo)
    except FileNotFoundError as e:
        raise NotARepositoryError(f"jj is not installed, cannot open {repo}") from e
    if code != 0:
        raise NotARepositoryError(f"not a jj repository: {repo} ({err.strip()})")

    commits: list[CommitRecord] = []
    for line in out.splitlines():
        email, sep, stamp = line.partition("\t")
        if not sep:
            continue
        when = _parse_iso(stamp)
        if when is None:
            continue
        commits.append((email.strip(), when))
    return commits


def commit_history(repo: Path) -> list[CommitRecord]:
    """(author email, author time) for every commit reachable from the current head."""
    if (repo / GIT_MARKER).exists():
        return read_git_commits(repo, open_repository(repo))
    if (repo / JJ_MARKER).is_dir():
        return read_jj_commits(repo)
    raise NotARepositoryError(f"no repository metadata in {repo}")
