from __future__ import annotations

import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

from .git import GIT_MARKER, JJ_MARKER

DEFAULT_IGNORE_DIRNAMES = frozenset({"node_modules", "vendor"})
DEFAULT_MARKERS = (GIT_MARKER, JJ_MARKER)


class ScanError(RuntimeError):
    """A directory under the scan root could not be read."""


def default_jobs() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


def _list_directory(folder: Path, markers: frozenset[str], ignore_dirnames: frozenset[str]) -> tuple[bool, list[Path]]:
    """
    Read one directory. Returns whether it holds a repository marker and the
    child directories still to explore.
    """
    is_repo = False
    subdirs: list[Path] = []
    with os.scandir(folder) as it:
        for entry in it:
            if not entry.is_dir():
                continue
            if entry.name in markers:
                is_repo = True
                continue
            if entry.name in ignore_dirnames:
                continue
            subdirs.append(Path(entry.path))
    return is_repo, subdirs


class FolderScanner:
    """
    Finds repository roots below a directory.

    Every directory is listed by its own task on a thread pool. Tasks never
    touch shared state: each returns its findings to the coordinating thread,
    which owns the result set and the visited set, and schedules the children.
    """

    def __init__(
        self,
        *,
        ignore_dirnames: frozenset[str] | set[str] = DEFAULT_IGNORE_DIRNAMES,
        markers: tuple[str, ...] | list[str] = DEFAULT_MARKERS,
        jobs: int | None = None,
    ) -> None:
        self.ignore_dirnames = frozenset(ignore_dirnames)
        self.markers = frozenset(markers)
        self.jobs = int(jobs) if jobs else default_jobs()

    def scan(self, root: Path) -> set[Path]:
        root = Path(root).expanduser().resolve()
        if not root.is_dir():
            raise ScanError(f"scan root is not a readable directory: {root}")

        repos: set[Path] = set()
        visited: set[str] = set()
        pending: dict[Future, Path] = {}

        with ThreadPoolExecutor(max_workers=self.jobs) as ex:

            def submit(folder: Path) -> None:
                real = os.path.realpath(folder)
                if real in visited:
                    return
                visited.add(real)
                pending[ex.submit(_list_directory, folder, self.markers, self.ignore_dirnames)] = folder

            submit(root)
            try:
                while pending:
                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    for fut in done:
                        folder = pending.pop(fut)
                        try:
                            is_repo, subdirs = fut.result()
                        except OSError as e:
                            raise ScanError(f"could not read directory {folder}: {e}") from e
                        if is_repo:
                            repos.add(folder)
                        for sub in subdirs:
                            submit(sub)
            except BaseException:
                for fut in pending:
                    fut.cancel()
                raise
        return repos


def scan(
    root: Path,
    *,
    ignore_dirnames: frozenset[str] | set[str] = DEFAULT_IGNORE_DIRNAMES,
    markers: tuple[str, ...] | list[str] = DEFAULT_MARKERS,
    jobs: int | None = None,
) -> set[Path]:
    return FolderScanner(ignore_dirnames=ignore_dirnames, markers=markers, jobs=jobs).scan(root)
